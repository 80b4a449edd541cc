from datetime import timedelta

import pytest
from sqlalchemy.orm import sessionmaker

from app.core.errors import SessionNotFoundError
from app.models.game import Game as GameRow
from app.services import events, matchmaking_service, notification_listener
from app.services.matchmaking.types import NotificationStatus, PlayerStatus
from app.services.session_store import SqlMatchmakingStore
from tests.helpers import FakeDispatcher, at


@pytest.fixture
def seeded(db):
    db.add(GameRow(id="g1", title="Deep Rock Galactic", min_players=2, max_players=4))
    db.commit()
    return db


@pytest.fixture
def published():
    seen = []
    events.subscribe(lambda e: seen.append(e.session.id))
    return seen


def _windows(db, now):
    matchmaking_service.create_window(db, "u1", at(10), at(12), now=now)
    matchmaking_service.create_window(db, "u2", at(10), at(12), now=now)


def test_creating_windows_plans_a_session(seeded, published, now):
    _windows(seeded, now)

    sessions = matchmaking_service.list_upcoming_sessions(seeded, now=now)

    assert len(sessions) == 1
    assert sessions[0]["status"] == "PRELIMINARY"
    assert sessions[0]["duration_minutes"] == 120
    assert sessions[0]["game"]["title"] == "Deep Rock Galactic"
    assert published == [sessions[0]["id"]]


def test_accepting_makes_session_confirmed_near_start(seeded, now):
    _windows(seeded, now)
    sid = matchmaking_service.list_upcoming_sessions(seeded, now=now)[0]["id"]

    matchmaking_service.accept_session(seeded, sid, "u1", now=now)
    matchmaking_service.accept_session(seeded, sid, "u2", now=now)

    late = at(9, 30)
    s = matchmaking_service.list_upcoming_sessions(seeded, now=late)[0]
    assert s["status"] == "CONFIRMED"
    assert {p["status"] for p in s["players"]} == {"ACCEPTED"}


def test_reject_not_available_replans_without_the_user(seeded, now):
    _windows(seeded, now)
    matchmaking_service.create_window(seeded, "u3", at(10), at(12), now=now)
    sid = matchmaking_service.list_upcoming_sessions(seeded, now=now)[0]["id"]

    result = matchmaking_service.reject_session(seeded, sid, "u3", reason="NOT_AVAILABLE", now=now)

    assert len(result.deleted_window_ids) == 1
    s = matchmaking_service.list_upcoming_sessions(seeded, now=now)[0]
    assert s["id"] == sid
    assert sorted(p["user_id"] for p in s["players"]) == ["u1", "u2"]


def test_deleting_window_removes_sessions_that_no_longer_fit(seeded, now):
    _windows(seeded, now)
    window_id = matchmaking_service.list_windows(seeded, "u2")[0].id

    matchmaking_service.delete_window(seeded, window_id, "u2", now=now)

    assert matchmaking_service.list_upcoming_sessions(seeded, now=now) == []


def test_failed_action_rolls_back(seeded, now):
    with pytest.raises(SessionNotFoundError):
        matchmaking_service.accept_session(seeded, "missing", "u1", now=now)

    assert matchmaking_service.list_upcoming_sessions(seeded, now=now) == []


def test_sessions_for_user_filter(seeded, now):
    _windows(seeded, now)

    assert len(matchmaking_service.list_upcoming_sessions(seeded, now=now, user_id="u1")) == 1
    assert matchmaking_service.list_upcoming_sessions(seeded, now=now, user_id="u9") == []


def test_event_subscriber_sends_notice_and_persists_status(seeded, db_engine, monkeypatch):
    dispatcher = FakeDispatcher()
    monkeypatch.setattr(notification_listener, "SessionLocal", sessionmaker(bind=db_engine))
    monkeypatch.setattr(notification_listener, "DiscordNotifier", lambda game_titles=None: dispatcher)
    events.subscribe(notification_listener.handle_session_updated)
    now = at(8, 30)

    _windows(seeded, now)

    sid = matchmaking_service.list_upcoming_sessions(seeded, now=now)[0]["id"]
    seeded.expire_all()
    assert SqlMatchmakingStore(seeded).get_session(sid).notification_status == NotificationStatus.PRELIMINARY_SENT
    assert [s.id for s in dispatcher.preliminary] == [sid]


def test_notification_sweep(seeded, monkeypatch):
    dispatcher = FakeDispatcher()
    monkeypatch.setattr(notification_listener, "DiscordNotifier", lambda game_titles=None: dispatcher)
    _windows(seeded, at(7))

    assert notification_listener.run_notification_sweep(seeded, now=at(7)) == 0
    assert notification_listener.run_notification_sweep(seeded, now=at(8) + timedelta(minutes=5)) == 1
    assert len(dispatcher.preliminary) == 1
