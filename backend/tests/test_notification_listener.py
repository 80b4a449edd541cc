from app.services.notification_listener import NotificationListener
from app.services.matchmaking.types import NotificationStatus, PlayerStatus, SessionUpdated
from tests.helpers import CONFIG, FakeDispatcher, InMemoryStore, at, session

A, P = PlayerStatus.ACCEPTED, PlayerStatus.PENDING
N = NotificationStatus


def _listener(game, sessions, dispatcher=None):
    store = InMemoryStore(sessions=sessions, games=[game])
    dispatcher = dispatcher or FakeDispatcher()
    return NotificationListener(store, store, dispatcher, CONFIG), store, dispatcher


def test_confirmed_session_gets_one_confirmation(game):
    listener, store, dispatcher = _listener(game, [session("g1", at(10), at(12), {"u1": A, "u2": A}, sid="s1")])
    event = SessionUpdated(session=store.get_session("s1"), now=at(9, 30))

    listener.on_session_updated(event)
    listener.on_session_updated(event)

    assert [s.id for s in dispatcher.confirmed] == ["s1"]
    assert store.get_session("s1").notification_status == N.CONFIRMED_SENT


def test_preliminary_notice_inside_two_hours_only(game):
    listener, store, dispatcher = _listener(game, [session("g1", at(10), at(12), {"u1": A, "u2": P}, sid="s1")])

    assert listener.handle(store.get_session("s1"), at(7, 59)) is None
    assert listener.handle(store.get_session("s1"), at(8, 1)) == N.PRELIMINARY_SENT
    assert listener.handle(store.get_session("s1"), at(8, 30)) is None

    assert [s.id for s in dispatcher.preliminary] == ["s1"]
    assert dispatcher.confirmed == []


def test_preliminary_then_confirmed(game):
    listener, store, dispatcher = _listener(game, [session("g1", at(10), at(12), {"u1": A, "u2": P}, sid="s1")])
    listener.handle(store.get_session("s1"), at(8, 30))

    s = store.get_session("s1")
    s.player("u2").status = A
    store.save_sessions([s])
    status = listener.handle(store.get_session("s1"), at(9, 15))

    assert status == N.CONFIRMED_SENT
    assert len(dispatcher.preliminary) == 1
    assert len(dispatcher.confirmed) == 1


def test_stale_event_is_resolved_against_stored_status(game):
    listener, store, dispatcher = _listener(
        game,
        [session("g1", at(10), at(12), {"u1": A, "u2": A}, sid="s1", notification_status=N.CONFIRMED_SENT)],
    )
    stale = session("g1", at(10), at(12), {"u1": A, "u2": A}, sid="s1")

    assert listener.handle(stale, at(9, 30)) is None
    assert dispatcher.confirmed == []


def test_deleted_session_is_skipped(game):
    listener, store, dispatcher = _listener(game, [])
    gone = session("g1", at(10), at(12), {"u1": A, "u2": A}, sid="missing")

    assert listener.handle(gone, at(9, 30)) is None
    assert dispatcher.confirmed == []


def test_dispatch_failure_still_advances_status(game):
    listener, store, _ = _listener(
        game,
        [session("g1", at(10), at(12), {"u1": A, "u2": A}, sid="s1")],
        dispatcher=FakeDispatcher(fail=True),
    )

    status = listener.handle(store.get_session("s1"), at(9, 30))

    assert status == N.CONFIRMED_SENT
    assert store.get_session("s1").notification_status == N.CONFIRMED_SENT


def test_sweep_notifies_sessions_crossing_threshold(game):
    listener, store, dispatcher = _listener(
        game,
        [
            session("g1", at(10), at(12), {"u1": A, "u2": P}, sid="soon"),
            session("g1", at(15), at(17), {"u1": A, "u2": P}, sid="later"),
            session("g1", at(6), at(7), {"u1": A, "u2": P}, sid="over"),
        ],
    )

    assert listener.sweep(at(8, 30)) == 1
    assert listener.sweep(at(8, 31)) == 0
    assert [s.id for s in dispatcher.preliminary] == ["soon"]
