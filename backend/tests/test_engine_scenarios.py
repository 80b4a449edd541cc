import itertools
from datetime import timedelta

from app.services.matchmaking.engine import plan_matchmaking, run_matchmaking_pass
from app.services.matchmaking.types import Game, GlobalPreference, NotificationStatus, PlayerStatus
from tests.helpers import CONFIG, InMemoryStore, at, session, window

GAME = Game(id="g1", title="Deep Rock Galactic", min_players=2, max_players=4)
A, P, R = PlayerStatus.ACCEPTED, PlayerStatus.PENDING, PlayerStatus.REJECTED


def _pass(store, now):
    return run_matchmaking_pass(store, store, now, CONFIG)


def _spans(sessions):
    return [(s.start_time, s.end_time, len(s.players)) for s in sessions]


def test_four_hours_gives_two_target_sessions(now):
    store = InMemoryStore(
        windows=[window("a", "u1", at(10), at(14)), window("b", "u2", at(10), at(14))],
        games=[GAME],
    )

    plan = _pass(store, now)

    assert _spans(plan.selected) == [(at(10), at(12), 2), (at(12), at(14), 2)]


def test_short_remainder_is_folded_into_one_session(now):
    store = InMemoryStore(
        windows=[window("a", "u1", at(10), at(12, 30)), window("b", "u2", at(10), at(12, 30))],
        games=[GAME],
    )

    plan = _pass(store, now)

    assert _spans(plan.selected) == [(at(10), at(12, 30), 2)]


def test_three_hours_gives_target_plus_minimum(now):
    store = InMemoryStore(
        windows=[window("a", "u1", at(10), at(13)), window("b", "u2", at(10), at(13))],
        games=[GAME],
    )

    plan = _pass(store, now)

    assert _spans(plan.selected) == [(at(10), at(12), 2), (at(12), at(13), 2)]


def test_staggered_windows(now):
    store = InMemoryStore(
        windows=[
            window("a", "u1", at(9), at(13)),
            window("b", "u2", at(10), at(15)),
            window("c", "u3", at(11), at(12)),
        ],
        games=[GAME],
    )

    plan = _pass(store, now)

    assert _spans(plan.selected) == [(at(10), at(12), 3), (at(12), at(13), 2)]
    assert sorted(plan.selected[1].user_ids) == ["u1", "u2"]


def test_accepted_player_survives_rerun_with_same_signature(now):
    store = InMemoryStore(
        windows=[window("a", "u1", at(10), at(12)), window("b", "u2", at(10), at(12))],
        games=[GAME],
    )
    first = _pass(store, now).selected[0]
    stored = store.get_session(first.id)
    stored.player("u1").status = A
    store.save_sessions([stored])

    second = _pass(store, now).selected

    assert [s.id for s in second] == [first.id]
    assert second[0].player("u1").status == A
    assert second[0].player("u2").status == P


def test_no_windows_deletes_preliminary_and_keeps_confirmed():
    now = at(9, 30)
    confirmed = session("g1", at(10), at(12), {"u1": A, "u2": A}, sid="c1")
    prelim = session("g1", at(13), at(15), {"u1": A, "u2": P}, sid="p1")
    store = InMemoryStore(sessions=[confirmed, prelim], games=[GAME])

    plan = _pass(store, now)

    assert [s.id for s in plan.sessions] == ["c1"]
    assert plan.obsolete_ids == ["p1"]
    assert set(store.sessions) == {"c1"}


def test_rerun_is_idempotent_and_keeps_answers(now):
    store = InMemoryStore(
        windows=[
            window("a", "u1", at(9), at(14)),
            window("b", "u2", at(10), at(15)),
            window("c", "u3", at(11), at(13)),
        ],
        games=[GAME],
    )
    first = _pass(store, now).selected
    for s in first:
        stored = store.get_session(s.id)
        stored.players[0].status = A
        stored.players[1].status = R
        store.save_sessions([stored])
    before = {s.signature: {p.user_id: p.status for p in store.get_session(s.id).players} for s in first}

    second = _pass(store, now).selected

    assert {s.signature for s in second} == set(before)
    for s in second:
        statuses = {p.user_id: p.status for p in s.players}
        for user_id, status in before[s.signature].items():
            if status == A:
                assert statuses[user_id] == A


def test_rejected_player_still_eligible_gets_pending_again(now):
    store = InMemoryStore(
        windows=[window("a", "u1", at(10), at(12)), window("b", "u2", at(10), at(12))],
        games=[GAME],
    )
    first = _pass(store, now).selected[0]
    stored = store.get_session(first.id)
    stored.player("u2").status = R
    store.save_sessions([stored])

    again = _pass(store, now).selected[0]

    assert again.id == first.id
    assert again.player("u2").status == P


def test_confirmed_players_are_not_offered_conflicting_sessions():
    now = at(9, 30)
    confirmed = session("g1", at(10), at(12), {"u1": A, "u2": A}, sid="c1")
    store = InMemoryStore(
        windows=[
            window("a", "u1", at(10), at(12)),
            window("b", "u2", at(10), at(12)),
            window("c", "u3", at(10), at(12)),
        ],
        sessions=[confirmed],
        games=[GAME],
    )

    plan = _pass(store, now)

    assert [s.id for s in plan.confirmed] == ["c1"]
    assert plan.selected == []


def test_notification_status_is_kept_on_reconcile(now):
    store = InMemoryStore(
        windows=[window("a", "u1", at(10), at(12)), window("b", "u2", at(10), at(12))],
        games=[GAME],
    )
    first = _pass(store, now).selected[0]
    store.update_notification_status(first.id, NotificationStatus.PRELIMINARY_SENT)

    again = _pass(store, now).selected[0]

    assert again.notification_status == NotificationStatus.PRELIMINARY_SENT


def test_global_veto_removes_player(now):
    store = InMemoryStore(
        windows=[
            window("a", "u1", at(10), at(12)),
            window("b", "u2", at(10), at(12)),
            window("c", "u3", at(10), at(12)),
        ],
        games=[GAME],
        preferences=[GlobalPreference("u3", "g1", 0)],
    )

    plan = _pass(store, now)

    assert sorted(plan.selected[0].user_ids) == ["u1", "u2"]


def test_window_override_picks_game(now):
    other = Game(id="g2", title="Valheim", min_players=2)
    store = InMemoryStore(
        windows=[window("a", "u1", at(10), at(12), g2=10), window("b", "u2", at(10), at(12), g2=10)],
        games=[GAME, other],
    )

    plan = _pass(store, now)

    assert plan.selected[0].game_id == "g2"
    assert plan.selected[0].score == 10 + 10 + 4


def test_malformed_window_does_not_fail_the_pass(now):
    store = InMemoryStore(
        windows=[
            window("a", "u1", at(10), at(12)),
            window("b", "u2", at(10), at(12)),
            window("bad", "u3", at(12), at(11)),
        ],
        games=[GAME],
    )

    assert len(_pass(store, now).selected) == 1


def test_no_games_means_no_sessions(now):
    windows = [window("a", "u1", at(10), at(12)), window("b", "u2", at(10), at(12))]

    plan = plan_matchmaking(windows, [], [], [], now, CONFIG)

    assert plan.selected == []


def test_output_durations_and_conflict_free_packing(now):
    windows = [
        window("a", "u1", at(8), at(17)),
        window("b", "u2", at(9), at(12, 30)),
        window("c", "u3", at(10, 15), at(15)),
        window("d", "u4", at(11), at(19)),
        window("e", "u5", at(13), at(14, 10)),
        window("f", "u6", at(8, 45), at(10, 40)),
    ]

    plan = plan_matchmaking(windows, [], [GAME], [], now, CONFIG)

    assert plan.selected
    for s in plan.selected:
        assert CONFIG.min_session <= s.duration <= CONFIG.max_session
    for a, b in itertools.combinations(plan.selected, 2):
        if a.overlaps(b):
            assert not set(a.user_ids) & set(b.user_ids)


def test_draft_starts_no_earlier_than_now():
    now = at(10, 20)
    windows = [window("a", "u1", at(10), at(14)), window("b", "u2", at(10), at(14))]

    plan = plan_matchmaking(windows, [], [GAME], [], now, CONFIG)

    assert plan.selected[0].start_time == now
    assert all(s.start_time >= now for s in plan.selected)
    assert all(s.duration >= timedelta(minutes=60) for s in plan.selected)


def test_started_session_keeps_identity_and_answers_across_passes():
    store = InMemoryStore(
        windows=[window("a", "u1", at(10), at(14)), window("b", "u2", at(10), at(14))],
        games=[GAME],
    )
    first = _pass(store, at(10, 30)).selected[0]
    assert (first.start_time, first.end_time) == (at(10, 30), at(12))
    answered = store.get_session(first.id)
    answered.player("u1").status = A
    store.save_sessions([answered])
    store.update_notification_status(first.id, NotificationStatus.PRELIMINARY_SENT)

    plan = _pass(store, at(10, 35))

    again = plan.selected[0]
    assert again.id == first.id
    assert again.start_time == at(10, 30)
    assert again.player("u1").status == A
    assert again.notification_status == NotificationStatus.PRELIMINARY_SENT
    assert first.id not in plan.obsolete_ids


def test_unaccepted_members_of_confirmed_session_can_play_elsewhere():
    now = at(9, 30)
    confirmed = session("g1", at(10), at(12), {"u1": A, "u2": A, "u3": R}, sid="c1")
    store = InMemoryStore(
        windows=[window("c", "u3", at(10), at(12)), window("d", "u4", at(10), at(12))],
        sessions=[confirmed],
        games=[GAME],
    )

    plan = _pass(store, now)

    assert [s.id for s in plan.confirmed] == ["c1"]
    assert [sorted(s.user_ids) for s in plan.selected] == [["u3", "u4"]]
