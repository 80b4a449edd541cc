"""
Greedy conflict resolution: no player is booked into two time-overlapping sessions.

Candidates are ranked by player count, then score, then duration (all descending; ties keep
input order) and accepted unless they overlap an already-booked session sharing a player.
Confirmed sessions only book their ACCEPTED players; the rest of their roster stays free.
"""
from app.services.matchmaking.types import PlannedSession, PlayerStatus


def rank_key(session: PlannedSession) -> tuple:
    return (-len(session.players), -session.score, -session.duration.total_seconds())


def accepted_user_ids(session: PlannedSession) -> set[str]:
    return {p.user_id for p in session.players if p.status == PlayerStatus.ACCEPTED}


def conflicts_with(candidate: PlannedSession, booked: PlannedSession, booked_users: set[str] | None = None) -> bool:
    users = set(booked.user_ids) if booked_users is None else booked_users
    return candidate.overlaps(booked) and bool(set(candidate.user_ids) & users)


def resolve_conflicts(
    candidates: list[PlannedSession],
    fixed: list[PlannedSession] | None = None,
) -> tuple[list[PlannedSession], list[PlannedSession]]:
    """
    Returns (selected, rejected). `fixed` sessions (confirmed ones) are already booked for
    their accepted players: they block conflicting candidates but are not part of the
    returned selection.
    """
    booked = [(s, accepted_user_ids(s)) for s in fixed or []]
    selected: list[PlannedSession] = []
    rejected: list[PlannedSession] = []
    for candidate in sorted(candidates, key=rank_key):
        if any(conflicts_with(candidate, other, users) for other, users in booked):
            rejected.append(candidate)
            continue
        booked.append((candidate, set(candidate.user_ids)))
        selected.append(candidate)
    return selected, rejected
