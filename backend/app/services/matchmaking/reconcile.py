"""
Reconcile freshly scored drafts with the preliminary sessions of the previous pass.

A draft whose signature (game, start, end) matches an existing preliminary session adopts its
id and notification status and keeps its players' answers: users no longer in the draft are
dropped, REJECTED users who are eligible again go back to PENDING, new users are appended as
PENDING. Preliminary sessions no draft claims are obsolete.
"""
from dataclasses import replace
from datetime import datetime

from app.core.matchmaking_config import MatchmakingConfig
from app.services.matchmaking.status import is_active, session_status
from app.services.matchmaking.types import (
    AvailabilityWindow,
    Game,
    PlannedSession,
    PlayerEntry,
    PlayerStatus,
    SessionStatus,
)


def classify_sessions(
    sessions: list[PlannedSession],
    games_by_id: dict[str, Game],
    now: datetime,
    config: MatchmakingConfig,
) -> tuple[list[PlannedSession], list[PlannedSession]]:
    """Active sessions split into (confirmed, preliminary) by dynamic status."""
    confirmed: list[PlannedSession] = []
    preliminary: list[PlannedSession] = []
    for s in sessions:
        if not is_active(s, now):
            continue
        if session_status(s, games_by_id.get(s.game_id), now, config) == SessionStatus.CONFIRMED:
            confirmed.append(s)
        else:
            preliminary.append(s)
    return confirmed, preliminary


def _accepted_in(session: PlannedSession, user_id: str) -> bool:
    p = session.player(user_id)
    return p is not None and p.status == PlayerStatus.ACCEPTED


def exclude_committed_windows(
    windows: list[AvailabilityWindow],
    confirmed: list[PlannedSession],
) -> list[AvailabilityWindow]:
    """Drop windows of users ACCEPTED in a confirmed session overlapping that window."""
    out = []
    for w in windows:
        committed = any(
            w.overlaps(s.start_time, s.end_time) and _accepted_in(s, w.user_id)
            for s in confirmed
        )
        if not committed:
            out.append(w)
    return out


def merge_players(existing: PlannedSession, draft: PlannedSession) -> PlannedSession:
    draft_users = set(draft.user_ids)
    players: list[PlayerEntry] = []
    for p in existing.players:
        if p.user_id not in draft_users:
            continue
        if p.status == PlayerStatus.REJECTED:
            players.append(PlayerEntry(user_id=p.user_id))
        else:
            players.append(replace(p))
    known = {p.user_id for p in players}
    players.extend(PlayerEntry(user_id=u) for u in draft.user_ids if u not in known)
    return replace(existing, players=players, score=draft.score)


def reconcile_drafts(
    drafts: list[PlannedSession],
    preliminary: list[PlannedSession],
    now: datetime | None = None,
) -> tuple[list[PlannedSession], list[str]]:
    """
    Returns (candidates, obsolete session ids).

    A draft clamped to `now` (start <= now) has a start that moves from pass to pass, so it
    falls back to the started preliminary session with the same game and end. The adopted
    session keeps its own start.
    """
    by_signature = {s.signature: s for s in preliminary}
    started: dict[tuple[str, datetime], PlannedSession] = {}
    if now is not None:
        for s in preliminary:
            if s.start_time <= now:
                started.setdefault((s.game_id, s.end_time), s)

    adopted_ids: set[str] = set()
    candidates: list[PlannedSession] = []
    for draft in drafts:
        existing = by_signature.get(draft.signature)
        if existing is None and now is not None and draft.start_time <= now:
            existing = started.get((draft.game_id, draft.end_time))
        if existing is not None and existing.id not in adopted_ids:
            candidates.append(merge_players(existing, draft))
            if existing.id is not None:
                adopted_ids.add(existing.id)
        else:
            candidates.append(draft)
    obsolete = [s.id for s in preliminary if s.id is not None and s.id not in adopted_ids]
    return candidates, obsolete
