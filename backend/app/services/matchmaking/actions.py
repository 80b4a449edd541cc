"""
Player actions on sessions and availability. State changes go through the store; the caller
commits, publishes SessionUpdated for the returned sessions and (where flagged) re-runs the engine.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime

from app.core.constants import MAX_WEIGHT, MIN_WEIGHT, REJECT_REASON_NOT_AVAILABLE
from app.core.errors import (
    GameNotFoundError,
    InvalidInputError,
    OverlappingWindowError,
    PlayerNotInSessionError,
    SessionNotFoundError,
    WindowNotFoundError,
    WindowOwnershipError,
)
from app.services.matchmaking.ports import ReferenceData, SessionStore
from app.services.matchmaking.types import (
    AvailabilityWindow,
    PlannedSession,
    PlayerEntry,
    PlayerStatus,
)

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    touched: list[PlannedSession] = field(default_factory=list)
    deleted_window_ids: list[str] = field(default_factory=list)
    rerun: bool = False


def _require_session(store: SessionStore, session_id: str) -> PlannedSession:
    session = store.get_session(session_id)
    if session is None:
        raise SessionNotFoundError(session_id)
    return session


def accept_session(store: SessionStore, session_id: str, user_id: str) -> ActionResult:
    """Mark the user ACCEPTED; late joiners get a new entry."""
    session = _require_session(store, session_id)
    entry = session.player(user_id)
    if entry is not None:
        entry.status = PlayerStatus.ACCEPTED
        entry.rejection_reason = None
    else:
        session.players.append(PlayerEntry(user_id=user_id, status=PlayerStatus.ACCEPTED))
    saved = store.save_sessions([session])
    logger.info("User %s accepted session %s", user_id, session_id)
    return ActionResult(touched=saved)


def reject_session(store: SessionStore, session_id: str, user_id: str, reason: str | None) -> ActionResult:
    """
    Mark the user REJECTED. With reason NOT_AVAILABLE, also delete the user's windows
    overlapping the session so the next pass cannot regenerate it for them.
    """
    session = _require_session(store, session_id)
    entry = session.player(user_id)
    if entry is None:
        raise PlayerNotInSessionError(session_id, user_id)
    entry.status = PlayerStatus.REJECTED
    entry.rejection_reason = reason
    saved = store.save_sessions([session])

    result = ActionResult(touched=saved)
    if reason == REJECT_REASON_NOT_AVAILABLE:
        for w in store.list_windows_for_user(user_id):
            if w.overlaps(session.start_time, session.end_time):
                store.delete_window(w.id)
                result.deleted_window_ids.append(w.id)
        result.rerun = True
    logger.info(
        "User %s rejected session %s (reason=%s, windows removed=%s)",
        user_id, session_id, reason, len(result.deleted_window_ids),
    )
    return result


def add_window(store: SessionStore, reference: ReferenceData, window: AvailabilityWindow) -> AvailabilityWindow:
    """Validate and store a new window. Per-user windows must not overlap."""
    if window.start_time >= window.end_time:
        raise InvalidInputError("Availability window must start before it ends")
    if window.game_weights:
        known = {g.id for g in reference.list_games()}
        for game_id, weight in window.game_weights.items():
            if game_id not in known:
                raise GameNotFoundError(game_id)
            if not MIN_WEIGHT <= weight <= MAX_WEIGHT:
                raise InvalidInputError(f"Weight for game {game_id} must be between {MIN_WEIGHT} and {MAX_WEIGHT}")
    for existing in store.list_windows_for_user(window.user_id):
        if existing.overlaps(window.start_time, window.end_time):
            raise OverlappingWindowError()
    return store.add_window(window)


def withdraw_window(store: SessionStore, window_id: str, user_id: str, now: datetime) -> ActionResult:
    """
    Owner deletes a window: remove the user from every active session overlapping it,
    then delete the window. Always flags a re-run.
    """
    window = store.get_window(window_id)
    if window is None:
        raise WindowNotFoundError(window_id)
    if window.user_id != user_id:
        raise WindowOwnershipError(window_id, user_id)

    touched: list[PlannedSession] = []
    for session in store.list_active_sessions(now):
        if session.player(user_id) is None:
            continue
        if not window.overlaps(session.start_time, session.end_time):
            continue
        session.players = [p for p in session.players if p.user_id != user_id]
        touched.append(session)
    saved = store.save_sessions(touched) if touched else []
    store.delete_window(window_id)
    logger.info("User %s withdrew window %s; removed from %s sessions", user_id, window_id, len(saved))
    return ActionResult(touched=saved, deleted_window_ids=[window_id], rerun=True)
