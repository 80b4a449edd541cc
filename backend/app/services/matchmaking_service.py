"""
Matchmaking service: transaction boundary around the engine and player actions.

Every call is one unit of work: read, compute, write, commit. Any failure rolls the whole unit
back (the next trigger retries from scratch). SessionUpdated events go out only after commit.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Callable

from sqlalchemy.orm import Session

from app.core.constants import UPCOMING_SESSIONS_LIMIT
from app.core.matchmaking_config import MatchmakingConfig, get_matchmaking_config
from app.services.events import publish_all
from app.services.matchmaking import actions
from app.services.matchmaking.engine import run_matchmaking_pass
from app.services.matchmaking.status import session_status
from app.services.matchmaking.types import (
    AvailabilityWindow,
    Game,
    MatchmakingPlan,
    PlannedSession,
)
from app.services.session_store import SqlMatchmakingStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def run_matchmaking(db: Session, now: datetime | None = None) -> MatchmakingPlan:
    """Full pass. Returns confirmed + freshly planned sessions (plan.sessions)."""
    now = now or _utcnow()
    store = SqlMatchmakingStore(db)
    try:
        plan = run_matchmaking_pass(store, store, now)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(
        "Matchmaking pass committed: %s planned, %s confirmed, %s deleted",
        len(plan.selected), len(plan.confirmed), len(plan.obsolete_ids),
    )
    publish_all(plan.selected, now)
    return plan


def _execute(
    db: Session,
    now: datetime,
    action: Callable[[SqlMatchmakingStore], actions.ActionResult],
) -> tuple[actions.ActionResult, MatchmakingPlan | None]:
    """Apply a player action and, when it asks for one, a full pass in the same transaction."""
    store = SqlMatchmakingStore(db)
    try:
        result = action(store)
        plan = run_matchmaking_pass(store, store, now) if result.rerun else None
        db.commit()
    except Exception:
        db.rollback()
        raise

    touched: dict[str, PlannedSession] = {}
    for s in result.touched + (plan.selected if plan else []):
        touched[s.id] = s
    publish_all(list(touched.values()), now)
    return result, plan


def accept_session(db: Session, session_id: str, user_id: str, now: datetime | None = None) -> PlannedSession:
    result, _ = _execute(db, now or _utcnow(), lambda store: actions.accept_session(store, session_id, user_id))
    return result.touched[0]


def reject_session(
    db: Session,
    session_id: str,
    user_id: str,
    reason: str | None = None,
    now: datetime | None = None,
) -> actions.ActionResult:
    result, _ = _execute(
        db, now or _utcnow(), lambda store: actions.reject_session(store, session_id, user_id, reason)
    )
    return result


def create_window(
    db: Session,
    user_id: str,
    start_time: datetime,
    end_time: datetime,
    game_weights: dict[str, int] | None = None,
    now: datetime | None = None,
) -> AvailabilityWindow:
    """Store a window (validated) and re-plan."""
    created: list[AvailabilityWindow] = []

    def _add(store: SqlMatchmakingStore) -> actions.ActionResult:
        window = AvailabilityWindow(
            id="",
            user_id=user_id,
            start_time=start_time,
            end_time=end_time,
            game_weights=dict(game_weights or {}),
        )
        created.append(actions.add_window(store, store, window))
        return actions.ActionResult(rerun=True)

    _execute(db, now or _utcnow(), _add)
    return created[0]


def delete_window(db: Session, window_id: str, user_id: str, now: datetime | None = None) -> actions.ActionResult:
    now = now or _utcnow()
    result, _ = _execute(db, now, lambda store: actions.withdraw_window(store, window_id, user_id, now))
    return result


def list_windows(db: Session, user_id: str) -> list[AvailabilityWindow]:
    return SqlMatchmakingStore(db).list_windows_for_user(user_id)


# --- Read views ---


def session_to_dict(
    session: PlannedSession,
    game: Game | None,
    now: datetime,
    config: MatchmakingConfig | None = None,
) -> dict[str, Any]:
    """API shape; status is computed here on every read."""
    config = config or get_matchmaking_config()
    return {
        "id": session.id,
        "game_id": session.game_id,
        "game": {"id": game.id, "title": game.title, "min_players": game.min_players} if game else None,
        "start_time": session.start_time.isoformat(),
        "end_time": session.end_time.isoformat(),
        "duration_minutes": int(session.duration.total_seconds() // 60),
        "score": session.score,
        "status": session_status(session, game, now, config).value,
        "notification_status": session.notification_status.value,
        "players": [
            {"user_id": p.user_id, "status": p.status.value, "rejection_reason": p.rejection_reason}
            for p in session.players
        ],
    }


def list_upcoming_sessions(db: Session, now: datetime | None = None, user_id: str | None = None) -> list[dict[str, Any]]:
    """Active sessions (end > now), optionally only those the user is part of."""
    now = now or _utcnow()
    store = SqlMatchmakingStore(db)
    if user_id:
        sessions = store.list_sessions_for_user(user_id, now)
    else:
        sessions = store.list_active_sessions(now)
    games = {g.id: g for g in store.list_games()}
    return [session_to_dict(s, games.get(s.game_id), now) for s in sessions[:UPCOMING_SESSIONS_LIMIT]]
