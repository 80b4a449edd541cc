"""
Matchmaking: run a pass on demand and list upcoming sessions (status computed on read).
"""
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.matchmaking_service import list_upcoming_sessions, run_matchmaking, session_to_dict
from app.services.session_store import SqlMatchmakingStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/run")
def run_matchmaking_now(db: Session = Depends(get_db)) -> dict[str, Any]:
    """Run a full pass now; returns confirmed + freshly planned sessions."""
    now = datetime.now(timezone.utc)
    plan = run_matchmaking(db, now=now)
    games = {g.id: g for g in SqlMatchmakingStore(db).list_games()}
    return {
        "sessions": [session_to_dict(s, games.get(s.game_id), now) for s in plan.sessions],
        "deleted_count": len(plan.obsolete_ids),
    }


@router.get("/sessions")
def get_sessions(
    db: Session = Depends(get_db),
    user_id: str | None = Query(None, description="Only sessions this user is part of"),
) -> dict[str, Any]:
    """Upcoming (not yet ended) sessions, oldest start first."""
    sessions = list_upcoming_sessions(db, user_id=user_id)
    return {"sessions": sessions, "count": len(sessions)}
