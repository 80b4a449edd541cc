"""
Session actions: accept / reject. Reject with reason NOT_AVAILABLE also removes the
player's overlapping availability and re-plans.
"""
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.api.deps import current_user_id
from app.core.errors import MatchmakingError, domain_error_to_http
from app.db.session import get_db
from app.services import matchmaking_service
from app.services.session_store import SqlMatchmakingStore

router = APIRouter()
logger = logging.getLogger(__name__)


class RejectBody(BaseModel):
    reason: str | None = Field(None, max_length=64, description="e.g. NOT_AVAILABLE, NOT_INTERESTED")


@router.post("/{session_id}/accept")
def accept(
    session_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
) -> dict[str, Any]:
    now = datetime.now(timezone.utc)
    try:
        session = matchmaking_service.accept_session(db, session_id, user_id, now=now)
    except MatchmakingError as e:
        raise domain_error_to_http(e)
    game = SqlMatchmakingStore(db).get_game(session.game_id)
    return {"ok": True, "session": matchmaking_service.session_to_dict(session, game, now)}


@router.post("/{session_id}/reject")
def reject(
    session_id: str,
    body: RejectBody | None = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
) -> dict[str, Any]:
    reason = body.reason if body else None
    try:
        result = matchmaking_service.reject_session(db, session_id, user_id, reason=reason)
    except MatchmakingError as e:
        raise domain_error_to_http(e)
    return {"ok": True, "session_id": session_id, "removed_window_ids": result.deleted_window_ids}
