"""
Availability windows of the acting user: list, create (with optional per-game weights), delete.
Create and delete both trigger a full matchmaking pass.
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
from app.services.matchmaking.types import AvailabilityWindow

router = APIRouter()
logger = logging.getLogger(__name__)


class GameWeightItem(BaseModel):
    game_id: str
    weight: int = Field(..., ge=0, le=10)


class CreateWindowBody(BaseModel):
    start_time: datetime
    end_time: datetime
    preferences: list[GameWeightItem] = Field(default_factory=list, max_length=100)


def _utc(dt: datetime) -> datetime:
    # Naive input is taken as UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def window_to_dict(w: AvailabilityWindow) -> dict[str, Any]:
    return {
        "id": w.id,
        "user_id": w.user_id,
        "start_time": w.start_time.isoformat(),
        "end_time": w.end_time.isoformat(),
        "preferences": [{"game_id": g, "weight": wt} for g, wt in w.game_weights.items()],
    }


@router.get("")
def list_my_windows(db: Session = Depends(get_db), user_id: str = Depends(current_user_id)) -> dict[str, Any]:
    windows = matchmaking_service.list_windows(db, user_id)
    return {"windows": [window_to_dict(w) for w in windows]}


@router.post("")
def create_window(
    body: CreateWindowBody,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
) -> dict[str, Any]:
    try:
        window = matchmaking_service.create_window(
            db,
            user_id,
            _utc(body.start_time),
            _utc(body.end_time),
            game_weights={p.game_id: p.weight for p in body.preferences},
        )
    except MatchmakingError as e:
        raise domain_error_to_http(e)
    return window_to_dict(window)


@router.delete("/{window_id}")
def delete_window(
    window_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
) -> dict[str, Any]:
    try:
        result = matchmaking_service.delete_window(db, window_id, user_id)
    except MatchmakingError as e:
        raise domain_error_to_http(e)
    return {"ok": True, "id": window_id, "sessions_updated": len(result.touched)}
