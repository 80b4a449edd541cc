"""Global game preferences of the acting user (fallback when a window has no override)."""
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.api.deps import current_user_id
from app.core.errors import MatchmakingError, domain_error_to_http
from app.db.session import get_db
from app.services import preference_service

router = APIRouter()


class PreferenceBody(BaseModel):
    game_id: str
    weight: int = Field(..., ge=0, le=10, description="0 = never suggest this game")


@router.get("")
def get_my_preferences(db: Session = Depends(get_db), user_id: str = Depends(current_user_id)) -> dict[str, Any]:
    return {"preferences": preference_service.get_user_preferences(db, user_id)}


@router.post("")
def update_preference(
    body: PreferenceBody,
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
) -> dict[str, Any]:
    try:
        return preference_service.set_preference(db, user_id, body.game_id, body.weight)
    except MatchmakingError as e:
        raise domain_error_to_http(e)
