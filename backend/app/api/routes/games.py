"""Game library."""
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.core.errors import MatchmakingError, domain_error_to_http
from app.db.session import get_db
from app.services import game_service

router = APIRouter()


class CreateGameBody(BaseModel):
    title: str = Field(..., min_length=1, max_length=256)
    min_players: int = Field(1, ge=1, le=100)
    max_players: int = Field(10, ge=1, le=100)
    genre: str | None = None
    cover_image_url: str | None = None


@router.get("")
def list_games(db: Session = Depends(get_db)) -> dict[str, Any]:
    return {"games": game_service.list_games(db)}


@router.get("/{game_id}")
def get_game(game_id: str, db: Session = Depends(get_db)) -> dict[str, Any]:
    try:
        return game_service.get_game(db, game_id)
    except MatchmakingError as e:
        raise domain_error_to_http(e)


@router.post("")
def create_game(body: CreateGameBody, db: Session = Depends(get_db)) -> dict[str, Any]:
    try:
        return game_service.create_game(
            db,
            title=body.title,
            min_players=body.min_players,
            max_players=body.max_players,
            genre=body.genre,
            cover_image_url=body.cover_image_url,
        )
    except MatchmakingError as e:
        raise domain_error_to_http(e)
