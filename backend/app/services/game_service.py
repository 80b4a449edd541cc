"""Game library: list, get, create. Games are reference data for matchmaking."""
from sqlalchemy.orm import Session

from app.core.errors import GameNotFoundError, InvalidInputError
from app.models.game import Game


def game_to_dict(row: Game) -> dict:
    return {
        "id": row.id,
        "title": row.title,
        "min_players": row.min_players,
        "max_players": row.max_players,
        "genre": row.genre,
        "cover_image_url": row.cover_image_url,
    }


def list_games(db: Session) -> list[dict]:
    rows = db.query(Game).order_by(Game.title.asc()).all()
    return [game_to_dict(r) for r in rows]


def get_game(db: Session, game_id: str) -> dict:
    row = db.get(Game, game_id)
    if row is None:
        raise GameNotFoundError(game_id)
    return game_to_dict(row)


def create_game(
    db: Session,
    title: str,
    min_players: int = 1,
    max_players: int = 10,
    genre: str | None = None,
    cover_image_url: str | None = None,
) -> dict:
    title = (title or "").strip()
    if not title:
        raise InvalidInputError("title is required")
    if min_players < 1 or max_players < min_players:
        raise InvalidInputError("min_players must be >= 1 and <= max_players")
    row = Game(
        title=title,
        min_players=min_players,
        max_players=max_players,
        genre=(genre or "").strip() or None,
        cover_image_url=(cover_image_url or "").strip() or None,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return game_to_dict(row)
