"""Global game preferences per user (weight 0..10; missing = default weight)."""
from sqlalchemy.orm import Session

from app.core.constants import MAX_WEIGHT, MIN_WEIGHT
from app.core.errors import GameNotFoundError, InvalidInputError
from app.models.game import Game
from app.models.user_game_preference import UserGamePreference


def preference_to_dict(row: UserGamePreference) -> dict:
    return {"id": row.id, "user_id": row.user_id, "game_id": row.game_id, "weight": row.weight}


def get_user_preferences(db: Session, user_id: str) -> list[dict]:
    rows = db.query(UserGamePreference).filter(UserGamePreference.user_id == user_id).all()
    return [preference_to_dict(r) for r in rows]


def set_preference(db: Session, user_id: str, game_id: str, weight: int) -> dict:
    """Upsert the (user, game) weight."""
    if not MIN_WEIGHT <= weight <= MAX_WEIGHT:
        raise InvalidInputError(f"weight must be between {MIN_WEIGHT} and {MAX_WEIGHT}")
    if db.get(Game, game_id) is None:
        raise GameNotFoundError(game_id)
    row = (
        db.query(UserGamePreference)
        .filter(UserGamePreference.user_id == user_id, UserGamePreference.game_id == game_id)
        .first()
    )
    if row is None:
        row = UserGamePreference(user_id=user_id, game_id=game_id)
        db.add(row)
    row.weight = weight
    db.commit()
    db.refresh(row)
    return preference_to_dict(row)
