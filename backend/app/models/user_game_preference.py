"""Global per-user game weight (0..10). Missing row = default weight; 0 = never suggest this game."""
import uuid

from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint

from app.db.base import Base


class UserGamePreference(Base):
    __tablename__ = "user_game_preferences"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), nullable=False, index=True)
    game_id = Column(String(36), ForeignKey("games.id", ondelete="CASCADE"), nullable=False)
    weight = Column(Integer, nullable=False, default=5)

    __table_args__ = (UniqueConstraint("user_id", "game_id", name="uq_user_game_preferences_user_game"),)
