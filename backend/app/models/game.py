"""Game library entry. Reference data for matchmaking (min_players feeds the confirmed threshold)."""
import uuid

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from app.db.base import Base


class Game(Base):
    __tablename__ = "games"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(256), nullable=False)
    min_players = Column(Integer, nullable=False, default=1)
    max_players = Column(Integer, nullable=False, default=10)
    genre = Column(String(64), nullable=True)
    cover_image_url = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
