"""
User availability: one row per free-time window, with optional per-game weight overrides.

Windows of the same user never overlap (checked on create). Read-only to the engine.
"""
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class AvailabilityWindow(Base):
    __tablename__ = "availability_windows"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), nullable=False, index=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    game_weights = relationship(
        "AvailabilityGameWeight",
        back_populates="window",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class AvailabilityGameWeight(Base):
    __tablename__ = "availability_game_weights"

    id = Column(Integer, primary_key=True, autoincrement=True)
    window_id = Column(String(36), ForeignKey("availability_windows.id", ondelete="CASCADE"), nullable=False, index=True)
    game_id = Column(String(36), ForeignKey("games.id", ondelete="CASCADE"), nullable=False)
    weight = Column(Integer, nullable=False)

    window = relationship("AvailabilityWindow", back_populates="game_weights")

    __table_args__ = (UniqueConstraint("window_id", "game_id", name="uq_availability_game_weights_window_game"),)
