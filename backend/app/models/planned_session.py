"""
Planned play session and its players.

No status column: CONFIRMED/PRELIMINARY is computed on read (accepted count, game.min_players,
start time, now). notification_status is the idempotency field for notices and only moves forward.
"""
import uuid

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class PlannedSession(Base):
    __tablename__ = "planned_sessions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    game_id = Column(String(36), ForeignKey("games.id", ondelete="CASCADE"), nullable=False, index=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False, index=True)
    score = Column(Float, nullable=False, default=0.0)
    notification_status = Column(String(24), nullable=False, default="NONE", server_default="NONE")  # NONE | PRELIMINARY_SENT | CONFIRMED_SENT
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    players = relationship(
        "SessionPlayer",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="SessionPlayer.position",
        lazy="selectin",
    )


class SessionPlayer(Base):
    __tablename__ = "session_players"

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(String(36), ForeignKey("planned_sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    status = Column(String(16), nullable=False, default="PENDING")  # PENDING | ACCEPTED | REJECTED
    rejection_reason = Column(String(64), nullable=True)
    position = Column(Integer, nullable=False, default=0)  # keeps player order stable across passes

    session = relationship("PlannedSession", back_populates="players")

    __table_args__ = (UniqueConstraint("session_id", "user_id", name="uq_session_players_session_user"),)
