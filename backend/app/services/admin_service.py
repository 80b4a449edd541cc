"""
Admin: clear planned sessions (and their players). Availability, games and preferences are kept,
so the next matchmaking pass re-plans from scratch.
"""
import logging

from sqlalchemy import text
from sqlalchemy.orm import Session

from app.db.tables import MATCHMAKING_TABLE_NAMES
from app.models.planned_session import PlannedSession, SessionPlayer

logger = logging.getLogger(__name__)


def clear_planned_sessions(db: Session) -> dict[str, int]:
    """
    Delete every planned session. Uses TRUNCATE when the backend supports it (Postgres);
    falls back to DELETE otherwise. Returns table -> deleted count (-1 = unknown with TRUNCATE).
    """
    deleted: dict[str, int] = {}
    if db.get_bind().dialect.name == "postgresql":
        try:
            tables = ", ".join(MATCHMAKING_TABLE_NAMES)
            db.execute(text(f"TRUNCATE TABLE {tables} RESTART IDENTITY CASCADE"))
            db.commit()
            logger.info("clear_planned_sessions: done (TRUNCATE)")
            return {t: -1 for t in MATCHMAKING_TABLE_NAMES}
        except Exception as e:
            db.rollback()
            logger.warning("clear_planned_sessions: TRUNCATE failed (%s), using DELETE", e)
    deleted["session_players"] = db.query(SessionPlayer).delete()
    deleted["planned_sessions"] = db.query(PlannedSession).delete()
    db.commit()
    logger.info(
        "clear_planned_sessions: done (DELETE) planned_sessions=%s session_players=%s",
        deleted["planned_sessions"], deleted["session_players"],
    )
    return deleted
