"""Runs every 5 min: full matchmaking pass (re-plan sessions from current availability)."""
import logging

from app.db.session import SessionLocal
from app.services.matchmaking_service import run_matchmaking

logger = logging.getLogger(__name__)


def run_matchmaking_job() -> None:
    db = SessionLocal()
    try:
        plan = run_matchmaking(db)
        logger.info("Matchmaking job: %s sessions (%s confirmed)", len(plan.sessions), len(plan.confirmed))
    except Exception as e:
        # Pass already rolled back; next tick retries in full
        logger.exception("Matchmaking job failed: %s", e)
    finally:
        db.close()
