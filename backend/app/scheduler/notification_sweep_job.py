"""Runs every 1 min: re-evaluate active sessions so ones crossing the 2h notice threshold get notified."""
import logging

from app.db.session import SessionLocal
from app.services.notification_listener import run_notification_sweep

logger = logging.getLogger(__name__)


def run_notification_sweep_job() -> None:
    db = SessionLocal()
    try:
        sent = run_notification_sweep(db)
        if sent:
            logger.info("Notification sweep: %s notices sent", sent)
    except Exception as e:
        logger.exception("Notification sweep failed: %s", e)
        db.rollback()
    finally:
        db.close()
