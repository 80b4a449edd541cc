"""
In-process event bus for SessionUpdated. Add subscribers here (e.g. the notification listener).

publish is fire-and-forget: each handler runs in turn and a failing handler is logged, never
propagated to the publisher (a committed pass must not fail because a notice could not be sent).
"""
import logging
from datetime import datetime
from typing import Callable

from app.services.matchmaking.types import PlannedSession, SessionUpdated

logger = logging.getLogger(__name__)

Handler = Callable[[SessionUpdated], None]

_subscribers: list[Handler] = []


def subscribe(handler: Handler) -> None:
    """Register a handler (idempotent)."""
    if handler not in _subscribers:
        _subscribers.append(handler)
        logger.info("Subscribed %s to session updates", getattr(handler, "__name__", handler))


def clear_subscribers() -> None:
    _subscribers.clear()


def publish(event: SessionUpdated) -> None:
    for handler in list(_subscribers):
        try:
            handler(event)
        except Exception as e:
            logger.exception("Session update handler failed for session %s: %s", event.session.id, e)


def publish_all(sessions: list[PlannedSession], now: datetime) -> None:
    for session in sessions:
        publish(SessionUpdated(session=session, now=now))

