"""
Session notification state machine.

On every SessionUpdated (and on the periodic sweep) the session's dynamic status is recomputed:
- CONFIRMED and not yet CONFIRMED_SENT -> confirmation notice, mark CONFIRMED_SENT.
- PRELIMINARY, nothing sent, starting within 2h and not over -> "starting soon" notice,
  mark PRELIMINARY_SENT.
- otherwise nothing.

notification_status is re-read from the store before deciding, so duplicate events never
produce duplicate notices. Dispatch is best-effort; the status advances either way (no retries).
"""
import logging
from datetime import datetime, timezone

from app.core.matchmaking_config import MatchmakingConfig, get_matchmaking_config
from app.db.session import SessionLocal
from app.services.discord_notify import DiscordNotifier
from app.services.matchmaking.ports import NotificationDispatcher, ReferenceData, SessionStore
from app.services.matchmaking.status import advance_notification, next_notification
from app.services.matchmaking.types import Game, NotificationStatus, PlannedSession, SessionUpdated
from app.services.session_store import SqlMatchmakingStore

logger = logging.getLogger(__name__)


class NotificationListener:
    def __init__(
        self,
        store: SessionStore,
        reference: ReferenceData,
        dispatcher: NotificationDispatcher,
        config: MatchmakingConfig | None = None,
    ):
        self.store = store
        self.reference = reference
        self.dispatcher = dispatcher
        self.config = config or get_matchmaking_config()
        self._games: dict[str, Game] | None = None

    def _game(self, game_id: str) -> Game | None:
        if self._games is None:
            self._games = {g.id: g for g in self.reference.list_games()}
        return self._games.get(game_id)

    def handle(self, session: PlannedSession, now: datetime) -> NotificationStatus | None:
        """Dispatch whatever notice is due. Returns the new notification status, or None if nothing was sent."""
        if session.id is not None:
            stored = self.store.get_session(session.id)
            if stored is None:
                logger.debug("Session %s no longer exists; skipping notification", session.id)
                return None
            session = stored

        due = next_notification(session, self._game(session.game_id), now, self.config)
        if due is None:
            return None

        try:
            if due == NotificationStatus.CONFIRMED_SENT:
                self.dispatcher.notify_confirmed([session])
            else:
                self.dispatcher.notify_preliminary([session])
        except Exception as e:
            logger.warning("Notification dispatch failed for session %s: %s", session.id, e, exc_info=True)

        new_status = advance_notification(session.notification_status, due)
        session.notification_status = new_status
        if session.id is not None:
            self.store.update_notification_status(session.id, new_status)
        logger.info("Session %s notification status -> %s", session.id, new_status.value)
        return new_status

    def on_session_updated(self, event: SessionUpdated) -> None:
        self.handle(event.session, event.now)

    def sweep(self, now: datetime) -> int:
        """Re-evaluate every active session. Returns how many notices were dispatched."""
        sent = 0
        for session in self.store.list_active_sessions(now):
            if self.handle(session, now) is not None:
                sent += 1
        return sent


def _listener_for(db) -> NotificationListener:
    store = SqlMatchmakingStore(db)
    titles = {g.id: g.title for g in store.list_games()}
    return NotificationListener(store, store, DiscordNotifier(game_titles=titles))


def handle_session_updated(event: SessionUpdated) -> None:
    """Event bus subscriber: own DB session, commit the notification status change."""
    db = SessionLocal()
    try:
        _listener_for(db).on_session_updated(event)
        db.commit()
    except Exception as e:
        logger.exception("Notification listener failed for session %s: %s", event.session.id, e)
        db.rollback()
    finally:
        db.close()


def run_notification_sweep(db, now: datetime | None = None) -> int:
    """Sweep all active sessions within the caller's DB session; commits on success."""
    now = now or datetime.now(timezone.utc)
    sent = _listener_for(db).sweep(now)
    db.commit()
    return sent
