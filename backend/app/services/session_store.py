"""
SQLAlchemy implementation of the matchmaking store and reference data.

Maps rows to engine dataclasses and back. Writes only flush: commit/rollback belongs to the
caller so a whole pass (or player action) is applied atomically.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.models.availability_window import AvailabilityGameWeight
from app.models.availability_window import AvailabilityWindow as WindowRow
from app.models.game import Game as GameRow
from app.models.planned_session import PlannedSession as SessionRow
from app.models.planned_session import SessionPlayer
from app.models.user_game_preference import UserGamePreference
from app.services.matchmaking.status import advance_notification
from app.services.matchmaking.types import (
    AvailabilityWindow,
    Game,
    GlobalPreference,
    NotificationStatus,
    PlannedSession,
    PlayerEntry,
    PlayerStatus,
)

logger = logging.getLogger(__name__)


def as_utc(dt: datetime | None) -> datetime | None:
    """Naive values (SQLite) are stored as UTC; make them aware."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def window_from_row(row: WindowRow) -> AvailabilityWindow:
    return AvailabilityWindow(
        id=row.id,
        user_id=row.user_id,
        start_time=as_utc(row.start_time),
        end_time=as_utc(row.end_time),
        game_weights={gw.game_id: gw.weight for gw in row.game_weights},
    )


def session_from_row(row: SessionRow) -> PlannedSession:
    return PlannedSession(
        id=row.id,
        game_id=row.game_id,
        start_time=as_utc(row.start_time),
        end_time=as_utc(row.end_time),
        score=row.score or 0.0,
        notification_status=NotificationStatus(row.notification_status or NotificationStatus.NONE.value),
        players=[
            PlayerEntry(
                user_id=p.user_id,
                status=PlayerStatus(p.status),
                rejection_reason=p.rejection_reason,
            )
            for p in row.players
        ],
    )


def game_from_row(row: GameRow) -> Game:
    return Game(id=row.id, title=row.title, min_players=row.min_players, max_players=row.max_players)


class SqlMatchmakingStore:
    """SessionStore + ReferenceData over one SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    # --- Windows ---

    def list_active_windows(self, now: datetime) -> list[AvailabilityWindow]:
        rows = (
            self.db.query(WindowRow)
            .filter(WindowRow.end_time > now)
            .order_by(WindowRow.start_time.asc(), WindowRow.id.asc())
            .all()
        )
        return [window_from_row(r) for r in rows]

    def list_windows_for_user(self, user_id: str) -> list[AvailabilityWindow]:
        rows = (
            self.db.query(WindowRow)
            .filter(WindowRow.user_id == user_id)
            .order_by(WindowRow.start_time.asc())
            .all()
        )
        return [window_from_row(r) for r in rows]

    def get_window(self, window_id: str) -> AvailabilityWindow | None:
        row = self.db.get(WindowRow, window_id)
        return window_from_row(row) if row is not None else None

    def add_window(self, window: AvailabilityWindow) -> AvailabilityWindow:
        row = WindowRow(user_id=window.user_id, start_time=window.start_time, end_time=window.end_time)
        if window.id:
            row.id = window.id
        row.game_weights = [
            AvailabilityGameWeight(game_id=game_id, weight=weight)
            for game_id, weight in window.game_weights.items()
        ]
        self.db.add(row)
        self.db.flush()
        return window_from_row(row)

    def delete_window(self, window_id: str) -> None:
        row = self.db.get(WindowRow, window_id)
        if row is not None:
            self.db.delete(row)
            self.db.flush()

    # --- Sessions ---

    def list_active_sessions(self, now: datetime) -> list[PlannedSession]:
        rows = (
            self.db.query(SessionRow)
            .filter(SessionRow.end_time > now)
            .order_by(SessionRow.start_time.asc(), SessionRow.id.asc())
            .all()
        )
        return [session_from_row(r) for r in rows]

    def list_sessions_for_user(self, user_id: str, now: datetime) -> list[PlannedSession]:
        rows = (
            self.db.query(SessionRow)
            .join(SessionPlayer, SessionPlayer.session_id == SessionRow.id)
            .filter(SessionRow.end_time > now, SessionPlayer.user_id == user_id)
            .order_by(SessionRow.start_time.asc())
            .all()
        )
        return [session_from_row(r) for r in rows]

    def get_session(self, session_id: str) -> PlannedSession | None:
        row = self.db.get(SessionRow, session_id)
        return session_from_row(row) if row is not None else None

    def save_sessions(self, sessions: list[PlannedSession]) -> list[PlannedSession]:
        rows = []
        for s in sessions:
            row = self.db.get(SessionRow, s.id) if s.id else None
            if row is None:
                row = SessionRow(notification_status=NotificationStatus.NONE.value)
                if s.id:
                    row.id = s.id
                self.db.add(row)
            row.game_id = s.game_id
            row.start_time = s.start_time
            row.end_time = s.end_time
            row.score = s.score
            current = NotificationStatus(row.notification_status or NotificationStatus.NONE.value)
            row.notification_status = advance_notification(current, s.notification_status).value
            self._sync_players(row, s.players)
            rows.append(row)
        self.db.flush()
        return [session_from_row(r) for r in rows]

    def _sync_players(self, row: SessionRow, players: list[PlayerEntry]) -> None:
        """Update rows in place by user_id so the (session, user) unique key never collides on flush."""
        by_user = {p.user_id: p for p in row.players}
        kept = []
        for position, entry in enumerate(players):
            player_row = by_user.pop(entry.user_id, None) or SessionPlayer(user_id=entry.user_id)
            player_row.status = entry.status.value
            player_row.rejection_reason = entry.rejection_reason
            player_row.position = position
            kept.append(player_row)
        row.players = kept

    def delete_sessions(self, session_ids: list[str]) -> None:
        if not session_ids:
            return
        rows = self.db.query(SessionRow).filter(SessionRow.id.in_(session_ids)).all()
        for row in rows:
            self.db.delete(row)
        self.db.flush()
        logger.debug("Deleted %s sessions", len(rows))

    def update_notification_status(self, session_id: str, status: NotificationStatus) -> None:
        row = self.db.get(SessionRow, session_id)
        if row is None:
            return
        current = NotificationStatus(row.notification_status or NotificationStatus.NONE.value)
        row.notification_status = advance_notification(current, status).value
        self.db.flush()

    # --- Reference data ---

    def list_games(self) -> list[Game]:
        rows = self.db.query(GameRow).order_by(GameRow.created_at.asc(), GameRow.id.asc()).all()
        return [game_from_row(r) for r in rows]

    def get_game(self, game_id: str) -> Game | None:
        row = self.db.get(GameRow, game_id)
        return game_from_row(row) if row is not None else None

    def list_global_preferences(self, user_ids: list[str]) -> list[GlobalPreference]:
        if not user_ids:
            return []
        rows = self.db.query(UserGamePreference).filter(UserGamePreference.user_id.in_(user_ids)).all()
        return [GlobalPreference(user_id=r.user_id, game_id=r.game_id, weight=r.weight) for r in rows]
