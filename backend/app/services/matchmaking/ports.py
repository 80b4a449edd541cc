"""Collaborator contracts for the engine. SqlMatchmakingStore and the Discord notifier implement these."""
from datetime import datetime
from typing import Protocol

from app.services.matchmaking.types import (
    AvailabilityWindow,
    Game,
    GlobalPreference,
    NotificationStatus,
    PlannedSession,
    SessionUpdated,
)


class SessionStore(Protocol):
    """Windows and sessions. Writes are part of the caller's transaction."""

    def list_active_windows(self, now: datetime) -> list[AvailabilityWindow]:
        """Windows with end_time > now."""
        ...

    def list_windows_for_user(self, user_id: str) -> list[AvailabilityWindow]:
        ...

    def get_window(self, window_id: str) -> AvailabilityWindow | None:
        ...

    def add_window(self, window: AvailabilityWindow) -> AvailabilityWindow:
        """Persist a new window; assigns its id."""
        ...

    def delete_window(self, window_id: str) -> None:
        ...

    def list_active_sessions(self, now: datetime) -> list[PlannedSession]:
        """Sessions with end_time > now, ordered by start."""
        ...

    def get_session(self, session_id: str) -> PlannedSession | None:
        ...

    def save_sessions(self, sessions: list[PlannedSession]) -> list[PlannedSession]:
        """Insert or update; new sessions get ids. Returns the saved sessions in order."""
        ...

    def delete_sessions(self, session_ids: list[str]) -> None:
        ...

    def update_notification_status(self, session_id: str, status: NotificationStatus) -> None:
        ...


class ReferenceData(Protocol):
    def list_games(self) -> list[Game]:
        ...

    def list_global_preferences(self, user_ids: list[str]) -> list[GlobalPreference]:
        ...


class EventSink(Protocol):
    def publish(self, event: SessionUpdated) -> None:
        """Fire-and-forget."""
        ...


class NotificationDispatcher(Protocol):
    """Best-effort delivery; implementations log failures and never raise."""

    def notify_confirmed(self, sessions: list[PlannedSession]) -> None:
        ...

    def notify_preliminary(self, sessions: list[PlannedSession]) -> None:
        ...
