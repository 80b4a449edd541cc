"""Shared fakes and builders for engine and service tests."""
from copy import deepcopy
from datetime import datetime, timedelta, timezone

from app.core.matchmaking_config import MatchmakingConfig
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

DAY = datetime(2026, 6, 1, tzinfo=timezone.utc)

CONFIG = MatchmakingConfig(
    min_players=2,
    min_session_minutes=60,
    target_session_minutes=120,
    max_session_minutes=240,
    min_remainder_minutes=60,
    participation_bonus=2,
    default_weight=5,
    confirmation_lookahead_minutes=60,
    preliminary_notice_minutes=120,
)


def at(hour: int, minute: int = 0) -> datetime:
    """Timestamp on the fixed test day (UTC)."""
    return DAY + timedelta(hours=hour, minutes=minute)


def window(wid: str, user_id: str, start: datetime, end: datetime, **weights: int) -> AvailabilityWindow:
    return AvailabilityWindow(id=wid, user_id=user_id, start_time=start, end_time=end, game_weights=dict(weights))


def session(
    game_id: str,
    start: datetime,
    end: datetime,
    players: dict[str, PlayerStatus] | list[str],
    sid: str | None = None,
    notification_status: NotificationStatus = NotificationStatus.NONE,
    score: float = 0.0,
) -> PlannedSession:
    if isinstance(players, dict):
        entries = [PlayerEntry(user_id=u, status=st) for u, st in players.items()]
    else:
        entries = [PlayerEntry(user_id=u) for u in players]
    return PlannedSession(
        id=sid,
        game_id=game_id,
        start_time=start,
        end_time=end,
        players=entries,
        score=score,
        notification_status=notification_status,
    )


class InMemoryStore:
    """SessionStore + ReferenceData over dicts. Returns copies so callers can't mutate stored state."""

    def __init__(
        self,
        windows: list[AvailabilityWindow] | None = None,
        sessions: list[PlannedSession] | None = None,
        games: list[Game] | None = None,
        preferences: list[GlobalPreference] | None = None,
    ):
        self.windows = {w.id: deepcopy(w) for w in windows or []}
        self.sessions: dict[str, PlannedSession] = {}
        self.games = list(games or [])
        self.preferences = list(preferences or [])
        self._seq = 0
        for s in sessions or []:
            self.save_sessions([s])

    def _next_id(self, prefix: str) -> str:
        self._seq += 1
        return f"{prefix}{self._seq}"

    def list_active_windows(self, now):
        rows = [w for w in self.windows.values() if w.end_time > now]
        return [deepcopy(w) for w in sorted(rows, key=lambda w: (w.start_time, w.id))]

    def list_windows_for_user(self, user_id):
        rows = [w for w in self.windows.values() if w.user_id == user_id]
        return [deepcopy(w) for w in sorted(rows, key=lambda w: w.start_time)]

    def get_window(self, window_id):
        w = self.windows.get(window_id)
        return deepcopy(w) if w is not None else None

    def add_window(self, window):
        stored = deepcopy(window)
        if not stored.id:
            stored.id = self._next_id("w")
        self.windows[stored.id] = stored
        return deepcopy(stored)

    def delete_window(self, window_id):
        self.windows.pop(window_id, None)

    def list_active_sessions(self, now):
        rows = [s for s in self.sessions.values() if s.end_time > now]
        return [deepcopy(s) for s in sorted(rows, key=lambda s: (s.start_time, s.id))]

    def get_session(self, session_id):
        s = self.sessions.get(session_id)
        return deepcopy(s) if s is not None else None

    def save_sessions(self, sessions):
        saved = []
        for s in sessions:
            stored = deepcopy(s)
            if not stored.id:
                stored.id = self._next_id("s")
            existing = self.sessions.get(stored.id)
            if existing is not None:
                stored.notification_status = advance_notification(
                    existing.notification_status, stored.notification_status
                )
            self.sessions[stored.id] = stored
            saved.append(deepcopy(stored))
        return saved

    def delete_sessions(self, session_ids):
        for sid in session_ids:
            self.sessions.pop(sid, None)

    def update_notification_status(self, session_id, status):
        s = self.sessions.get(session_id)
        if s is not None:
            s.notification_status = advance_notification(s.notification_status, status)

    def list_games(self):
        return list(self.games)

    def list_global_preferences(self, user_ids):
        wanted = set(user_ids)
        return [p for p in self.preferences if p.user_id in wanted]


class FakeDispatcher:
    """Records notices; with fail=True every call raises."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.confirmed: list[PlannedSession] = []
        self.preliminary: list[PlannedSession] = []

    def notify_confirmed(self, sessions):
        if self.fail:
            raise RuntimeError("webhook down")
        self.confirmed.extend(sessions)

    def notify_preliminary(self, sessions):
        if self.fail:
            raise RuntimeError("webhook down")
        self.preliminary.extend(sessions)
