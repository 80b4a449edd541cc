"""
Engine types. Plain dataclasses so the engine stays independent of SQLAlchemy rows;
SqlMatchmakingStore maps rows to these and back.

All datetimes are timezone-aware UTC.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum


class PlayerStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class NotificationStatus(str, Enum):
    """Monotonic: NONE -> PRELIMINARY_SENT -> CONFIRMED_SENT (terminal)."""
    NONE = "NONE"
    PRELIMINARY_SENT = "PRELIMINARY_SENT"
    CONFIRMED_SENT = "CONFIRMED_SENT"


class SessionStatus(str, Enum):
    """Computed on every read, never stored."""
    PRELIMINARY = "PRELIMINARY"
    CONFIRMED = "CONFIRMED"


# Rank for the monotonic notification guard
NOTIFICATION_RANK = {
    NotificationStatus.NONE: 0,
    NotificationStatus.PRELIMINARY_SENT: 1,
    NotificationStatus.CONFIRMED_SENT: 2,
}


@dataclass
class Game:
    id: str
    title: str
    min_players: int = 1
    max_players: int = 10


@dataclass
class GlobalPreference:
    user_id: str
    game_id: str
    weight: int


@dataclass
class AvailabilityWindow:
    id: str
    user_id: str
    start_time: datetime
    end_time: datetime
    game_weights: dict[str, int] = field(default_factory=dict)  # per-window overrides, game_id -> weight

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return self.start_time < end and start < self.end_time


@dataclass
class PlayerEntry:
    user_id: str
    status: PlayerStatus = PlayerStatus.PENDING
    rejection_reason: str | None = None


Signature = tuple[str, datetime, datetime]


@dataclass
class PlannedSession:
    game_id: str
    start_time: datetime
    end_time: datetime
    players: list[PlayerEntry] = field(default_factory=list)
    score: float = 0.0
    notification_status: NotificationStatus = NotificationStatus.NONE
    id: str | None = None  # None until persisted

    @property
    def signature(self) -> Signature:
        """(game_id, start, end): recognizes "the same" session across passes."""
        return (self.game_id, self.start_time, self.end_time)

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    @property
    def user_ids(self) -> list[str]:
        return [p.user_id for p in self.players]

    def player(self, user_id: str) -> PlayerEntry | None:
        for p in self.players:
            if p.user_id == user_id:
                return p
        return None

    def accepted_count(self) -> int:
        return sum(1 for p in self.players if p.status == PlayerStatus.ACCEPTED)

    def overlaps(self, other: "PlannedSession") -> bool:
        return self.start_time < other.end_time and other.start_time < self.end_time


@dataclass
class AtomicInterval:
    """Sub-range bounded by window edges; the set of covering users is constant inside it."""
    start: datetime
    end: datetime
    window_ids: list[str]
    user_ids: set[str]


@dataclass
class CandidateWindow:
    """Merged (and later duration-split) window; participants may only cover part of it."""
    start: datetime
    end: datetime
    window_ids: list[str]
    user_ids: set[str]

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


@dataclass
class SessionUpdated:
    """Published after a session is touched by a pass or a player action."""
    session: PlannedSession
    now: datetime


@dataclass
class MatchmakingPlan:
    """Pure result of a pass: what to keep, what to write, what to delete."""
    confirmed: list[PlannedSession]
    selected: list[PlannedSession]  # new + reconciled, conflict-free (to save)
    obsolete_ids: list[str]

    @property
    def sessions(self) -> list[PlannedSession]:
        return self.confirmed + self.selected
