"""
Matchmaking engine config. .env is the source of truth; these defaults apply only when
the env var is unset. All values read at import time.

Env vars: MIN_PLAYERS_FOR_SESSION, MIN_SESSION_MINUTES, TARGET_SESSION_MINUTES,
MAX_SESSION_MINUTES, MIN_REMAINDER_MINUTES, PARTICIPATION_BONUS, DEFAULT_GAME_WEIGHT,
CONFIRMATION_LOOKAHEAD_MINUTES, PRELIMINARY_NOTICE_MINUTES.

Engine functions never read these module constants directly; they take a MatchmakingConfig
so tests can run with custom values.
"""
import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

# Load backend/.env so scripts/tests/workers that import this module see the same env as main.py
_backend_dir = Path(__file__).resolve().parent.parent.parent
load_dotenv(_backend_dir / ".env", override=False)

_log = logging.getLogger(__name__)


def _int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    raw = os.environ.get(key)
    if raw is None:
        v = default
    else:
        try:
            v = int(raw.strip())
        except ValueError:
            v = default
    if min_val is not None and v < min_val:
        v = min_val
    if max_val is not None and v > max_val:
        v = max_val
    return v


# -----------------------------------------------------------------------------
# Session shape
# -----------------------------------------------------------------------------
MIN_PLAYERS_FOR_SESSION = _int("MIN_PLAYERS_FOR_SESSION", 2, min_val=2, max_val=20)
MIN_SESSION_MINUTES = _int("MIN_SESSION_MINUTES", 60, min_val=15, max_val=240)
TARGET_SESSION_MINUTES = _int("TARGET_SESSION_MINUTES", 120, min_val=MIN_SESSION_MINUTES, max_val=480)
MAX_SESSION_MINUTES = _int("MAX_SESSION_MINUTES", 240, min_val=TARGET_SESSION_MINUTES, max_val=720)
# A cut that would leave less than this much behind is folded into the previous chunk instead
MIN_REMAINDER_MINUTES = _int("MIN_REMAINDER_MINUTES", 60, min_val=1, max_val=240)

# -----------------------------------------------------------------------------
# Game scoring (weights are 0..10; 0 = veto)
# -----------------------------------------------------------------------------
PARTICIPATION_BONUS = _int("PARTICIPATION_BONUS", 2, min_val=0, max_val=100)
DEFAULT_GAME_WEIGHT = _int("DEFAULT_GAME_WEIGHT", 5, min_val=0, max_val=10)

# -----------------------------------------------------------------------------
# Status and notifications
# -----------------------------------------------------------------------------
CONFIRMATION_LOOKAHEAD_MINUTES = _int("CONFIRMATION_LOOKAHEAD_MINUTES", 60, min_val=0, max_val=1440)
PRELIMINARY_NOTICE_MINUTES = _int("PRELIMINARY_NOTICE_MINUTES", 120, min_val=0, max_val=1440)

_log.info(
    "Matchmaking config (from env): min_players=%s session_minutes=%s/%s/%s remainder=%s "
    "bonus=%s default_weight=%s confirm_lookahead=%s preliminary_notice=%s",
    MIN_PLAYERS_FOR_SESSION,
    MIN_SESSION_MINUTES,
    TARGET_SESSION_MINUTES,
    MAX_SESSION_MINUTES,
    MIN_REMAINDER_MINUTES,
    PARTICIPATION_BONUS,
    DEFAULT_GAME_WEIGHT,
    CONFIRMATION_LOOKAHEAD_MINUTES,
    PRELIMINARY_NOTICE_MINUTES,
)


@dataclass(frozen=True)
class MatchmakingConfig:
    """Snapshot of matchmaking config for passing around (e.g. tests)."""
    min_players: int = MIN_PLAYERS_FOR_SESSION
    min_session_minutes: int = MIN_SESSION_MINUTES
    target_session_minutes: int = TARGET_SESSION_MINUTES
    max_session_minutes: int = MAX_SESSION_MINUTES
    min_remainder_minutes: int = MIN_REMAINDER_MINUTES
    participation_bonus: int = PARTICIPATION_BONUS
    default_weight: int = DEFAULT_GAME_WEIGHT
    confirmation_lookahead_minutes: int = CONFIRMATION_LOOKAHEAD_MINUTES
    preliminary_notice_minutes: int = PRELIMINARY_NOTICE_MINUTES

    @property
    def min_session(self) -> timedelta:
        return timedelta(minutes=self.min_session_minutes)

    @property
    def target_session(self) -> timedelta:
        return timedelta(minutes=self.target_session_minutes)

    @property
    def max_session(self) -> timedelta:
        return timedelta(minutes=self.max_session_minutes)

    @property
    def min_remainder(self) -> timedelta:
        return timedelta(minutes=self.min_remainder_minutes)

    @property
    def confirmation_lookahead(self) -> timedelta:
        return timedelta(minutes=self.confirmation_lookahead_minutes)

    @property
    def preliminary_notice(self) -> timedelta:
        return timedelta(minutes=self.preliminary_notice_minutes)


def get_matchmaking_config() -> MatchmakingConfig:
    return MatchmakingConfig()
