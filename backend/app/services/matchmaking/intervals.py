"""
Time window index: split raw availability into atomic intervals.

Boundaries are the sorted distinct start/end timestamps of all windows. An interval is kept
only when enough distinct users fully cover it; each user counts once even if two of their
windows overlap.
"""
import logging

from app.core.matchmaking_config import MatchmakingConfig
from app.services.matchmaking.types import AtomicInterval, AvailabilityWindow

logger = logging.getLogger(__name__)


def valid_windows(windows: list[AvailabilityWindow]) -> list[AvailabilityWindow]:
    """Drop malformed windows (start >= end) with a warning; order by start then id."""
    out = []
    for w in windows:
        if w.start_time >= w.end_time:
            logger.warning(
                "Skipping malformed availability window %s (user %s): start %s >= end %s",
                w.id, w.user_id, w.start_time, w.end_time,
            )
            continue
        out.append(w)
    out.sort(key=lambda w: (w.start_time, w.end_time, w.id))
    return out


def build_atomic_intervals(
    windows: list[AvailabilityWindow],
    config: MatchmakingConfig,
) -> list[AtomicInterval]:
    windows = valid_windows(windows)
    if not windows:
        return []

    boundaries = sorted({w.start_time for w in windows} | {w.end_time for w in windows})
    intervals: list[AtomicInterval] = []
    for start, end in zip(boundaries, boundaries[1:]):
        if start >= end:
            continue
        window_ids: list[str] = []
        user_ids: set[str] = set()
        for w in windows:
            if w.start_time <= start and w.end_time >= end and w.user_id not in user_ids:
                user_ids.add(w.user_id)
                window_ids.append(w.id)
        if len(user_ids) >= config.min_players:
            intervals.append(AtomicInterval(start=start, end=end, window_ids=window_ids, user_ids=user_ids))
    return intervals
