"""
Merge atomic intervals into candidate windows, then cut them into session-sized chunks.

Merge: contiguous intervals are joined while a core group of at least min_players users
persists across the boundary. Participants are unioned; scoring later keeps only those whose
raw window overlaps the final chunk.

Split: chunks of target length, except that a remainder shorter than min_remainder is folded
into the last chunk as long as that chunk stays within max_session.
"""
from datetime import datetime

from app.core.matchmaking_config import MatchmakingConfig
from app.services.matchmaking.types import AtomicInterval, CandidateWindow


def merge_intervals(intervals: list[AtomicInterval], config: MatchmakingConfig) -> list[CandidateWindow]:
    merged: list[CandidateWindow] = []
    acc: CandidateWindow | None = None
    for interval in sorted(intervals, key=lambda i: i.start):
        if (
            acc is not None
            and acc.end == interval.start
            and len(acc.user_ids & interval.user_ids) >= config.min_players
        ):
            acc.end = interval.end
            acc.user_ids |= interval.user_ids
            acc.window_ids.extend(wid for wid in interval.window_ids if wid not in acc.window_ids)
            continue
        if acc is not None:
            merged.append(acc)
        acc = CandidateWindow(
            start=interval.start,
            end=interval.end,
            window_ids=list(interval.window_ids),
            user_ids=set(interval.user_ids),
        )
    if acc is not None:
        merged.append(acc)
    return merged


def split_bounds(start: datetime, end: datetime, config: MatchmakingConfig) -> list[tuple[datetime, datetime]]:
    """Chunk [start, end) into (start, end) pairs. Empty when the window is shorter than min_session."""
    if end - start < config.min_session:
        return []

    chunks: list[tuple[datetime, datetime]] = []
    chunk_start = start
    while chunk_start < end:
        remaining = end - chunk_start
        if remaining <= config.target_session:
            if remaining >= config.min_session:
                chunks.append((chunk_start, end))
            break
        if remaining - config.target_session < config.min_remainder and remaining <= config.max_session:
            chunks.append((chunk_start, end))
            break
        chunk_end = chunk_start + config.target_session
        chunks.append((chunk_start, chunk_end))
        chunk_start = chunk_end
    return chunks


def split_window(window: CandidateWindow, config: MatchmakingConfig) -> list[CandidateWindow]:
    return [
        CandidateWindow(start=s, end=e, window_ids=list(window.window_ids), user_ids=set(window.user_ids))
        for s, e in split_bounds(window.start, window.end, config)
    ]


def build_candidate_windows(intervals: list[AtomicInterval], config: MatchmakingConfig) -> list[CandidateWindow]:
    out: list[CandidateWindow] = []
    for window in merge_intervals(intervals, config):
        out.extend(split_window(window, config))
    return out
