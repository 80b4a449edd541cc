"""
Game scoring: pick the best game for a candidate window and the players who will get it.

weight(user, game) = window override, else global preference, else default. Weight 0 is a veto.
score = sum(weights of eligible users) + eligible_count * participation_bonus.
Ties keep the first game in the provided list.
"""
import logging
from datetime import datetime

from app.core.matchmaking_config import MatchmakingConfig
from app.services.matchmaking.types import (
    AvailabilityWindow,
    CandidateWindow,
    Game,
    GlobalPreference,
    PlannedSession,
    PlayerEntry,
)

logger = logging.getLogger(__name__)


class WeightResolver:
    """Resolves per-(window, game) weight with the override -> global -> default fallback."""

    def __init__(self, preferences: list[GlobalPreference], default_weight: int):
        self._global = {(p.user_id, p.game_id): p.weight for p in preferences}
        self._default = default_weight

    def weight(self, window: AvailabilityWindow, game_id: str) -> int:
        if game_id in window.game_weights:
            return window.game_weights[game_id]
        return self._global.get((window.user_id, game_id), self._default)


def one_window_per_user(windows: list[AvailabilityWindow]) -> list[AvailabilityWindow]:
    """First window per user, preserving order."""
    seen: set[str] = set()
    out = []
    for w in windows:
        if w.user_id in seen:
            continue
        seen.add(w.user_id)
        out.append(w)
    return out


def score_game(
    windows: list[AvailabilityWindow],
    game: Game,
    resolver: WeightResolver,
    config: MatchmakingConfig,
) -> tuple[int, list[AvailabilityWindow]]:
    """Returns (score, eligible windows). Expects one window per user."""
    eligible = []
    total = 0
    for w in windows:
        weight = resolver.weight(w, game.id)
        if weight <= 0:
            continue
        eligible.append(w)
        total += weight
    return total + len(eligible) * config.participation_bonus, eligible


def pick_best_game(
    windows: list[AvailabilityWindow],
    games: list[Game],
    resolver: WeightResolver,
    config: MatchmakingConfig,
) -> tuple[Game, int] | None:
    best: tuple[Game, int] | None = None
    for game in games:
        score, eligible = score_game(windows, game, resolver, config)
        if len(eligible) < config.min_players:
            continue
        if best is None or score > best[1]:
            best = (game, score)
    return best


def _truncate(dt: datetime) -> datetime:
    return dt.replace(microsecond=0)


def build_draft_session(
    candidate: CandidateWindow,
    windows_by_id: dict[str, AvailabilityWindow],
    games: list[Game],
    resolver: WeightResolver,
    now: datetime,
    config: MatchmakingConfig,
) -> PlannedSession | None:
    """
    Score every game for the candidate and build a PENDING-only draft session.
    None when no game is eligible or too few players actually overlap the chunk.
    """
    windows = [windows_by_id[wid] for wid in candidate.window_ids if wid in windows_by_id]
    best = pick_best_game(one_window_per_user(windows), games, resolver, config)
    if best is None:
        return None
    game, _ = best

    # Merged windows carry users who only covered part of the range; keep the ones overlapping this chunk
    participating = one_window_per_user([
        w for w in windows
        if resolver.weight(w, game.id) > 0 and w.overlaps(candidate.start, candidate.end)
    ])
    if len(participating) < config.min_players:
        logger.debug(
            "Dropping candidate %s-%s for %s: %s participating players",
            candidate.start, candidate.end, game.id, len(participating),
        )
        return None

    start = _truncate(max(candidate.start, now))
    end = _truncate(candidate.end)
    if end - start < config.min_session:
        return None

    score, _ = score_game(participating, game, resolver, config)
    return PlannedSession(
        game_id=game.id,
        start_time=start,
        end_time=end,
        players=[PlayerEntry(user_id=w.user_id) for w in participating],
        score=float(score),
    )
