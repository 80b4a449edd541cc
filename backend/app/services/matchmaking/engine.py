"""
Matchmaking pass.

plan_matchmaking is the pure computation over a snapshot (windows, sessions, games, preferences,
now). run_matchmaking_pass reads the snapshot from the store, plans, then deletes obsolete
sessions and saves the selected ones. It does not commit; the caller owns the transaction.
"""
import logging
from datetime import datetime

from app.core.matchmaking_config import MatchmakingConfig, get_matchmaking_config
from app.services.matchmaking.conflicts import resolve_conflicts
from app.services.matchmaking.intervals import build_atomic_intervals
from app.services.matchmaking.ports import ReferenceData, SessionStore
from app.services.matchmaking.reconcile import (
    classify_sessions,
    exclude_committed_windows,
    reconcile_drafts,
)
from app.services.matchmaking.scoring import WeightResolver, build_draft_session
from app.services.matchmaking.types import (
    AvailabilityWindow,
    Game,
    GlobalPreference,
    MatchmakingPlan,
    PlannedSession,
)
from app.services.matchmaking.windows import build_candidate_windows

logger = logging.getLogger(__name__)


def plan_matchmaking(
    windows: list[AvailabilityWindow],
    sessions: list[PlannedSession],
    games: list[Game],
    preferences: list[GlobalPreference],
    now: datetime,
    config: MatchmakingConfig,
) -> MatchmakingPlan:
    games_by_id = {g.id: g for g in games}
    confirmed, preliminary = classify_sessions(sessions, games_by_id, now, config)

    if not windows:
        # Nothing can justify a preliminary session any more
        return MatchmakingPlan(
            confirmed=confirmed,
            selected=[],
            obsolete_ids=[s.id for s in preliminary if s.id is not None],
        )

    open_windows = exclude_committed_windows(windows, confirmed)
    intervals = build_atomic_intervals(open_windows, config)
    candidate_windows = build_candidate_windows(intervals, config)

    resolver = WeightResolver(preferences, config.default_weight)
    windows_by_id = {w.id: w for w in open_windows}
    drafts = []
    for candidate in candidate_windows:
        draft = build_draft_session(candidate, windows_by_id, games, resolver, now, config)
        if draft is not None:
            drafts.append(draft)

    candidates, obsolete_ids = reconcile_drafts(drafts, preliminary, now)
    selected, rejected = resolve_conflicts(candidates, fixed=confirmed)
    obsolete_ids.extend(s.id for s in rejected if s.id is not None)
    selected.sort(key=lambda s: (s.start_time, s.end_time, s.game_id))

    logger.info(
        "Matchmaking plan: windows=%s intervals=%s candidates=%s drafts=%s selected=%s "
        "confirmed=%s obsolete=%s",
        len(open_windows), len(intervals), len(candidate_windows), len(drafts),
        len(selected), len(confirmed), len(obsolete_ids),
    )
    return MatchmakingPlan(confirmed=confirmed, selected=selected, obsolete_ids=obsolete_ids)


def run_matchmaking_pass(
    store: SessionStore,
    reference: ReferenceData,
    now: datetime,
    config: MatchmakingConfig | None = None,
) -> MatchmakingPlan:
    """Read, plan, write. Returned plan.selected holds the saved sessions (ids assigned)."""
    config = config or get_matchmaking_config()
    windows = store.list_active_windows(now)
    sessions = store.list_active_sessions(now)
    games = reference.list_games()
    user_ids = sorted({w.user_id for w in windows})
    preferences = reference.list_global_preferences(user_ids) if user_ids else []

    plan = plan_matchmaking(windows, sessions, games, preferences, now, config)
    if plan.obsolete_ids:
        store.delete_sessions(plan.obsolete_ids)
    saved = store.save_sessions(plan.selected) if plan.selected else []
    return MatchmakingPlan(confirmed=plan.confirmed, selected=saved, obsolete_ids=plan.obsolete_ids)
