"""
Matchmaking engine: availability windows in, conflict-free planned sessions out.

- intervals: raw windows -> atomic intervals with participant sets.
- windows: merge contiguous intervals sharing a core group, cut into session-sized chunks.
- scoring: best game per chunk from weighted preferences; participating players.
- reconcile: adopt identity and player answers of matching preliminary sessions.
- conflicts: greedy packing so no player is double-booked.
- status: dynamic CONFIRMED/PRELIMINARY status and the notification state machine.
- engine: one pass over a snapshot; actions: accept/reject/availability changes.
"""
from app.services.matchmaking.engine import plan_matchmaking, run_matchmaking_pass
from app.services.matchmaking.status import next_notification, session_status
from app.services.matchmaking.types import (
    AvailabilityWindow,
    Game,
    GlobalPreference,
    MatchmakingPlan,
    NotificationStatus,
    PlannedSession,
    PlayerEntry,
    PlayerStatus,
    SessionStatus,
    SessionUpdated,
)

__all__ = [
    "AvailabilityWindow",
    "Game",
    "GlobalPreference",
    "MatchmakingPlan",
    "NotificationStatus",
    "PlannedSession",
    "PlayerEntry",
    "PlayerStatus",
    "SessionStatus",
    "SessionUpdated",
    "next_notification",
    "plan_matchmaking",
    "run_matchmaking_pass",
    "session_status",
]
