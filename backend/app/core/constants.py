"""
Centralized constants for the scheduler and player actions (Encapsulate What Changes).

Change job IDs or intervals here instead of scattering literals across main and routes.
Engine tuning (durations, weights, lookaheads) lives in matchmaking_config (env-driven).
"""

# Scheduler job IDs (must match ids used in main.py add_job)
MATCHMAKING_JOB_ID = "matchmaking_pass"
NOTIFICATION_SWEEP_JOB_ID = "notification_sweep"

# Full re-plan every 5 min; the sweep catches sessions crossing the 2h notice threshold
MATCHMAKING_INTERVAL_SECONDS = 300
NOTIFICATION_SWEEP_INTERVAL_SECONDS = 60

# Reject reason that also removes the player's overlapping availability
REJECT_REASON_NOT_AVAILABLE = "NOT_AVAILABLE"

# Preference weights (global and per-window)
MIN_WEIGHT = 0
MAX_WEIGHT = 10

# Acting user header (auth is handled upstream)
USER_ID_HEADER = "X-User-Id"

# Listing caps so responses stay bounded
UPCOMING_SESSIONS_LIMIT = 200
