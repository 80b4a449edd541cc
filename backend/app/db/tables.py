"""
Single source of truth for database tables that exist after migrations (001).

Use these names when writing raw SQL (e.g. TRUNCATE). alembic/env.py asserts the registered
models match this list.
"""
# All tables that exist in the DB. Must match models and migration 001.
ALL_TABLE_NAMES = (
    "games",
    "user_game_preferences",
    "availability_windows",
    "availability_game_weights",
    "planned_sessions",
    "session_players",
)

# Tables cleared when resetting matchmaking state (TRUNCATE). Children first.
MATCHMAKING_TABLE_NAMES = (
    "session_players",
    "planned_sessions",
)
