from app.services.matchmaking_service import (
    accept_session,
    create_window,
    delete_window,
    list_upcoming_sessions,
    reject_session,
    run_matchmaking,
)

__all__ = [
    "accept_session",
    "create_window",
    "delete_window",
    "list_upcoming_sessions",
    "reject_session",
    "run_matchmaking",
]
