"""
Centralized error handling for matchmaking and player actions.
Domain exceptions plus a reusable mapper so routes stay thin and new error types are easy to add.
"""
from __future__ import annotations

from fastapi import HTTPException

# ---------------------------------------------------------------------------
# Constants: status codes
# ---------------------------------------------------------------------------

STATUS_BAD_REQUEST = 400
STATUS_FORBIDDEN = 403
STATUS_NOT_FOUND = 404
STATUS_CONFLICT = 409
STATUS_INTERNAL_ERROR = 500


# ---------------------------------------------------------------------------
# Domain errors
# ---------------------------------------------------------------------------


class MatchmakingError(Exception):
    """Base class for errors surfaced to callers of the matchmaking services."""


class SessionNotFoundError(MatchmakingError):
    def __init__(self, session_id: str):
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class PlayerNotInSessionError(MatchmakingError):
    def __init__(self, session_id: str, user_id: str):
        super().__init__(f"User {user_id} is not part of session {session_id}")
        self.session_id = session_id
        self.user_id = user_id


class WindowNotFoundError(MatchmakingError):
    def __init__(self, window_id: str):
        super().__init__(f"Availability window not found: {window_id}")
        self.window_id = window_id


class WindowOwnershipError(MatchmakingError):
    def __init__(self, window_id: str, user_id: str):
        super().__init__(f"Availability window {window_id} does not belong to user {user_id}")
        self.window_id = window_id
        self.user_id = user_id


class InvalidInputError(MatchmakingError):
    """Malformed input (window start >= end, weight out of range, missing title)."""


class OverlappingWindowError(MatchmakingError):
    def __init__(self) -> None:
        super().__init__("Overlapping availability window exists")


class GameNotFoundError(MatchmakingError):
    def __init__(self, game_id: str):
        super().__init__(f"Game not found: {game_id}")
        self.game_id = game_id


# ---------------------------------------------------------------------------
# Error rules: (exception type, status_code). First match wins.
# Add new rules here instead of scattering checks in routes.
# ---------------------------------------------------------------------------

DOMAIN_ERROR_RULES: list[tuple[type[Exception], int]] = [
    (SessionNotFoundError, STATUS_NOT_FOUND),
    (WindowNotFoundError, STATUS_NOT_FOUND),
    (GameNotFoundError, STATUS_NOT_FOUND),
    (PlayerNotInSessionError, STATUS_NOT_FOUND),
    (WindowOwnershipError, STATUS_FORBIDDEN),
    (OverlappingWindowError, STATUS_CONFLICT),
    (InvalidInputError, STATUS_BAD_REQUEST),
]


def domain_error_to_http(exc: Exception) -> HTTPException:
    """
    Map an exception from a matchmaking service call into an HTTPException.
    Uses DOMAIN_ERROR_RULES for known error types; otherwise returns 500 with the exception message.
    """
    for exc_type, status_code in DOMAIN_ERROR_RULES:
        if isinstance(exc, exc_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=STATUS_INTERNAL_ERROR, detail=str(exc))
