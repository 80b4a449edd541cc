"""
Dynamic session status and the notification state machine.

Status is a pure function of (accepted count, game.min_players, start, now); nothing stores it.
Notification status only moves forward: NONE -> PRELIMINARY_SENT -> CONFIRMED_SENT.
"""
from datetime import datetime

from app.core.matchmaking_config import MatchmakingConfig
from app.services.matchmaking.types import (
    NOTIFICATION_RANK,
    Game,
    NotificationStatus,
    PlannedSession,
    SessionStatus,
)


def required_players(game: Game | None) -> int:
    """Never fewer than 2 accepted players; unknown game falls back to 2."""
    return max(2, game.min_players if game is not None else 2)


def session_status(
    session: PlannedSession,
    game: Game | None,
    now: datetime,
    config: MatchmakingConfig,
) -> SessionStatus:
    enough_players = session.accepted_count() >= required_players(game)
    starts_soon = session.start_time < now + config.confirmation_lookahead
    if enough_players and starts_soon:
        return SessionStatus.CONFIRMED
    return SessionStatus.PRELIMINARY


def is_active(session: PlannedSession, now: datetime) -> bool:
    return session.end_time > now


def next_notification(
    session: PlannedSession,
    game: Game | None,
    now: datetime,
    config: MatchmakingConfig,
) -> NotificationStatus | None:
    """
    Which notice (if any) is due for this session right now.
    CONFIRMED and not yet CONFIRMED_SENT -> CONFIRMED_SENT.
    PRELIMINARY, nothing sent, starting within the notice window and not over -> PRELIMINARY_SENT.
    """
    status = session_status(session, game, now, config)
    if status == SessionStatus.CONFIRMED:
        if session.notification_status != NotificationStatus.CONFIRMED_SENT:
            return NotificationStatus.CONFIRMED_SENT
        return None
    if (
        session.notification_status == NotificationStatus.NONE
        and session.start_time < now + config.preliminary_notice
        and session.end_time > now
    ):
        return NotificationStatus.PRELIMINARY_SENT
    return None


def advance_notification(current: NotificationStatus, target: NotificationStatus) -> NotificationStatus:
    """Never regresses; returns whichever of the two is further along."""
    if NOTIFICATION_RANK[target] > NOTIFICATION_RANK[current]:
        return target
    return current
