from app.models.availability_window import AvailabilityGameWeight, AvailabilityWindow
from app.models.game import Game
from app.models.planned_session import PlannedSession, SessionPlayer
from app.models.user_game_preference import UserGamePreference

__all__ = [
    "AvailabilityGameWeight",
    "AvailabilityWindow",
    "Game",
    "PlannedSession",
    "SessionPlayer",
    "UserGamePreference",
]
