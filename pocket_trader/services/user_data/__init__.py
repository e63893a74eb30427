"""Per-user data services"""
from .base import UserTableService
from .favorites import FavoriteService
from .goals import TradingGoalService
from .journal import JournalService
from .notifications import NotificationService

__all__ = [
    "UserTableService",
    "FavoriteService",
    "TradingGoalService",
    "JournalService",
    "NotificationService",
]
