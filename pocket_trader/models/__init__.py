"""Models package"""
from .database import (
    Base, User, Signal, VirtualWallet, VirtualTrade, PushSubscription,
    PriceAlert, UserFavorite, JournalEntry, TradingGoal, UserNotification,
)
from .schemas import (
    UserCreate, UserLogin, UserResponse,
    Token, TokenData,
    TelegramUpdate, TelegramMessage,
    SignalResponse, SignalStatusUpdate,
    AutoTradeMessage,
    MutationResponse,
    HealthCheck,
)

__all__ = [
    "Base", "User", "Signal", "VirtualWallet", "VirtualTrade", "PushSubscription",
    "PriceAlert", "UserFavorite", "JournalEntry", "TradingGoal", "UserNotification",
    "UserCreate", "UserLogin", "UserResponse",
    "Token", "TokenData",
    "TelegramUpdate", "TelegramMessage",
    "SignalResponse", "SignalStatusUpdate",
    "AutoTradeMessage",
    "MutationResponse",
    "HealthCheck",
]
