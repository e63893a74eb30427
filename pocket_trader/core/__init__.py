"""Core package"""
from .exceptions import (
    PocketTraderException,
    AuthenticationException,
    DatabaseException,
    ValidationException,
    NotFoundException,
    ConflictException,
    InsufficientBalanceException,
    TelegramAPIException,
    MarketDataException,
    BrokerTabException,
)

__all__ = [
    "PocketTraderException",
    "AuthenticationException",
    "DatabaseException",
    "ValidationException",
    "NotFoundException",
    "ConflictException",
    "InsufficientBalanceException",
    "TelegramAPIException",
    "MarketDataException",
    "BrokerTabException",
]
