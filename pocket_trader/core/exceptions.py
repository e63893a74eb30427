"""Custom exception classes"""
from typing import Any, Optional


class PocketTraderException(Exception):
    """Base exception class"""
    
    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


class AuthenticationException(PocketTraderException):
    """Authentication errors"""
    pass


class DatabaseException(PocketTraderException):
    """Database errors"""
    pass


class ValidationException(PocketTraderException):
    """Validation errors"""
    pass


class NotFoundException(PocketTraderException):
    """Requested row does not exist for this user"""
    pass


class ConflictException(PocketTraderException):
    """Row already exists"""
    pass


class InsufficientBalanceException(ValidationException):
    """Paper wallet cannot cover the trade amount"""
    pass


class TelegramAPIException(PocketTraderException):
    """Telegram Bot API errors"""
    pass


class MarketDataException(PocketTraderException):
    """Price feed errors"""
    pass


class BrokerTabException(PocketTraderException):
    """Broker tab is missing or did not answer"""
    pass
