"""FastAPI dependencies"""
import secrets
from typing import AsyncGenerator, Optional
from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from pocket_trader.config import settings
from pocket_trader.core.exceptions import (
    AuthenticationException, ConflictException, NotFoundException,
    PocketTraderException, ValidationException,
)
from pocket_trader.db import get_db
from pocket_trader.models.database import User
from pocket_trader.services.auth import AuthService
from pocket_trader.services.autotrade import AutoTradeController, get_autotrade_controller
from pocket_trader.services.market import BinancePriceClient
from pocket_trader.services.push import PushSender

security = HTTPBearer()

MSG_LOGIN_REQUIRED = "يجب تسجيل الدخول أولاً"


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Currently authenticated user
    
    Args:
        credentials: HTTP Authorization header
        db: database session
        
    Returns:
        Current user
        
    Raises:
        HTTPException: authentication failed
    """
    try:
        token_data = await AuthService.verify_token(credentials.credentials, token_type="access")
    except AuthenticationException:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=MSG_LOGIN_REQUIRED,
            headers={"WWW-Authenticate": "Bearer"},
        )
    
    user = await AuthService.get_user_by_id(db, token_data.user_id)
    
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=MSG_LOGIN_REQUIRED,
            headers={"WWW-Authenticate": "Bearer"},
        )
    
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="الحساب غير نشط",
        )
    
    return user


def extension_key_matches(key: Optional[str]) -> bool:
    """Whether ``key`` is the configured extension key (always True when none is set)"""
    if not settings.extension_api_key:
        return True
    return key is not None and secrets.compare_digest(key, settings.extension_api_key)


async def verify_extension_key(x_api_key: Optional[str] = Header(default=None)) -> None:
    """Shared key of the browser extension; skipped when none is configured"""
    if not extension_key_matches(x_api_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid extension key",
        )


async def verify_telegram_secret(
    x_telegram_bot_api_secret_token: Optional[str] = Header(default=None),
) -> None:
    """Secret token Telegram echoes back when the webhook was set with one"""
    expected = settings.telegram_webhook_secret
    if not expected:
        return
    if x_telegram_bot_api_secret_token is None or not secrets.compare_digest(
        x_telegram_bot_api_secret_token, expected
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid webhook secret",
        )


def get_controller() -> AutoTradeController:
    return get_autotrade_controller()


async def get_push_sender() -> AsyncGenerator[PushSender, None]:
    sender = PushSender()
    try:
        yield sender
    finally:
        await sender.close()


async def get_price_client() -> AsyncGenerator[BinancePriceClient, None]:
    async with BinancePriceClient() as client:
        yield client


def http_error(exc: PocketTraderException) -> HTTPException:
    """HTTPException carrying the service error's (Arabic) message"""
    if isinstance(exc, NotFoundException):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, ConflictException):
        code = status.HTTP_409_CONFLICT
    elif isinstance(exc, ValidationException):
        code = status.HTTP_400_BAD_REQUEST
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=code, detail=exc.message)
