"""Telegram webhook routes"""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from pocket_trader.api.dependencies import verify_extension_key, verify_telegram_secret
from pocket_trader.config import settings
from pocket_trader.core.exceptions import DatabaseException, TelegramAPIException
from pocket_trader.db import get_db
from pocket_trader.models.schemas import TelegramUpdate
from pocket_trader.services.telegram import TelegramBotClient, TelegramIngestService

router = APIRouter(prefix="/telegram", tags=["telegram"])


@router.get("/webhook")
async def webhook_ping() -> dict:
    return {"ok": True}


@router.post("/webhook", dependencies=[Depends(verify_telegram_secret)])
async def receive_update(
    update: TelegramUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Receive a Telegram update
    
    Signal posts become pending signals, result posts resolve the matching
    open signal, everything else is acknowledged and dropped.
    """
    try:
        return await TelegramIngestService(db).handle_update(update)
    except DatabaseException as e:
        logger.error(f"Webhook error: {e.message}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": e.message},
        )


@router.post("/webhook/setup", dependencies=[Depends(verify_extension_key)])
async def setup_webhook() -> dict:
    """Point the bot's webhook at this service"""
    if not settings.telegram_bot_token:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="TELEGRAM_BOT_TOKEN is not configured",
        )
    if not settings.public_base_url:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="PUBLIC_BASE_URL is not configured",
        )
    
    webhook_url = settings.telegram_webhook_url
    try:
        async with TelegramBotClient() as client:
            result = await client.set_webhook(
                webhook_url,
                secret_token=settings.telegram_webhook_secret or None,
            )
    except TelegramAPIException as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=e.message,
        )
    
    return {"success": bool(result.get("ok")), "webhook": webhook_url, "telegram": result}
