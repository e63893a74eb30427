"""Telegram webhook ingestion"""
from datetime import datetime
from typing import Any, Dict, Optional
from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pocket_trader.core.exceptions import DatabaseException
from pocket_trader.models.database import Signal
from pocket_trader.models.schemas import TelegramMessage, TelegramUpdate
from pocket_trader.services.realtime import ChangeFeed, change_feed
from .matcher import ResultMatcher
from .parser import ParsedResult, ParsedSignal, classify_message


class TelegramIngestService:
    """Turns Telegram updates into signal inserts and result updates"""

    def __init__(self, db: AsyncSession, feed: Optional[ChangeFeed] = None):
        self.db = db
        self.feed = feed or change_feed
        self.matcher = ResultMatcher(db)

    async def handle_update(
        self,
        update: TelegramUpdate,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Process one update

        Args:
            update: Telegram update
            now: reference time for result matching (UTC)

        Returns:
            Webhook response body

        Raises:
            DatabaseException: a read or write against the signal store failed
        """
        message = update.effective_message
        if message is None or not message.text:
            return {"ok": True, "ignored": True}

        parsed = classify_message(message.text)
        try:
            if isinstance(parsed, ParsedSignal):
                return await self.ingest_signal(message, parsed)
            if isinstance(parsed, ParsedResult):
                return await self.ingest_result(parsed, now)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Signal store write failed for message {message.message_id}: {e}")
            raise DatabaseException(f"Signal store write failed: {str(e)}") from e

        logger.debug(f"Unclassified Telegram message {message.message_id} dropped")
        return {"ok": True, "type": "ignored"}

    async def _exists(self, telegram_message_id: int) -> bool:
        result = await self.db.execute(
            select(Signal.id)
            .where(Signal.telegram_message_id == telegram_message_id)
            .limit(1)
        )
        return result.first() is not None

    async def ingest_signal(self, message: TelegramMessage, parsed: ParsedSignal) -> Dict[str, Any]:
        """Insert a pending signal unless this message was already stored"""
        if await self._exists(message.message_id):
            logger.info(f"Duplicate Telegram message {message.message_id}, skipping")
            return {"ok": True, "type": "signal", "duplicate": True}

        signal = Signal(
            asset=parsed.asset,
            timeframe=parsed.timeframe,
            direction=parsed.direction,
            entry_time=parsed.entry_time,
            raw_message=parsed.raw_message,
            telegram_message_id=message.message_id,
            status="pending",
        )
        self.db.add(signal)
        try:
            await self.db.commit()
        except IntegrityError:
            # Another delivery of the same update won the insert
            await self.db.rollback()
            logger.info(f"Telegram message {message.message_id} inserted concurrently, skipping")
            return {"ok": True, "type": "signal", "duplicate": True}

        await self.db.refresh(signal)
        logger.info(
            f"Signal stored: {signal.asset} {signal.timeframe} {signal.direction} "
            f"entry={signal.entry_time} (message {message.message_id}, rule {parsed.rule})"
        )
        self.feed.publish("signals", "INSERT", signal)
        return {"ok": True, "type": "signal", "signal_id": str(signal.id)}

    async def ingest_result(self, parsed: ParsedResult, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Attach the result to the best open signal, if any"""
        match = await self.matcher.find_best_signal(parsed, now)
        if match is None:
            return {"ok": True, "type": "result", "matched": None}

        match.result = parsed.result
        await self.db.commit()
        await self.db.refresh(match)
        self.feed.publish("signals", "UPDATE", match)
        return {"ok": True, "type": "result", "matched": str(match.id)}
