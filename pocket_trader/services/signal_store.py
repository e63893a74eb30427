"""Signal table access shared by the relay and the REST surface"""
from typing import List, Optional
from uuid import UUID
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pocket_trader.core.exceptions import NotFoundException
from pocket_trader.models.database import Signal
from pocket_trader.services.realtime import ChangeFeed, change_feed


class SignalStore:
    """Reads and status writes on the signals table"""

    def __init__(self, db: AsyncSession, feed: Optional[ChangeFeed] = None):
        self.db = db
        self.feed = feed or change_feed

    async def list_recent(self, limit: int = 20, status: Optional[str] = None) -> List[Signal]:
        """Latest signals, optionally filtered by status"""
        query = select(Signal).order_by(Signal.received_at.desc()).limit(limit)
        if status:
            query = query.where(Signal.status == status)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def fetch_pending(self, limit: int = 10) -> List[Signal]:
        return await self.list_recent(limit=limit, status="pending")

    async def update_status(self, signal_id: UUID, status: str) -> Signal:
        """
        Record the outcome of an execution attempt

        Raises:
            NotFoundException: unknown signal id
        """
        result = await self.db.execute(select(Signal).where(Signal.id == signal_id))
        signal = result.scalar_one_or_none()
        if signal is None:
            raise NotFoundException(f"Signal {signal_id} not found")

        signal.status = status
        await self.db.commit()
        await self.db.refresh(signal)
        logger.info(f"Signal {signal_id} status set to {status}")
        self.feed.publish("signals", "UPDATE", signal)
        return signal
