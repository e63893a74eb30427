"""Result-to-signal matching"""
from datetime import datetime, timedelta
from typing import List, Optional
from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pocket_trader.config import settings
from pocket_trader.models.database import Signal
from .parser import ParsedResult, asset_search_key


def stored_asset_key(column):
    """SQL counterpart of asset_search_key for a stored asset column"""
    key = func.replace(func.upper(column), "-OTC", "")
    return func.replace(func.replace(key, "/", ""), "-", "")


class ResultMatcher:
    """
    Finds the open signal a result message reports on

    Candidates are unresolved signals received inside the recency window,
    most recent first. When the result names an asset the candidates are
    narrowed by a loose substring match. The most recent candidate wins;
    there is no further tie-break between same-asset signals.
    """

    def __init__(
        self,
        db: AsyncSession,
        window: Optional[timedelta] = None,
        max_candidates: Optional[int] = None,
    ):
        self.db = db
        self.window = window or timedelta(hours=settings.result_match_window_hours)
        self.max_candidates = max_candidates or settings.result_match_candidates

    async def find_candidates(
        self,
        parsed: ParsedResult,
        now: Optional[datetime] = None,
    ) -> List[Signal]:
        """
        Unresolved signals that could own this result

        Args:
            parsed: parsed result message
            now: reference time (UTC, default: current time)

        Returns:
            Candidates ordered most recent first
        """
        now = now or datetime.utcnow()
        query = (
            select(Signal)
            .where(Signal.result.is_(None))
            .where(Signal.received_at >= now - self.window)
            .order_by(Signal.received_at.desc())
            .limit(self.max_candidates)
        )

        if parsed.asset:
            needle = asset_search_key(parsed.asset)
            query = query.where(stored_asset_key(Signal.asset).ilike(f"%{needle}%"))

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def find_best_signal(
        self,
        parsed: ParsedResult,
        now: Optional[datetime] = None,
    ) -> Optional[Signal]:
        """Most recent matching candidate, or None"""
        candidates = await self.find_candidates(parsed, now)
        if not candidates:
            logger.info(f"No open signal matches result {parsed.result} (asset={parsed.asset})")
            return None

        best = candidates[0]
        logger.info(
            f"Result {parsed.result} matched signal {best.id} "
            f"{best.asset} received at {best.received_at} "
            f"({len(candidates)} candidates)"
        )
        return best
