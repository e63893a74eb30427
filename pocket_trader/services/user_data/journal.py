"""Daily trading journal"""
from datetime import date
from decimal import Decimal
from typing import List, Optional

from pocket_trader.models.database import JournalEntry
from pocket_trader.models.schemas import JournalStats
from .base import UserTableService


class JournalService(UserTableService[JournalEntry]):
    model = JournalEntry
    not_found_message = "الصفقة غير موجودة"

    def order_by(self):
        return JournalEntry.trade_date.desc()

    async def today(self, today: Optional[date] = None) -> List[JournalEntry]:
        today = today or date.today()
        return await self._all(self._scoped().where(JournalEntry.trade_date == today))

    async def stats(self) -> JournalStats:
        """
        Win/loss statistics over all entries

        Only ``win`` and ``loss`` results count towards the win rate;
        profit is summed over every entry that has one.
        """
        entries = await self.list()
        wins = sum(1 for e in entries if e.result == "win")
        losses = sum(1 for e in entries if e.result == "loss")
        total = wins + losses
        win_rate = round(wins / total * 100) if total > 0 else 0
        total_profit = sum((e.profit_loss or Decimal("0") for e in entries), Decimal("0"))
        return JournalStats(
            wins=wins,
            losses=losses,
            total=total,
            win_rate=win_rate,
            total_profit=total_profit,
        )
