"""Capital growth goals"""
from typing import Optional
from uuid import UUID
from sqlalchemy import update

from pocket_trader.models.database import TradingGoal
from pocket_trader.models.schemas import TradingGoalCreate
from .base import UserTableService


class TradingGoalService(UserTableService[TradingGoal]):
    model = TradingGoal
    not_found_message = "الخطة غير موجودة"

    async def active(self) -> Optional[TradingGoal]:
        result = await self.db.execute(self._scoped().where(TradingGoal.is_active.is_(True)))
        return result.scalars().first()

    async def _deactivate_all(self) -> None:
        await self.db.execute(
            update(TradingGoal)
            .where(TradingGoal.user_id == self.user_id)
            .values(is_active=False)
        )

    async def add(self, data: TradingGoalCreate) -> TradingGoal:
        """New goal becomes the only active one"""
        await self._deactivate_all()
        return await self.create(**data.model_dump(), is_active=True)

    async def activate(self, goal_id: UUID) -> TradingGoal:
        await self.get(goal_id)
        await self._deactivate_all()
        return await self.update(goal_id, is_active=True)
