"""Price alerts of one user"""
from typing import List, Literal, Optional
from uuid import UUID

from pocket_trader.models.database import PriceAlert
from pocket_trader.models.schemas import PriceAlertCreate
from pocket_trader.services.user_data.base import UserTableService

AlertView = Literal["all", "active", "triggered"]


class PriceAlertService(UserTableService[PriceAlert]):
    model = PriceAlert
    not_found_message = "التنبيه غير موجود"

    async def list(self, view: Optional[AlertView] = None) -> List[PriceAlert]:
        """
        Alerts of the user

        Args:
            view: "active" for armed, untriggered alerts; "triggered" for
                alerts that fired; anything else for all of them
        """
        query = self._scoped()
        if view == "active":
            query = query.where(PriceAlert.is_active.is_(True)).where(PriceAlert.triggered_at.is_(None))
        elif view == "triggered":
            query = query.where(PriceAlert.triggered_at.is_not(None))
        return await self._all(query)

    async def add(self, data: PriceAlertCreate) -> PriceAlert:
        return await self.create(**data.model_dump())

    async def toggle(self, alert_id: UUID, is_active: bool) -> PriceAlert:
        # update() skips None only, so False is written
        return await self.update(alert_id, is_active=is_active)
