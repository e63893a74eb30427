"""In-app notifications"""
from typing import Any, Dict, List, Optional
from uuid import UUID
from sqlalchemy import update

from pocket_trader.models.database import UserNotification
from .base import UserTableService


class NotificationService(UserTableService[UserNotification]):
    model = UserNotification
    not_found_message = "الإشعار غير موجود"

    async def list(self, limit: int = 50, unread_only: bool = False) -> List[UserNotification]:
        query = self._scoped().limit(limit)
        if unread_only:
            query = query.where(UserNotification.is_read.is_(False))
        return await self._all(query)

    async def notify(
        self,
        notification_type: str,
        title: str,
        body: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> UserNotification:
        return await self.create(type=notification_type, title=title, body=body, data=data)

    async def mark_read(self, notification_id: UUID) -> UserNotification:
        return await self.update(notification_id, is_read=True)

    async def mark_all_read(self) -> int:
        """
        Mark every unread notification as read

        Returns:
            Number of notifications changed
        """
        result = await self.db.execute(
            update(UserNotification)
            .where(UserNotification.user_id == self.user_id)
            .where(UserNotification.is_read.is_(False))
            .values(is_read=True)
        )
        await self.db.commit()
        if result.rowcount:
            self.feed.publish(self.table, "UPDATE", {"user_id": self.user_id, "is_read": True})
        return result.rowcount
