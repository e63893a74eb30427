"""Push subscription lifecycle"""
from datetime import datetime
from typing import List
from uuid import UUID
from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from pocket_trader.models.database import PushSubscription
from pocket_trader.models.schemas import PushSubscriptionCreate


class PushSubscriptionService:
    """Subscriptions of one user, keyed by endpoint"""

    def __init__(self, db: AsyncSession, user_id: UUID):
        self.db = db
        self.user_id = user_id

    async def list(self) -> List[PushSubscription]:
        result = await self.db.execute(
            select(PushSubscription).where(PushSubscription.user_id == self.user_id)
        )
        return list(result.scalars().all())

    async def subscribe(self, data: PushSubscriptionCreate) -> PushSubscription:
        """Insert or refresh the keys of an existing (user, endpoint) pair"""
        result = await self.db.execute(
            select(PushSubscription)
            .where(PushSubscription.user_id == self.user_id)
            .where(PushSubscription.endpoint == data.endpoint)
        )
        subscription = result.scalar_one_or_none()

        if subscription is None:
            subscription = PushSubscription(
                user_id=self.user_id,
                endpoint=data.endpoint,
                p256dh=data.keys.p256dh,
                auth=data.keys.auth,
            )
            self.db.add(subscription)
        else:
            subscription.p256dh = data.keys.p256dh
            subscription.auth = data.keys.auth
            subscription.updated_at = datetime.utcnow()

        await self.db.commit()
        await self.db.refresh(subscription)
        logger.info(f"Push subscription saved for user {self.user_id}")
        return subscription

    async def unsubscribe(self, endpoint: str) -> bool:
        """Delete the pair; False when it did not exist"""
        result = await self.db.execute(
            delete(PushSubscription)
            .where(PushSubscription.user_id == self.user_id)
            .where(PushSubscription.endpoint == endpoint)
        )
        await self.db.commit()
        return result.rowcount > 0
