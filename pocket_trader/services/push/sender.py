"""Web Push delivery"""
import json
from typing import Any, Dict, Optional, Tuple
from uuid import UUID
import httpx
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pocket_trader.config import settings
from pocket_trader.models.database import PushSubscription
from .notifications import render_notification


class PushSender:
    """Posts rendered notifications to push service endpoints"""
    
    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self._client = client
    
    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=10.0)
        return self._client
    
    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None
    
    async def send(self, subscription: PushSubscription, payload: Dict[str, Any]) -> bool:
        """
        Deliver one notification
        
        Args:
            subscription: stored browser subscription
            payload: raw payload; defaults are applied before sending
            
        Returns:
            Whether the push service accepted it
        """
        body = json.dumps(render_notification(payload), ensure_ascii=False)
        logger.debug(f"Sending push to: {subscription.endpoint[:60]}...")
        try:
            client = await self._get_client()
            response = await client.post(
                subscription.endpoint,
                content=body.encode("utf-8"),
                headers={
                    "Content-Type": "application/json",
                    "TTL": str(settings.push_ttl_seconds),
                    "Urgency": "high",
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"Error sending push: {e}")
            return False
        
        if response.is_success:
            return True
        logger.error(f"Push error: {response.status_code} {response.text}")
        return False
    
    async def send_to_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        payload: Dict[str, Any],
    ) -> Tuple[int, int]:
        """
        Deliver to every subscription of a user
        
        Returns:
            (sent, failed)
        """
        result = await db.execute(
            select(PushSubscription).where(PushSubscription.user_id == user_id)
        )
        sent = failed = 0
        for subscription in result.scalars().all():
            if await self.send(subscription, payload):
                sent += 1
            else:
                failed += 1
        return sent, failed
