"""Price alert watcher"""
import asyncio
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, Optional
from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pocket_trader.config import settings
from pocket_trader.core.exceptions import DatabaseException
from pocket_trader.models.database import PriceAlert
from pocket_trader.models.schemas import AlertCheckResult
from pocket_trader.services.market import BinancePriceClient
from pocket_trader.services.push import PushSender
from pocket_trader.services.realtime import ChangeFeed, change_feed
from pocket_trader.services.user_data.notifications import NotificationService


def is_triggered(condition: str, current_price: Decimal, target_price: Decimal) -> bool:
    if condition == "above":
        return current_price >= target_price
    if condition == "below":
        return current_price <= target_price
    return False


def alert_message(alert: PriceAlert, current_price: Decimal) -> Dict[str, str]:
    """Arabic title/body shared by the in-app notification and the push"""
    movement = "صعد فوق" if alert.condition == "above" else "هبط تحت"
    name = alert.symbol_name_ar or alert.symbol
    return {
        "title": f"🔔 تنبيه سعري: {name}",
        "body": f"السعر {movement} {alert.target_price} (الحالي: {current_price:.2f})",
    }


class PriceAlertChecker:
    """Checks every armed alert against live prices"""
    
    def __init__(
        self,
        db: AsyncSession,
        prices: BinancePriceClient,
        sender: PushSender,
        feed: Optional[ChangeFeed] = None,
    ):
        self.db = db
        self.prices = prices
        self.sender = sender
        self.feed = feed or change_feed
    
    async def _armed_alerts(self) -> List[PriceAlert]:
        result = await self.db.execute(
            select(PriceAlert)
            .where(PriceAlert.is_active.is_(True))
            .where(PriceAlert.triggered_at.is_(None))
        )
        return list(result.scalars().all())
    
    async def run(self, now: Optional[datetime] = None) -> AlertCheckResult:
        """
        One pass over all armed alerts
        
        Triggered alerts get ``triggered_at``, a ``price_alert`` notification
        for the owner and a push to each of the owner's subscriptions.
        
        Raises:
            MarketDataException: price lookup failed
            DatabaseException: alert update failed
        """
        now = now or datetime.utcnow()
        alerts = await self._armed_alerts()
        if not alerts:
            logger.debug("No active alerts found")
            return AlertCheckResult(checked=0, triggered=0, push_sent=0)
        
        logger.info(f"Found {len(alerts)} active alerts")
        price_map = await self.prices.get_prices({alert.symbol for alert in alerts})
        
        triggered = 0
        push_sent = 0
        for alert in alerts:
            current_price = price_map.get(alert.symbol)
            if current_price is None:
                continue
            if not is_triggered(alert.condition, current_price, alert.target_price):
                continue
            
            logger.info(
                f"Alert triggered: {alert.symbol} {alert.condition} "
                f"{alert.target_price} (current: {current_price})"
            )
            try:
                alert.triggered_at = now
                await self.db.commit()
            except SQLAlchemyError as e:
                await self.db.rollback()
                raise DatabaseException(f"Failed to mark alert triggered: {e}")
            self.feed.publish("price_alerts", "UPDATE", alert)
            triggered += 1
            
            message = alert_message(alert, current_price)
            await NotificationService(self.db, alert.user_id, self.feed).notify(
                "price_alert",
                message["title"],
                message["body"],
                {
                    "alert_id": str(alert.id),
                    "symbol": alert.symbol,
                    "current_price": str(current_price),
                    "target_price": str(alert.target_price),
                    "condition": alert.condition,
                },
            )
            sent, _ = await self.sender.send_to_user(
                self.db,
                alert.user_id,
                {
                    **message,
                    "type": "price_alert",
                    "data": {"url": "/markets", "alert_id": str(alert.id)},
                    "tag": f"price-alert-{alert.id}",
                },
            )
            push_sent += sent
        
        return AlertCheckResult(checked=len(alerts), triggered=triggered, push_sent=push_sent)


class PriceAlertWatcher:
    """Background task running the checker at a fixed interval"""
    
    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        interval_seconds: Optional[int] = None,
    ):
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds or settings.price_alert_check_interval_seconds
        self._task: Optional[asyncio.Task] = None
    
    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()
    
    def start(self):
        if self.is_running:
            return
        self._task = asyncio.create_task(self._loop())
        logger.info(f"Price alert watcher started (interval: {self.interval_seconds}s)")
    
    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Price alert watcher stopped")
    
    async def check_once(self) -> AlertCheckResult:
        async with self.session_factory() as db:
            async with BinancePriceClient() as prices:
                sender = PushSender()
                try:
                    return await PriceAlertChecker(db, prices, sender).run()
                finally:
                    await sender.close()
    
    async def _loop(self):
        while True:
            try:
                result = await self.check_once()
                if result.triggered:
                    logger.info(f"Price alerts triggered: {result.triggered}")
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Price alert check failed: {e}")
            await asyncio.sleep(self.interval_seconds)
