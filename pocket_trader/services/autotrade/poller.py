"""
Pending signal polling loop

Every tick fetches the latest pending signals and forwards the ones that
are ready to the first connected broker tab. A signal stays pending until
the tab reports back, so it can be sent again on the next tick.
"""
import asyncio
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
from loguru import logger
from sqlalchemy.ext.asyncio import async_sessionmaker

from pocket_trader.config import settings
from pocket_trader.models.schemas import SignalResponse
from pocket_trader.services.signal_store import SignalStore
from .readiness import broker_now, should_execute_signal
from .tabs import BrokerTabHub


class SignalPoller:
    """Background task relaying ready signals to a broker tab"""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        hub: BrokerTabHub,
        interval_seconds: Optional[float] = None,
        batch_size: Optional[int] = None,
        url_prefix: Optional[str] = None,
        clock: Callable[[], datetime] = broker_now,
    ):
        """
        Args:
            session_factory: session factory for the signal store
            hub: connected broker tabs
            interval_seconds: delay between ticks
            batch_size: pending signals fetched per tick
            url_prefix: broker URL the receiving tab must be on
            clock: broker-local "now"
        """
        self.session_factory = session_factory
        self.hub = hub
        self.interval_seconds = interval_seconds or settings.autotrade_poll_interval_seconds
        self.batch_size = batch_size or settings.autotrade_batch_size
        self.url_prefix = url_prefix or settings.broker_url_prefix
        self.clock = clock
        self._task: Optional[asyncio.Task] = None
        self._tick_count = 0
        self._sent_count = 0
        self._last_tick_at: Optional[datetime] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def stats(self) -> Dict[str, Any]:
        return {
            "running": self.is_running,
            "tick_count": self._tick_count,
            "sent_count": self._sent_count,
            "last_tick_at": self._last_tick_at.isoformat() if self._last_tick_at else None,
            "interval_seconds": self.interval_seconds,
        }

    def start(self) -> None:
        """Start polling; a second call while running is a no-op"""
        if self.is_running:
            return
        logger.info("Signal monitoring started")
        self._task = asyncio.create_task(self._loop(), name="signal_poller")

    async def stop(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.info("Signal monitoring stopped")

    async def _loop(self) -> None:
        while True:
            try:
                await self.tick()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Signal check failed: {e}")
            await asyncio.sleep(self.interval_seconds)

    async def tick(self) -> List[str]:
        """
        One polling pass

        Returns:
            Ids of the signals sent to the broker tab
        """
        self._tick_count += 1
        self._last_tick_at = datetime.utcnow()

        async with self.session_factory() as db:
            signals = await SignalStore(db).fetch_pending(self.batch_size)

        if not signals:
            return []

        logger.info(f"Found {len(signals)} pending signals")
        tab = self.hub.first(self.url_prefix)
        if tab is None:
            logger.info("No open broker tab found")
            return []

        now = self.clock()
        sent: List[str] = []
        for signal in signals:
            if not should_execute_signal(signal, now):
                continue
            payload = SignalResponse.model_validate(signal).model_dump(mode="json")
            await tab.send({"action": "executeSignal", "signal": payload})
            sent.append(str(signal.id))

        self._sent_count += len(sent)
        if sent:
            logger.info(f"Sent {len(sent)} signals to broker tab {tab.tab_id}")
        return sent
