"""Auto-trade message handling"""
from typing import Any, Dict, Optional
from loguru import logger
from sqlalchemy.ext.asyncio import async_sessionmaker

from pocket_trader.config import settings
from pocket_trader.core.exceptions import BrokerTabException, NotFoundException
from pocket_trader.models.schemas import AutoTradeMessage
from pocket_trader.services.signal_store import SignalStore
from .poller import SignalPoller
from .state import AutoTradeStateStore
from .tabs import BrokerTabHub


MSG_ENABLED = "تم تفعيل التداول التلقائي"
MSG_DISABLED = "تم إيقاف التداول التلقائي"
MSG_NO_TAB = "لم يتم العثور على تبويب Pocket Option مفتوح"
MSG_STATE_NOT_SAVED = "تعذر حفظ حالة التداول التلقائي"


class AutoTradeController:
    """
    Dispatches popup and broker-tab messages

    Actions: toggleAutoTrade, getStatus, captureVisibleTab, signalExecuted,
    signalFailed.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        hub: BrokerTabHub,
        state_store: AutoTradeStateStore,
        poller: Optional[SignalPoller] = None,
    ):
        self.session_factory = session_factory
        self.hub = hub
        self.state_store = state_store
        self.poller = poller or SignalPoller(session_factory, hub)
        self.enabled = False

    async def restore(self) -> None:
        """Apply the persisted switch (called on startup)"""
        self.enabled = self.state_store.load()
        if self.enabled:
            self.poller.start()

    async def shutdown(self) -> None:
        await self.poller.stop()

    async def handle_message(self, message: AutoTradeMessage) -> Dict[str, Any]:
        """
        Handle one message

        Args:
            message: incoming action

        Returns:
            Response sent back to the caller
        """
        if message.action == "toggleAutoTrade":
            return await self.toggle(bool(message.enabled))
        if message.action == "getStatus":
            return {"enabled": self.enabled}
        if message.action == "captureVisibleTab":
            return await self.capture_visible_tab()
        if message.action == "signalExecuted":
            return await self._report(message, "executed")
        if message.action == "signalFailed":
            return await self._report(message, "failed")
        return {"success": False}

    async def toggle(self, enabled: bool) -> Dict[str, Any]:
        try:
            self.state_store.save(enabled)
        except OSError as e:
            logger.error(f"Could not persist auto-trade state to {self.state_store.path}: {e}")
            return {"success": False, "error": MSG_STATE_NOT_SAVED}
        self.enabled = enabled
        if enabled:
            self.poller.start()
            return {"success": True, "message": MSG_ENABLED}
        await self.poller.stop()
        return {"success": True, "message": MSG_DISABLED}

    async def capture_visible_tab(self) -> Dict[str, Any]:
        """PNG data URL of the broker tab"""
        tab = self.hub.first(settings.broker_url_prefix)
        if tab is None:
            return {"error": MSG_NO_TAB}
        try:
            response = await tab.request(
                {"action": "captureVisibleTab", "format": "png"},
                timeout=settings.broker_response_timeout_seconds,
            )
        except BrokerTabException as e:
            logger.error(f"Screen capture failed: {e.message}")
            return {"error": e.message}
        if response.get("error"):
            return {"error": response["error"]}
        return {"dataUrl": response.get("dataUrl")}

    async def _report(self, message: AutoTradeMessage, status: str) -> Dict[str, Any]:
        if message.signal_id is None:
            return {"success": False, "error": "signalId is required"}
        try:
            async with self.session_factory() as db:
                await SignalStore(db).update_status(message.signal_id, status)
        except NotFoundException as e:
            logger.warning(e.message)
            return {"success": False, "error": e.message}
        if message.trade_id:
            logger.info(f"Signal {message.signal_id} executed as trade {message.trade_id}")
        return {"success": True}
