"""Auto-trade relay"""
from typing import Optional

from pocket_trader.config import settings
from pocket_trader.db import AsyncSessionLocal
from .controller import AutoTradeController
from .poller import SignalPoller
from .readiness import broker_now, resolve_entry_datetime, should_execute_signal
from .state import AutoTradeStateStore
from .tabs import BrokerTab, BrokerTabHub, broker_tabs


_controller: Optional[AutoTradeController] = None


def get_autotrade_controller() -> AutoTradeController:
    """Process-wide controller bound to the application database"""
    global _controller
    if _controller is None:
        _controller = AutoTradeController(
            session_factory=AsyncSessionLocal,
            hub=broker_tabs,
            state_store=AutoTradeStateStore(settings.autotrade_state_file),
        )
    return _controller


__all__ = [
    "AutoTradeController",
    "AutoTradeStateStore",
    "BrokerTab",
    "BrokerTabHub",
    "SignalPoller",
    "broker_now",
    "broker_tabs",
    "get_autotrade_controller",
    "resolve_entry_datetime",
    "should_execute_signal",
]
