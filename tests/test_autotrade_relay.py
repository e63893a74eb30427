"""Auto-trade poller and controller tests"""
import asyncio
from datetime import datetime, time, timedelta
from typing import Any, Dict, List
import pytest
from sqlalchemy import select

from pocket_trader.models.database import Signal
from pocket_trader.models.schemas import AutoTradeMessage
from pocket_trader.services.autotrade import (
    AutoTradeController, AutoTradeStateStore, BrokerTabHub, SignalPoller
)
from pocket_trader.services.autotrade.controller import (
    MSG_DISABLED, MSG_ENABLED, MSG_NO_TAB, MSG_STATE_NOT_SAVED
)


BROKER_URL = "https://pocketoption.com/en/cabinet/demo-quick-high-low/"
NOW = datetime(2026, 3, 2, 10, 0, 30)


class FakeChannel:
    """Stands in for the broker tab WebSocket"""
    
    def __init__(self, hub: BrokerTabHub = None, answer: Dict[str, Any] = None):
        self.sent: List[Dict[str, Any]] = []
        self.hub = hub
        self.answer = answer
    
    async def send_json(self, message: Dict[str, Any]) -> None:
        self.sent.append(message)
        if self.answer is not None and "requestId" in message:
            for tab in self.hub.query(""):
                if tab.channel is self:
                    asyncio.get_running_loop().call_soon(
                        tab.resolve, {**self.answer, "requestId": message["requestId"]}
                    )


async def add_pending(db, asset: str, entry_time=None, minutes_ago: int = 1) -> Signal:
    signal = Signal(
        asset=asset,
        timeframe="M1",
        direction="CALL",
        entry_time=entry_time,
        status="pending",
        received_at=datetime.utcnow() - timedelta(minutes=minutes_ago),
    )
    db.add(signal)
    await db.commit()
    await db.refresh(signal)
    return signal


@pytest.fixture
def hub() -> BrokerTabHub:
    return BrokerTabHub()


@pytest.fixture
def poller(session_factory, hub) -> SignalPoller:
    return SignalPoller(session_factory, hub, interval_seconds=0.01, clock=lambda: NOW)


@pytest.fixture
def controller(session_factory, hub, poller, tmp_path) -> AutoTradeController:
    store = AutoTradeStateStore(tmp_path / "state.json")
    return AutoTradeController(session_factory, hub, store, poller=poller)


@pytest.mark.asyncio
async def test_tick_sends_only_ready_signals(db_session, hub, poller):
    a = await add_pending(db_session, "EURUSD", time(10, 0), minutes_ago=3)
    b = await add_pending(db_session, "GBPUSD", time(10, 5), minutes_ago=2)
    c = await add_pending(db_session, "AUDCAD", None, minutes_ago=1)
    channel = FakeChannel()
    hub.register(BROKER_URL, channel)
    
    sent = await poller.tick()
    
    assert sorted(sent) == sorted([str(a.id), str(c.id)])
    assert str(b.id) not in sent
    assert all(message["action"] == "executeSignal" for message in channel.sent)
    assert {message["signal"]["asset"] for message in channel.sent} == {"EURUSD", "AUDCAD"}


@pytest.mark.asyncio
async def test_tick_without_broker_tab_sends_nothing(db_session, hub, poller):
    await add_pending(db_session, "EURUSD")
    hub.register("https://example.com/", FakeChannel())
    
    assert await poller.tick() == []


@pytest.mark.asyncio
async def test_tick_skips_non_pending_signals(db_session, hub, poller):
    signal = await add_pending(db_session, "EURUSD")
    signal.status = "executed"
    await db_session.commit()
    channel = FakeChannel()
    hub.register(BROKER_URL, channel)
    
    assert await poller.tick() == []
    assert channel.sent == []


@pytest.mark.asyncio
async def test_pending_signal_is_resent_until_reported(db_session, hub, poller):
    await add_pending(db_session, "EURUSD")
    channel = FakeChannel()
    hub.register(BROKER_URL, channel)
    
    await poller.tick()
    await poller.tick()
    
    assert len(channel.sent) == 2


@pytest.mark.asyncio
async def test_start_twice_runs_one_task(poller):
    poller.start()
    first_task = poller._task
    poller.start()
    
    assert poller._task is first_task
    await poller.stop()
    assert not poller.is_running


@pytest.mark.asyncio
async def test_toggle_persists_and_starts_polling(controller, tmp_path):
    response = await controller.handle_message(AutoTradeMessage(action="toggleAutoTrade", enabled=True))
    
    assert response == {"success": True, "message": MSG_ENABLED}
    assert controller.poller.is_running
    assert AutoTradeStateStore(tmp_path / "state.json").load() is True
    
    response = await controller.handle_message(AutoTradeMessage(action="toggleAutoTrade", enabled=False))
    
    assert response == {"success": True, "message": MSG_DISABLED}
    assert not controller.poller.is_running
    assert AutoTradeStateStore(tmp_path / "state.json").load() is False


@pytest.mark.asyncio
async def test_toggle_keeps_state_when_save_fails(session_factory, hub, poller, tmp_path):
    store = AutoTradeStateStore(tmp_path / "missing" / "state.json")
    controller = AutoTradeController(session_factory, hub, store, poller=poller)
    
    response = await controller.handle_message(AutoTradeMessage(action="toggleAutoTrade", enabled=True))
    
    assert response == {"success": False, "error": MSG_STATE_NOT_SAVED}
    assert controller.enabled is False
    assert not controller.poller.is_running


@pytest.mark.asyncio
async def test_restore_resumes_polling(controller):
    controller.state_store.save(True)
    
    await controller.restore()
    
    assert controller.enabled is True
    assert controller.poller.is_running
    await controller.shutdown()


@pytest.mark.asyncio
async def test_get_status(controller):
    response = await controller.handle_message(AutoTradeMessage(action="getStatus"))
    
    assert response == {"enabled": False}


@pytest.mark.asyncio
async def test_signal_executed_updates_status(controller, db_session):
    signal = await add_pending(db_session, "EURUSD")
    
    response = await controller.handle_message(
        AutoTradeMessage.model_validate(
            {"action": "signalExecuted", "signalId": str(signal.id), "tradeId": "T-1"}
        )
    )
    
    assert response == {"success": True}
    await db_session.refresh(signal)
    assert signal.status == "executed"


@pytest.mark.asyncio
async def test_signal_failed_updates_status(controller, db_session):
    signal = await add_pending(db_session, "EURUSD")
    
    await controller.handle_message(
        AutoTradeMessage.model_validate({"action": "signalFailed", "signalId": str(signal.id)})
    )
    
    await db_session.refresh(signal)
    assert signal.status == "failed"


@pytest.mark.asyncio
async def test_report_for_unknown_signal(controller):
    response = await controller.handle_message(
        AutoTradeMessage.model_validate(
            {"action": "signalExecuted", "signalId": "00000000-0000-0000-0000-000000000000"}
        )
    )
    
    assert response["success"] is False


@pytest.mark.asyncio
async def test_capture_without_tab(controller):
    response = await controller.handle_message(AutoTradeMessage(action="captureVisibleTab"))
    
    assert response == {"error": MSG_NO_TAB}


@pytest.mark.asyncio
async def test_capture_returns_data_url(controller, hub):
    channel = FakeChannel(hub, answer={"dataUrl": "data:image/png;base64,AAAA"})
    hub.register(BROKER_URL, channel)
    
    response = await controller.handle_message(AutoTradeMessage(action="captureVisibleTab"))
    
    assert response == {"dataUrl": "data:image/png;base64,AAAA"}
    assert channel.sent[0]["action"] == "captureVisibleTab"


@pytest.mark.asyncio
async def test_messages_endpoint(client, session_factory, hub, controller):
    from pocket_trader.api.dependencies import get_controller
    from pocket_trader.main import app
    
    app.dependency_overrides[get_controller] = lambda: controller
    
    response = await client.post("/api/v1/autotrade/messages", json={"action": "getStatus"})
    
    assert response.status_code == 200
    assert response.json() == {"enabled": False}
