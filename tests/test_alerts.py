"""Price alert tests"""
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
import httpx
import pytest
from sqlalchemy import select

from pocket_trader.api.dependencies import get_price_client, get_push_sender
from pocket_trader.core.exceptions import MarketDataException
from pocket_trader.main import app
from pocket_trader.models.database import PriceAlert, UserNotification
from pocket_trader.models.schemas import PriceAlertCreate
from pocket_trader.services.alerts import PriceAlertChecker, PriceAlertService, is_triggered
from pocket_trader.services.market import BinancePriceClient


BTC_ALERT = {
    "symbol": "bitcoin",
    "symbol_name_ar": "بيتكوين",
    "symbol_name_en": "Bitcoin",
    "category": "crypto",
    "target_price": "70000",
    "condition": "above",
}


def price_client(prices):
    client = MagicMock()
    client.get_prices = AsyncMock(return_value={k: Decimal(v) for k, v in prices.items()})
    return client


def push_sender(sent: int = 1):
    sender = MagicMock()
    sender.send_to_user = AsyncMock(return_value=(sent, 0))
    return sender


@pytest.mark.parametrize(
    "condition, price, target, expected",
    [
        ("above", "70000", "70000", True),
        ("above", "69999.99", "70000", False),
        ("below", "2000", "2000", True),
        ("below", "2000.01", "2000", False),
    ],
)
def test_is_triggered(condition, price, target, expected):
    assert is_triggered(condition, Decimal(price), Decimal(target)) is expected


@pytest.mark.asyncio
async def test_add_then_remove_leaves_list_unchanged(client):
    before = (await client.get("/api/v1/alerts")).json()
    
    created = await client.post("/api/v1/alerts", json=BTC_ALERT)
    alert_id = created.json()["items"][0]["id"]
    removed = await client.delete(f"/api/v1/alerts/{alert_id}")
    after = (await client.get("/api/v1/alerts")).json()
    
    assert created.status_code == 201
    assert created.json()["message"] == "تم إضافة التنبيه بنجاح"
    assert removed.json()["message"] == "تم حذف التنبيه"
    assert after == before


@pytest.mark.asyncio
async def test_toggle_and_views(client):
    created = await client.post("/api/v1/alerts", json=BTC_ALERT)
    alert_id = created.json()["items"][0]["id"]
    
    toggled = await client.patch(f"/api/v1/alerts/{alert_id}", json={"is_active": False})
    active = (await client.get("/api/v1/alerts", params={"view": "active"})).json()
    
    assert toggled.json()["message"] == "تم إيقاف التنبيه"
    assert toggled.json()["items"][0]["is_active"] is False
    assert active == []


@pytest.mark.asyncio
async def test_remove_unknown_alert_is_404(client):
    response = await client.delete("/api/v1/alerts/00000000-0000-0000-0000-000000000000")
    
    assert response.status_code == 404
    assert response.json()["detail"] == "التنبيه غير موجود"


@pytest.mark.asyncio
async def test_alerts_are_scoped_to_owner(db_session, user, other_user):
    await PriceAlertService(db_session, other_user.id).add(PriceAlertCreate.model_validate(BTC_ALERT))
    
    assert await PriceAlertService(db_session, user.id).list() == []


@pytest.mark.asyncio
async def test_checker_triggers_notifies_and_pushes(db_session, user, feed):
    service = PriceAlertService(db_session, user.id, feed)
    hit = await service.add(PriceAlertCreate.model_validate(BTC_ALERT))
    miss = await service.add(
        PriceAlertCreate.model_validate({**BTC_ALERT, "symbol": "ethereum", "target_price": "1000", "condition": "below"})
    )
    sender = push_sender(sent=2)
    checker = PriceAlertChecker(db_session, price_client({"bitcoin": "71000.5", "ethereum": "3500"}), sender, feed)
    
    result = await checker.run()
    
    assert (result.checked, result.triggered, result.push_sent) == (2, 1, 2)
    await db_session.refresh(hit)
    await db_session.refresh(miss)
    assert hit.triggered_at is not None
    assert miss.triggered_at is None
    
    notification = (await db_session.execute(select(UserNotification))).scalar_one()
    assert notification.type == "price_alert"
    assert notification.user_id == user.id
    assert "بيتكوين" in notification.title
    
    payload = sender.send_to_user.call_args.args[2]
    assert payload["data"]["url"] == "/markets"
    assert payload["tag"] == f"price-alert-{hit.id}"


@pytest.mark.asyncio
async def test_triggered_alert_is_not_checked_again(db_session, user, feed):
    await PriceAlertService(db_session, user.id, feed).add(PriceAlertCreate.model_validate(BTC_ALERT))
    prices = price_client({"bitcoin": "80000"})
    checker = PriceAlertChecker(db_session, prices, push_sender(), feed)
    
    await checker.run()
    second = await checker.run()
    
    assert second.checked == 0
    assert second.triggered == 0


@pytest.mark.asyncio
async def test_checker_skips_symbols_without_price(db_session, user, feed):
    await PriceAlertService(db_session, user.id, feed).add(
        PriceAlertCreate.model_validate({**BTC_ALERT, "symbol": "AAPL", "category": "stocks"})
    )
    checker = PriceAlertChecker(db_session, price_client({}), push_sender(), feed)
    
    result = await checker.run()
    
    assert (result.checked, result.triggered) == (1, 0)


@pytest.mark.asyncio
async def test_check_endpoint(client):
    await client.post("/api/v1/alerts", json=BTC_ALERT)
    app.dependency_overrides[get_price_client] = lambda: price_client({"bitcoin": "75000"})
    app.dependency_overrides[get_push_sender] = lambda: push_sender(sent=0)
    
    response = await client.post("/api/v1/alerts/check")
    
    assert response.status_code == 200
    assert response.json() == {"success": True, "checked": 1, "triggered": 1, "push_sent": 0}


@pytest.mark.asyncio
async def test_binance_client_maps_symbols():
    http_client = MagicMock()
    http_client.get = AsyncMock(
        return_value=httpx.Response(
            200,
            json=[{"symbol": "BTCUSDT", "price": "71000.50"}, {"symbol": "ETHUSDT", "price": "3500.00"}],
            request=httpx.Request("GET", "https://api.binance.com/api/v3/ticker/price"),
        )
    )
    client = BinancePriceClient(base_url="https://api.binance.com", client=http_client)
    
    prices = await client.get_prices(["bitcoin", "ethereum", "AAPL"])
    
    assert prices == {"bitcoin": Decimal("71000.50"), "ethereum": Decimal("3500.00")}
    params = http_client.get.call_args.kwargs["params"]
    assert params["symbols"] == '["BTCUSDT","ETHUSDT"]'


@pytest.mark.asyncio
async def test_binance_client_wraps_http_errors():
    http_client = MagicMock()
    http_client.get = AsyncMock(side_effect=httpx.ConnectError("refused"))
    client = BinancePriceClient(base_url="https://api.binance.com", client=http_client)
    
    with pytest.raises(MarketDataException):
        await client.get_prices(["bitcoin"])
