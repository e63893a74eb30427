"""Favorites, journal, goals and notification tests"""
from datetime import date
from decimal import Decimal
import pytest

from pocket_trader.models.schemas import JournalEntryCreate, TradingGoalCreate
from pocket_trader.services.user_data import (
    JournalService, NotificationService, TradingGoalService
)


FAVORITE = {"symbol": "bitcoin", "symbol_name_ar": "بيتكوين", "symbol_name_en": "Bitcoin", "category": "crypto"}
GOAL = {
    "initial_capital": "100",
    "target_amount": "1000",
    "duration_days": 30,
    "market_type": "forex",
    "loss_compensation_rate": "10",
}


@pytest.mark.asyncio
async def test_favorite_add_duplicate_and_remove(client):
    added = await client.post("/api/v1/favorites", json=FAVORITE)
    duplicate = await client.post("/api/v1/favorites", json=FAVORITE)
    check = await client.get("/api/v1/favorites/bitcoin")
    removed = await client.delete("/api/v1/favorites/bitcoin")
    
    assert added.status_code == 201
    assert added.json()["message"] == "تمت إضافته للمفضلة ⭐"
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"] == "هذا السوق موجود بالفعل في المفضلة"
    assert check.json()["is_favorite"] is True
    assert removed.json() == {"message": "تم إزالته من المفضلة", "items": []}


@pytest.mark.asyncio
async def test_remove_missing_favorite_is_404(client):
    response = await client.delete("/api/v1/favorites/dogecoin")
    
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_journal_stats(db_session, user, feed):
    service = JournalService(db_session, user.id, feed)
    for result, profit in (("win", "25"), ("win", "10"), ("loss", "-15"), ("pending", None)):
        await service.create(**JournalEntryCreate.model_validate(
            {"symbol": "EURUSD", "result": result, "profit_loss": profit}
        ).model_dump())
    
    stats = await service.stats()
    
    assert stats.wins == 2
    assert stats.losses == 1
    assert stats.total == 3
    assert stats.win_rate == 67
    assert stats.total_profit == Decimal("20")


@pytest.mark.asyncio
async def test_journal_stats_empty(db_session, user):
    stats = await JournalService(db_session, user.id).stats()
    
    assert stats.win_rate == 0
    assert stats.total_profit == Decimal("0")


@pytest.mark.asyncio
async def test_journal_today(db_session, user):
    service = JournalService(db_session, user.id)
    await service.create(trade_date=date(2026, 3, 1), symbol="EURUSD")
    await service.create(trade_date=date(2026, 3, 2), symbol="GBPUSD")
    
    today = await service.today(date(2026, 3, 2))
    
    assert [e.symbol for e in today] == ["GBPUSD"]


@pytest.mark.asyncio
async def test_journal_endpoints(client):
    created = await client.post("/api/v1/journal", json={"symbol": "EURUSD", "result": "win", "profit_loss": "12.5"})
    entry_id = created.json()["items"][0]["id"]
    updated = await client.patch(f"/api/v1/journal/{entry_id}", json={"notes": "دخول مبكر"})
    stats = await client.get("/api/v1/journal/stats")
    deleted = await client.delete(f"/api/v1/journal/{entry_id}")
    
    assert created.status_code == 201
    assert updated.json()["items"][0]["notes"] == "دخول مبكر"
    assert stats.json()["wins"] == 1
    assert deleted.json()["items"] == []


@pytest.mark.asyncio
async def test_new_goal_deactivates_previous(db_session, user, feed):
    service = TradingGoalService(db_session, user.id, feed)
    first = await service.add(TradingGoalCreate.model_validate(GOAL))
    second = await service.add(TradingGoalCreate.model_validate({**GOAL, "market_type": "crypto"}))
    
    await db_session.refresh(first)
    assert first.is_active is False
    assert second.is_active is True
    assert (await service.active()).id == second.id


@pytest.mark.asyncio
async def test_activate_goal(db_session, user):
    service = TradingGoalService(db_session, user.id)
    first = await service.add(TradingGoalCreate.model_validate(GOAL))
    second = await service.add(TradingGoalCreate.model_validate(GOAL))
    
    await service.activate(first.id)
    
    await db_session.refresh(second)
    assert second.is_active is False
    assert (await service.active()).id == first.id


@pytest.mark.asyncio
async def test_goal_endpoints(client):
    created = await client.post("/api/v1/goals", json=GOAL)
    active = await client.get("/api/v1/goals/active")
    
    assert created.status_code == 201
    assert created.json()["message"] == "تم إنشاء خطة التداول بنجاح"
    assert active.json()["market_type"] == "forex"


@pytest.mark.asyncio
async def test_notifications_mark_read(db_session, user, feed):
    service = NotificationService(db_session, user.id, feed)
    first = await service.notify("signal", "إشارة جديدة", "EURUSD M1 CALL")
    await service.notify("price_alert", "تنبيه", "BTC")
    
    await service.mark_read(first.id)
    unread = await service.list(unread_only=True)
    
    assert len(unread) == 1
    assert await service.mark_all_read() == 1
    assert await service.list(unread_only=True) == []


@pytest.mark.asyncio
async def test_notifications_are_scoped_to_owner(db_session, user, other_user):
    await NotificationService(db_session, other_user.id).notify("signal", "x", "y")
    
    assert await NotificationService(db_session, user.id).list() == []


@pytest.mark.asyncio
async def test_writes_are_published(db_session, user, feed):
    service = NotificationService(db_session, user.id, feed)
    
    async with feed.subscribe("user_notifications") as queue:
        notification = await service.notify("signal", "إشارة", "EURUSD")
        await service.delete(notification.id)
        events = [queue.get_nowait(), queue.get_nowait()]
    
    assert [e["event"] for e in events] == ["INSERT", "DELETE"]
    assert events[0]["record"]["user_id"] == user.id


@pytest.mark.asyncio
async def test_notification_endpoints(client, db_session, user):
    await NotificationService(db_session, user.id).notify("signal", "إشارة", "EURUSD")
    
    listed = await client.get("/api/v1/notifications")
    read_all = await client.post("/api/v1/notifications/read-all")
    
    assert len(listed.json()) == 1
    assert read_all.json()["items"][0]["is_read"] is True
