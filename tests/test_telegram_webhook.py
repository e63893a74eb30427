"""Telegram webhook endpoint tests"""
from unittest.mock import AsyncMock, patch
import pytest

from pocket_trader.config import settings
from pocket_trader.core.exceptions import DatabaseException
from pocket_trader.services.telegram import TelegramBotClient, TelegramIngestService


def channel_post(message_id: int, text: str) -> dict:
    return {"update_id": message_id, "channel_post": {"message_id": message_id, "text": text}}


@pytest.mark.asyncio
async def test_webhook_get_answers_ok(anonymous_client):
    response = await anonymous_client.get("/telegram/webhook")
    
    assert response.status_code == 200
    assert response.json() == {"ok": True}


@pytest.mark.asyncio
async def test_webhook_stores_signal_once(anonymous_client, mock_settings):
    first = await anonymous_client.post("/telegram/webhook", json=channel_post(500, "EURUSD M1 CALL"))
    second = await anonymous_client.post("/telegram/webhook", json=channel_post(500, "EURUSD M1 CALL"))
    listing = await anonymous_client.get("/api/v1/signals")
    
    assert first.status_code == 200
    assert first.json()["type"] == "signal"
    assert second.json()["duplicate"] is True
    assert len(listing.json()) == 1


@pytest.mark.asyncio
async def test_webhook_rejects_wrong_secret(anonymous_client, monkeypatch):
    monkeypatch.setattr(settings, "telegram_webhook_secret", "s3cret")
    
    rejected = await anonymous_client.post(
        "/telegram/webhook",
        json=channel_post(501, "EURUSD M1 CALL"),
        headers={"X-Telegram-Bot-Api-Secret-Token": "wrong"},
    )
    accepted = await anonymous_client.post(
        "/telegram/webhook",
        json=channel_post(501, "EURUSD M1 CALL"),
        headers={"X-Telegram-Bot-Api-Secret-Token": "s3cret"},
    )
    
    assert rejected.status_code == 401
    assert accepted.status_code == 200


@pytest.mark.asyncio
async def test_webhook_database_failure_returns_500(anonymous_client, mock_settings):
    with patch.object(
        TelegramIngestService,
        "handle_update",
        new_callable=AsyncMock,
        side_effect=DatabaseException("Signal store write failed: disk full"),
    ):
        response = await anonymous_client.post("/telegram/webhook", json=channel_post(502, "EURUSD M1 CALL"))
    
    assert response.status_code == 500
    assert response.json() == {"error": "Signal store write failed: disk full"}


@pytest.mark.asyncio
async def test_webhook_setup_requires_bot_token(anonymous_client, monkeypatch):
    monkeypatch.setattr(settings, "extension_api_key", "")
    monkeypatch.setattr(settings, "telegram_bot_token", "")
    
    response = await anonymous_client.post("/telegram/webhook/setup")
    
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_webhook_setup_registers_public_url(anonymous_client, monkeypatch):
    monkeypatch.setattr(settings, "extension_api_key", "")
    monkeypatch.setattr(settings, "telegram_bot_token", "123:abc")
    monkeypatch.setattr(settings, "public_base_url", "https://trader.example.com/")
    monkeypatch.setattr(settings, "telegram_webhook_secret", "")
    
    with patch.object(
        TelegramBotClient,
        "set_webhook",
        new_callable=AsyncMock,
        return_value={"ok": True, "result": True, "description": "Webhook was set"},
    ) as mock_set_webhook:
        response = await anonymous_client.post("/telegram/webhook/setup")
    
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["webhook"] == "https://trader.example.com/telegram/webhook"
    mock_set_webhook.assert_called_once_with(
        "https://trader.example.com/telegram/webhook",
        secret_token=None,
    )


@pytest.mark.asyncio
async def test_set_webhook_sends_allowed_updates():
    client = TelegramBotClient(bot_token="123:abc", api_url="https://telegram.test")
    
    with patch.object(client, "_call", new_callable=AsyncMock) as mock_call:
        mock_call.return_value = {"ok": True}
        
        async with client:
            await client.set_webhook("https://trader.example.com/telegram/webhook", secret_token="s3cret")
    
    method, payload = mock_call.call_args.args
    assert method == "setWebhook"
    assert payload["allowed_updates"] == ["message", "channel_post", "edited_channel_post"]
    assert payload["secret_token"] == "s3cret"
