"""Telegram Bot API client"""
from typing import Any, Dict, List, Optional
import httpx
from loguru import logger

from pocket_trader.config import settings
from pocket_trader.core.exceptions import TelegramAPIException


ALLOWED_UPDATES: List[str] = ["message", "channel_post", "edited_channel_post"]


class TelegramBotClient:
    """Thin async wrapper over the Telegram Bot API"""
    
    def __init__(
        self,
        bot_token: Optional[str] = None,
        api_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            bot_token: bot token (default: settings.telegram_bot_token)
            api_url: Bot API base URL
            client: pre-built HTTP client, mainly for tests
        """
        self.bot_token = bot_token if bot_token is not None else settings.telegram_bot_token
        self.api_url = (api_url or settings.telegram_api_url).rstrip("/")
        self._client = client
        
        if not self.bot_token:
            logger.warning("Telegram bot token not set, Bot API calls will fail")
    
    async def _get_client(self) -> httpx.AsyncClient:
        """Lazily created HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=10.0)
        return self._client
    
    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None
    
    async def __aenter__(self):
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
    
    async def _call(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Call a Bot API method
        
        Args:
            method: Bot API method name
            payload: JSON body
            
        Returns:
            Decoded Bot API response
            
        Raises:
            TelegramAPIException: transport error or non-2xx answer
        """
        if not self.bot_token:
            raise TelegramAPIException("Telegram bot token is not configured")
        
        url = f"{self.api_url}/bot{self.bot_token}/{method}"
        try:
            client = await self._get_client()
            response = await client.post(url, json=payload)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            error_msg = f"Telegram {method} failed: {e.response.status_code} - {e.response.text}"
            logger.error(error_msg)
            raise TelegramAPIException(error_msg, details=e.response.text)
        except httpx.HTTPError as e:
            logger.error(f"Telegram {method} request error: {e}")
            raise TelegramAPIException(f"Telegram {method} request error: {str(e)}")
    
    async def set_webhook(
        self,
        url: str,
        secret_token: Optional[str] = None,
        drop_pending_updates: bool = False,
    ) -> Dict[str, Any]:
        """
        Register the webhook URL
        
        Args:
            url: public webhook URL
            secret_token: echoed back by Telegram in X-Telegram-Bot-Api-Secret-Token
            drop_pending_updates: discard updates queued while no webhook was set
            
        Returns:
            Bot API response
        """
        payload: Dict[str, Any] = {
            "url": url,
            "allowed_updates": ALLOWED_UPDATES,
            "drop_pending_updates": drop_pending_updates,
        }
        if secret_token:
            payload["secret_token"] = secret_token
        
        data = await self._call("setWebhook", payload)
        logger.info(f"Telegram webhook set to {url}: {data.get('description', data.get('ok'))}")
        return data
