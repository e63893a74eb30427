"""Connected broker tabs"""
import asyncio
from itertools import count
from typing import Any, Dict, List, Optional
from loguru import logger

from pocket_trader.core.exceptions import BrokerTabException


class BrokerTab:
    """
    A browser tab on the broker site, reachable over a JSON channel

    ``channel`` is anything with an async ``send_json`` (a Starlette
    WebSocket in production).
    """

    def __init__(self, tab_id: str, url: str, channel: Any):
        self.tab_id = tab_id
        self.url = url
        self.channel = channel
        self._pending: Dict[str, asyncio.Future] = {}
        self._request_ids = count(1)

    async def send(self, message: Dict[str, Any]) -> None:
        """Fire-and-forget message to the tab"""
        await self.channel.send_json(message)

    async def request(self, message: Dict[str, Any], timeout: float) -> Dict[str, Any]:
        """
        Send a message and wait for the tab's answer

        Raises:
            BrokerTabException: no answer within ``timeout`` seconds
        """
        request_id = f"{self.tab_id}-{next(self._request_ids)}"
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future
        try:
            await self.channel.send_json({**message, "requestId": request_id})
            return await asyncio.wait_for(future, timeout)
        except asyncio.TimeoutError:
            raise BrokerTabException(f"Tab {self.tab_id} did not answer {message.get('action')}")
        finally:
            self._pending.pop(request_id, None)

    def resolve(self, response: Dict[str, Any]) -> bool:
        """Complete a pending request; False if nobody is waiting for it"""
        future = self._pending.get(response.get("requestId", ""))
        if future is None or future.done():
            return False
        future.set_result(response)
        return True


class BrokerTabHub:
    """Registry of connected tabs"""

    def __init__(self):
        self._tabs: Dict[str, BrokerTab] = {}
        self._tab_ids = count(1)

    def register(self, url: str, channel: Any) -> BrokerTab:
        tab = BrokerTab(str(next(self._tab_ids)), url, channel)
        self._tabs[tab.tab_id] = tab
        logger.info(f"Broker tab {tab.tab_id} connected: {url}")
        return tab

    def unregister(self, tab_id: str) -> None:
        if self._tabs.pop(tab_id, None) is not None:
            logger.info(f"Broker tab {tab_id} disconnected")

    def query(self, url_prefix: str) -> List[BrokerTab]:
        """Tabs whose URL starts with the prefix, oldest first"""
        return [tab for tab in self._tabs.values() if tab.url.startswith(url_prefix)]

    def first(self, url_prefix: str) -> Optional[BrokerTab]:
        tabs = self.query(url_prefix)
        return tabs[0] if tabs else None

    def __len__(self) -> int:
        return len(self._tabs)


# Global tab registry
broker_tabs = BrokerTabHub()
