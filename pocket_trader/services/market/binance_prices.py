"""Binance public spot ticker client"""
import json
from decimal import Decimal
from typing import Dict, Iterable, Optional
import httpx
from loguru import logger

from pocket_trader.config import settings
from pocket_trader.core.exceptions import MarketDataException


# App market symbol -> Binance spot pair
SYMBOL_TO_BINANCE: Dict[str, str] = {
    "bitcoin": "BTCUSDT",
    "ethereum": "ETHUSDT",
    "bnb": "BNBUSDT",
    "solana": "SOLUSDT",
    "xrp": "XRPUSDT",
    "cardano": "ADAUSDT",
    "dogecoin": "DOGEUSDT",
    "avalanche": "AVAXUSDT",
    "polkadot": "DOTUSDT",
    "polygon": "MATICUSDT",
    "chainlink": "LINKUSDT",
    "litecoin": "LTCUSDT",
    "toncoin": "TONUSDT",
    "shiba": "SHIBUSDT",
    "pepe": "PEPEUSDT",
}
BINANCE_TO_SYMBOL: Dict[str, str] = {pair: symbol for symbol, pair in SYMBOL_TO_BINANCE.items()}


class BinancePriceClient:
    """Reads last prices from /api/v3/ticker/price; no API key needed"""
    
    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or settings.binance_api_url).rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=10.0)
    
    async def __aenter__(self):
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.client.aclose()
    
    async def get_prices(self, symbols: Iterable[str]) -> Dict[str, Decimal]:
        """
        Last prices for app market symbols
        
        Args:
            symbols: app symbols such as "bitcoin"; unmapped ones are skipped
            
        Returns:
            Mapping of app symbol to last price
            
        Raises:
            MarketDataException: request failed
        """
        pairs = sorted({SYMBOL_TO_BINANCE[s] for s in symbols if s in SYMBOL_TO_BINANCE})
        if not pairs:
            return {}
        
        try:
            response = await self.client.get(
                f"{self.base_url}/api/v3/ticker/price",
                params={"symbols": json.dumps(pairs, separators=(",", ":"))},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Error fetching Binance prices: {e}")
            raise MarketDataException(f"Binance price request failed: {e}")
        
        prices: Dict[str, Decimal] = {}
        if isinstance(data, list):
            for item in data:
                symbol = BINANCE_TO_SYMBOL.get(item.get("symbol"))
                if symbol:
                    prices[symbol] = Decimal(str(item["price"]))
        logger.debug(f"Current prices: {prices}")
        return prices
