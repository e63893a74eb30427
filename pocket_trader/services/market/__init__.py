"""Market data"""
from .binance_prices import BinancePriceClient, SYMBOL_TO_BINANCE

__all__ = ["BinancePriceClient", "SYMBOL_TO_BINANCE"]
