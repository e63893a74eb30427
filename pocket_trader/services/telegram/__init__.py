"""Telegram ingestion services"""
from .parser import (
    ParsedResult,
    ParsedSignal,
    classify_message,
    parse_result,
    parse_signal,
    asset_search_key,
)
from .matcher import ResultMatcher
from .ingest import TelegramIngestService
from .bot_client import TelegramBotClient

__all__ = [
    "ParsedResult",
    "ParsedSignal",
    "classify_message",
    "parse_result",
    "parse_signal",
    "asset_search_key",
    "ResultMatcher",
    "TelegramIngestService",
    "TelegramBotClient",
]
