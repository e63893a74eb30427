"""Telegram message classification tests"""
from datetime import time
import pytest

from pocket_trader.services.telegram import (
    ParsedResult, ParsedSignal, asset_search_key, classify_message, parse_result, parse_signal
)


@pytest.mark.parametrize(
    "text, asset, timeframe, direction",
    [
        ("GBPUSD-OTC M1 CALL", "GBPUSD-OTC", "M1", "CALL"),
        ("eurusd m5 put", "EURUSD", "M5", "PUT"),
        ("🔥 New signal\nEUR/USD M5 PUT", "EUR/USD", "M5", "PUT"),
        ("GOLD-OTC M5 CALL", "GOLD", "M5", "CALL"),
        ("XAU H1 PUT", "XAU", "H1", "PUT"),
    ],
)
def test_parse_signal_layouts(text, asset, timeframe, direction):
    parsed = parse_signal(text)
    
    assert isinstance(parsed, ParsedSignal)
    assert parsed.asset == asset
    assert parsed.timeframe == timeframe
    assert parsed.direction == direction
    assert parsed.entry_time is None
    assert parsed.raw_message == text


def test_parse_signal_with_entry_time():
    parsed = parse_signal("EURUSD-OTC M1 CALL 15:30:00")
    
    assert parsed.rule == "pair_with_entry_time"
    assert parsed.asset == "EURUSD-OTC"
    assert parsed.entry_time == time(15, 30, 0)


def test_parse_signal_entry_time_without_seconds():
    parsed = parse_signal("AUD/CAD M1 PUT 9:05")
    
    assert parsed.asset == "AUD/CAD"
    assert parsed.entry_time == time(9, 5)


def test_invalid_entry_time_falls_back_to_plain_pair():
    parsed = parse_signal("EURUSD M1 CALL 25:61")
    
    assert parsed.rule == "pair"
    assert parsed.entry_time is None


def test_signal_beats_result_markers():
    parsed = classify_message("✅ EURUSD M1 CALL")
    
    assert isinstance(parsed, ParsedSignal)


@pytest.mark.parametrize(
    "text, result",
    [
        ("WIN ✅", "win"),
        ("ربح", "win"),
        ("❌ loss", "loss"),
        ("خسارة", "loss"),
        ("✅ WIN¹", "win1"),
        ("WIN2 ✅", "win2"),
    ],
)
def test_parse_result_outcomes(text, result):
    parsed = parse_result(text)
    
    assert isinstance(parsed, ParsedResult)
    assert parsed.result == result


def test_loss_marker_beats_plain_win():
    assert parse_result("✅ ❌ LOSS").result == "loss"


def test_qualified_win_beats_loss_marker():
    assert parse_result("WIN1 ✅ (after ❌)").result == "win1"


def test_qualifier_without_win_marker_is_not_a_win1():
    # "¹" alone is a footnote, not a martingale win
    assert parse_result("result¹") is None


def test_result_extracts_asset_and_timeframe():
    parsed = parse_result("RESULT EURUSD-OTC M1 ✅ WIN")
    
    assert parsed.asset == "EURUSD-OTC"
    assert parsed.timeframe == "M1"


def test_result_without_asset():
    parsed = parse_result("✅✅✅")
    
    assert parsed.result == "win"
    assert parsed.asset is None


def test_unrelated_text_is_ignored():
    assert classify_message("Good morning traders, session starts in 5 minutes") is None


@pytest.mark.parametrize(
    "asset",
    ["EUR/USD-OTC", "EURUSD-OTC", "eurusd", "EUR-USD"],
)
def test_asset_search_key(asset):
    assert asset_search_key(asset) == "EURUSD"


def test_result_asset_is_case_insensitive():
    parsed = parse_result("result eurusd m1 win ✅")
    
    assert parsed.asset == "EURUSD"
    assert parsed.timeframe == "M1"
