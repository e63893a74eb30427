"""
Telegram channel message classification

Messages are matched against ordered rule tables. Signal rules are tried
first, most specific first, so a signal post that happens to contain a ✅
is never read as a result. Result rules are tried only when no signal rule
matched; within them a qualified win beats a loss marker, which beats a
plain win marker.
"""
import re
from dataclasses import dataclass
from datetime import time
from typing import Optional, Pattern, Tuple, Union


@dataclass(frozen=True)
class SignalRule:
    """One accepted signal layout"""
    name: str
    pattern: Pattern[str]
    has_entry_time: bool = False


@dataclass(frozen=True)
class ResultRule:
    """One result outcome and the markers that select it"""
    result: str
    markers: Tuple[str, ...]
    requires_win_marker: bool = False


@dataclass(frozen=True)
class ParsedSignal:
    """Directional signal extracted from a message"""
    asset: str
    timeframe: str
    direction: str
    raw_message: str
    entry_time: Optional[time] = None
    rule: str = ""


@dataclass(frozen=True)
class ParsedResult:
    """Win/loss outcome extracted from a message"""
    result: str
    asset: Optional[str] = None
    timeframe: Optional[str] = None


ParsedMessage = Union[ParsedSignal, ParsedResult]


SIGNAL_RULES: Tuple[SignalRule, ...] = (
    # EURUSD-OTC M1 CALL 15:30:00
    SignalRule(
        "pair_with_entry_time",
        re.compile(
            r"\b([A-Z]{3}/?[A-Z]{3}(?:-OTC)?)\s+([MH]\d+)\s+(CALL|PUT)\s+(\d{1,2}:\d{2}(?::\d{2})?)\b",
            re.IGNORECASE,
        ),
        has_entry_time=True,
    ),
    # GBPUSD-OTC M1 CALL
    SignalRule(
        "pair",
        re.compile(r"\b([A-Z]{6}(?:-OTC)?)\s+([MH]\d+)\s+(CALL|PUT)\b", re.IGNORECASE),
    ),
    # EUR/USD M5 PUT
    SignalRule(
        "slash_pair",
        re.compile(r"\b([A-Z]{3}/[A-Z]{3}(?:-OTC)?)\s+([MH]\d+)\s+(CALL|PUT)\b", re.IGNORECASE),
    ),
    # GOLD-OTC M5 CALL
    SignalRule(
        "metal",
        re.compile(r"\b(GOLD|SILVER|XAU|XAG)(?:-OTC)?\s+([MH]\d+)\s+(CALL|PUT)\b", re.IGNORECASE),
    ),
)

WIN_MARKERS: Tuple[str, ...] = ("win", "✅", "ربح")
LOSS_MARKERS: Tuple[str, ...] = ("loss", "❌", "خسارة")

RESULT_RULES: Tuple[ResultRule, ...] = (
    ResultRule("win1", ("win1", "¹"), requires_win_marker=True),
    ResultRule("win2", ("win2", "²"), requires_win_marker=True),
    ResultRule("loss", LOSS_MARKERS),
    ResultRule("win", WIN_MARKERS),
)

RESULT_ASSET_PATTERN = re.compile(
    r"\b([A-Z]{6}(?:-OTC)?|[A-Z]{3}/[A-Z]{3}(?:-OTC)?|GOLD|SILVER)\b", re.IGNORECASE
)
RESULT_TIMEFRAME_PATTERN = re.compile(r"\b([MH]\d+)\b", re.IGNORECASE)

# Six-letter words that show up in result posts and are not tickers
NON_ASSET_WORDS = frozenset({"RESULT", "SIGNAL", "PROFIT", "WINNER", "LOSSES", "MARTIN"})


def _parse_entry_time(value: str) -> Optional[time]:
    parts = [int(part) for part in value.split(":")]
    while len(parts) < 3:
        parts.append(0)
    try:
        return time(parts[0], parts[1], parts[2])
    except ValueError:
        return None


def parse_signal(text: str) -> Optional[ParsedSignal]:
    """
    Extract a signal from message text

    Args:
        text: raw message text

    Returns:
        Parsed signal, or None when no signal rule matches
    """
    for rule in SIGNAL_RULES:
        match = rule.pattern.search(text)
        if not match:
            continue

        entry_time = None
        if rule.has_entry_time:
            entry_time = _parse_entry_time(match.group(4))
            if entry_time is None:
                # 25:61 and friends: let a less specific rule take the message
                continue

        return ParsedSignal(
            asset=match.group(1).upper(),
            timeframe=match.group(2).upper(),
            direction=match.group(3).upper(),
            raw_message=text,
            entry_time=entry_time,
            rule=rule.name,
        )
    return None


def _extract_result_asset(text: str) -> Optional[str]:
    for match in RESULT_ASSET_PATTERN.finditer(text):
        candidate = match.group(1).upper()
        if candidate not in NON_ASSET_WORDS:
            return candidate
    return None


def parse_result(text: str) -> Optional[ParsedResult]:
    """
    Extract a win/loss outcome from message text

    Args:
        text: raw message text

    Returns:
        Parsed result, or None when the text carries no win/loss marker
    """
    lowered = text.lower()
    has_win = any(marker in lowered for marker in WIN_MARKERS)

    for rule in RESULT_RULES:
        if rule.requires_win_marker and not has_win:
            continue
        if any(marker in lowered for marker in rule.markers):
            timeframe_match = RESULT_TIMEFRAME_PATTERN.search(text)
            return ParsedResult(
                result=rule.result,
                asset=_extract_result_asset(text),
                timeframe=timeframe_match.group(1).upper() if timeframe_match else None,
            )
    return None


def classify_message(text: str) -> Optional[ParsedMessage]:
    """Signal first, then result; None for anything else"""
    return parse_signal(text) or parse_result(text)


def asset_search_key(asset: str) -> str:
    """
    Loose comparison key for an asset name

    EUR/USD-OTC, EURUSD-OTC and eurusd all reduce to EURUSD.
    """
    key = asset.upper()
    if key.endswith("-OTC"):
        key = key[: -len("-OTC")]
    return key.replace("/", "").replace("-", "")
