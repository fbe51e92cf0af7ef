"""Compact summaries of chart state, prices and indicator values."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

_AT_ZERO_EPS = 1e-9
_NUMBER = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_SEPARATORS = (",", " ", "\u00a0", "\u202f", "\u2009")

_CONTINUOUS_NOTE = (
    "nearest expiry and roll date are not available through the chart JS API; "
    "use TradingView's contract details panel"
)
_NOT_CONTINUOUS_NOTE = "current symbol is not a continuous contract"


def _parse_display_number(text: str) -> float | None:
    """Parse a number as shown on screen, such as '1,234.56' or '\u22120.5'."""
    cleaned = text.strip().replace("\u2212", "-")
    for separator in _SEPARATORS:
        cleaned = cleaned.replace(separator, "")
    if not _NUMBER.fullmatch(cleaned):
        return None
    return float(cleaned)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def str_val(value) -> str:
    """Text form of a loosely typed value; empty for None."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def num_val(value) -> float:
    """Numeric form of a loosely typed value; zero when it cannot be read as a number."""
    if _is_number(value):
        return float(value)
    if isinstance(value, str):
        parsed = _parse_display_number(value)
        if parsed is not None:
            return parsed
    return 0.0


def parse_first_numeric(values: Mapping) -> tuple[float, str] | None:
    """The first finite numeric value in a mapping with its key, or None if there is none."""
    for key, value in values.items():
        if _is_number(value):
            number = float(value)
        elif isinstance(value, str):
            parsed = _parse_display_number(value)
            if parsed is None:
                continue
            number = parsed
        else:
            continue
        if math.isfinite(number):
            return number, key
    return None


def round2(value: float) -> float:
    """Round to two decimals, halves away from zero."""
    scaled = value * 100
    whole = math.trunc(scaled)
    if abs(scaled - whole) >= 0.5:
        whole += math.copysign(1, scaled)
    return whole / 100


def value_direction(value: float) -> str:
    """Classify a value as above, below or at zero."""
    if value > _AT_ZERO_EPS:
        return "above_zero"
    if value < -_AT_ZERO_EPS:
        return "below_zero"
    return "at_zero"


def study_signal(name: str, value: float) -> str:
    """A simple signal for an indicator's current value, chosen by the indicator's name."""
    lowered = name.lower()
    if "rsi" in lowered or "relative strength" in lowered or "stoch" in lowered:
        if value >= 70:
            return "overbought"
        if value <= 30:
            return "oversold"
        return "neutral"
    if "cci" in lowered:
        if value >= 100:
            return "overbought"
        if value <= -100:
            return "oversold"
        return "neutral"
    if value > 0:
        return "bullish"
    if value < 0:
        return "bearish"
    return "neutral"


@dataclass(frozen=True)
class ContinuousContract:
    """A chart symbol split into its futures components."""

    symbol: str
    is_continuous: bool
    base_symbol: str
    roll_number: int
    note: str


def parse_continuous_symbol(symbol: str) -> ContinuousContract:
    """Detect a continuous futures symbol such as 'NYMEX:NG1!' and split out its parts."""
    base = symbol.rpartition(":")[2]
    is_continuous = "!" in base
    base_symbol = base
    roll_number = 0
    if is_continuous:
        bang = base.index("!")
        if bang > 0:
            previous = base[bang - 1]
            if "0" <= previous <= "9":
                roll_number = int(previous)
                base_symbol = base[: bang - 1]
            else:
                base_symbol = base[:bang]
    return ContinuousContract(
        symbol=symbol,
        is_continuous=is_continuous,
        base_symbol=base_symbol,
        roll_number=roll_number,
        note=_CONTINUOUS_NOTE if is_continuous else _NOT_CONTINUOUS_NOTE,
    )


def summarize_bars(bars: Sequence[Mapping]) -> dict:
    """Last bar, change against the previous close and volume against the prior average.

    Each bar is a mapping with at least 'close' and 'volume'. An empty sequence
    yields an empty mapping.
    """
    if not bars:
        return {}
    last = bars[-1]
    summary: dict = {"last_bar": last}
    change = 0.0
    change_pct = 0.0
    if len(bars) >= 2:
        previous_close = float(bars[-2]["close"])
        last_close = float(last["close"])
        change = round2(last_close - previous_close)
        if previous_close != 0:
            change_pct = round2((last_close - previous_close) / previous_close * 100)
    summary["change"] = change
    summary["change_pct"] = f"{change_pct:.2f}%"
    if len(bars) >= 2:
        prior = bars[:-1]
        average = sum(float(bar["volume"]) for bar in prior) / len(prior)
        if average > 0:
            summary["volume_vs_avg"] = round2(float(last["volume"]) / average)
    return summary