"""Page expressions and argument checks for bar replay mode."""

from __future__ import annotations

import operator
import re
from datetime import datetime, timezone

REPLAY_API = "window.TradingViewApi._replayApi"

VALID_AUTOPLAY_DELAYS: frozenset[int] = frozenset(
    {100, 143, 200, 300, 1000, 2000, 3000, 5000, 10000}
)

_TRADE_METHODS: dict[str, str] = {
    "buy": "buy()",
    "sell": "sell()",
    "close": "closePosition()",
}

_DATE_SHAPE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def wv(path: str) -> str:
    """Wrap a page expression so an observable value is unwrapped to its current value."""
    return (
        f"(function(){{ var v = {path}; return (v && typeof v === 'object' "
        f"&& typeof v.value === 'function') ? v.value() : v; }})()"
    )


def validate_autoplay_delay(speed_ms: int) -> int:
    """Check an autoplay delay in milliseconds; zero or less means only toggle.

    Raises ValueError for a positive delay that replay mode does not offer.
    """
    speed_ms = operator.index(speed_ms)
    if speed_ms > 0 and speed_ms not in VALID_AUTOPLAY_DELAYS:
        raise ValueError(
            f"invalid autoplay delay {speed_ms}ms. Valid values: "
            "100, 143, 200, 300, 1000, 2000, 3000, 5000, 10000"
        )
    return speed_ms


def trade_expression(action: str) -> str:
    """Page expression that buys, sells or closes the position in replay mode.

    Raises ValueError for any other action.
    """
    method = _TRADE_METHODS.get(action)
    if method is None:
        raise ValueError("invalid action. Use: buy, sell, or close")
    return f"{REPLAY_API}.{method}"


def select_date_expression(date: str) -> str:
    """Page expression that starts replay at a YYYY-MM-DD date (midnight UTC).

    Raises ValueError if the date is not a valid YYYY-MM-DD date.
    """
    error = ValueError(f'invalid date "{date}"; use YYYY-MM-DD format')
    if not _DATE_SHAPE.fullmatch(date):
        raise error
    try:
        moment = datetime.strptime(date, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError as exc:
        raise error from exc
    epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
    delta = moment - epoch
    timestamp_ms = (delta.days * 86400 + delta.seconds) * 1000
    return f"{REPLAY_API}.selectDate({timestamp_ms}).then(function() {{ return 'ok'; }})"