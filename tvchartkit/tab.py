"""TradingView chart tabs as seen through the remote debugging port."""

from __future__ import annotations

import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Iterable, Mapping

CDP_HOST = "localhost"
CDP_PORT = 9222
_ACTIVATE_TIMEOUT = 5.0


class TabSwitchError(RuntimeError):
    """A tab could not be activated."""


def filter_tradingview_tabs(targets: Iterable[Mapping]) -> list[dict]:
    """Keep the page targets whose URL mentions TradingView."""
    return [
        {
            "id": target.get("id", ""),
            "title": target.get("title", ""),
            "url": target.get("url", ""),
        }
        for target in targets
        if target.get("type") == "page"
        and "tradingview" in str(target.get("url", "")).lower()
    ]


def switch_tab(tab_id: str, host: str = CDP_HOST, port: int = CDP_PORT) -> dict:
    """Activate a tab by its debugger target ID.

    Raises TabSwitchError if the ID is empty or the activation fails.
    """
    if not tab_id:
        raise TabSwitchError("tab_id is required")
    url = f"http://{host}:{port}/json/activate/{urllib.parse.quote(tab_id, safe='')}"
    try:
        with urllib.request.urlopen(url, timeout=_ACTIVATE_TIMEOUT) as response:
            status = response.status
            body = response.read()
    except urllib.error.HTTPError as exc:
        status = exc.code
        body = exc.read()
    except (urllib.error.URLError, OSError) as exc:
        raise TabSwitchError(str(exc)) from exc
    if status != 200:
        text = body.decode("utf-8", "replace").strip()
        raise TabSwitchError(f"activate failed (status {status}): {text}")
    return {"success": True, "activated_tab_id": tab_id}