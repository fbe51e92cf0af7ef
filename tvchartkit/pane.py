"""Chart grid layouts and the page expressions that change or focus panes."""

from __future__ import annotations

import json
import operator

CHART_WIDGET_COLLECTION = "window.TradingViewApi._chartWidgetCollection"

LAYOUT_NAMES: dict[str, str] = {
    "s": "1 chart",
    "2h": "2 horizontal",
    "2v": "2 vertical",
    "2-1": "2 top, 1 bottom",
    "1-2": "1 top, 2 bottom",
    "3h": "3 horizontal",
    "3v": "3 vertical",
    "3s": "3 custom",
    "4": "2x2 grid",
    "4h": "4 horizontal",
    "4v": "4 vertical",
    "4s": "4 custom",
    "6": "6 charts",
    "8": "8 charts",
    "10": "10 charts",
    "12": "12 charts",
    "14": "14 charts",
    "16": "16 charts",
}

LAYOUT_ALIASES: dict[str, str] = {
    "single": "s",
    "1": "s",
    "1x1": "s",
    "2x1": "2h",
    "1x2": "2v",
    "2x2": "4",
    "grid": "4",
    "quad": "4",
    "3x1": "3h",
    "1x3": "3v",
}


def resolve_layout(layout: str) -> str:
    """Normalise a layout code or friendly alias to a known layout code.

    Raises ValueError for a layout that is not known.
    """
    code = layout.replace(" ", "").lower()
    code = LAYOUT_ALIASES.get(code, code)
    if code not in LAYOUT_NAMES:
        available = ", ".join(f"{key} ({name})" for key, name in LAYOUT_NAMES.items())
        raise ValueError(f"unknown layout {layout!r}; available: {available}")
    return code


def layout_name(code: str) -> str:
    """Human-readable name of a layout code, or an empty string if unknown."""
    return LAYOUT_NAMES.get(code, "")


def set_layout_expression(layout: str) -> str:
    """Page expression that switches the chart grid to the given layout."""
    code = resolve_layout(layout)
    return f"{CHART_WIDGET_COLLECTION}.setLayout({json.dumps(code)})"


def focus_pane_expression(index: int) -> str:
    """Page expression that focuses the pane at a zero-based index."""
    index = operator.index(index)
    return f"""(function() {{
		var cwc = {CHART_WIDGET_COLLECTION};
		var all = cwc.getAll();
		if ({index} >= all.length) return {{ error: 'Pane index {index} out of range (have ' + all.length + ' panes)' }};
		var chart = all[{index}];
		if (chart._mainDiv) chart._mainDiv.click();
		return {{ focused: {index}, total: all.length }};
	}})()"""