"""Chart drawings: points, argument checks and the page expressions that create shapes."""

from __future__ import annotations

import json
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal

CHART_API = "window.TradingViewApi._activeChartWidgetWV.value()"

GET_ALL_SHAPES_EXPRESSION = f"{CHART_API}.getAllShapes().map(function(s) {{ return s.id; }})"
LIST_SHAPES_EXPRESSION = f"""(function() {{
		var api = {CHART_API};
		var all = api.getAllShapes();
		return all.map(function(s) {{ return {{ id: s.id, name: s.name }}; }});
	}})()"""
CLEAR_SHAPES_EXPRESSION = f"{CHART_API}.removeAllShapes()"

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _json_literal(value) -> str:
    """Compact JSON with sorted keys and HTML-sensitive characters escaped."""
    text = json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return "".join(_HTML_ESCAPES.get(char, char) for char in text)


def fmt_num(value: float) -> str:
    """Shortest decimal form of a number, never in exponent notation."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def require_finite(value: float, name: str) -> float:
    """Return the value, or raise ValueError if it is NaN or infinite."""
    if math.isnan(value) or math.isinf(value):
        raise ValueError(f"{name} must be a finite number")
    return value


@dataclass(frozen=True)
class DrawPoint:
    """A time (Unix seconds) and price coordinate on the chart."""

    time: float
    price: float


@dataclass(frozen=True)
class DrawShapeArgs:
    """What to draw: a shape name, one or two points, style overrides and text."""

    shape: str
    point: DrawPoint
    point2: DrawPoint | None = None
    overrides: Mapping | None = field(default=None)
    text: str = ""

    def validate(self) -> None:
        """Raise ValueError if any coordinate is not a finite number."""
        require_finite(self.point.time, "point.time")
        require_finite(self.point.price, "point.price")
        if self.point2 is not None:
            require_finite(self.point2.time, "point2.time")
            require_finite(self.point2.price, "point2.price")


def create_shape_expression(args: DrawShapeArgs) -> str:
    """Page expression that creates the shape; multi-point when a second point is given.

    Raises ValueError if a coordinate is not finite.
    """
    args.validate()
    overrides = "{}" if args.overrides is None else _json_literal(dict(args.overrides))
    options = (
        f"{{shape:{_json_literal(args.shape)},overrides:{overrides},"
        f"text:{_json_literal(args.text)}}}"
    )
    first = f"{{time:{fmt_num(args.point.time)},price:{fmt_num(args.point.price)}}}"
    if args.point2 is None:
        return f"{CHART_API}.createShape({first},{options})"
    second = f"{{time:{fmt_num(args.point2.time)},price:{fmt_num(args.point2.price)}}}"
    return f"{CHART_API}.createMultipointShape([{first},{second}],{options})"


def new_entity_id(before: Iterable[str], after: Iterable[str]) -> str:
    """The first shape ID present after drawing that was absent before, or ''."""
    seen = set(before)
    return next((entity for entity in after if entity not in seen), "")