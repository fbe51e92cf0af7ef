import math

import pytest

from tvchartkit.drawing import (
    CHART_API,
    DrawPoint,
    DrawShapeArgs,
    create_shape_expression,
    fmt_num,
    new_entity_id,
    require_finite,
)


def test_require_finite_accepts_valid_float():
    assert require_finite(1700000000.0, "ts") == 1700000000.0


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_require_finite_rejects_non_finite(value):
    with pytest.raises(ValueError, match="ts must be a finite number"):
        require_finite(value, "ts")


@pytest.mark.parametrize(
    "value, expected",
    [
        (1700000000.0, "1700000000"),
        (25000.5, "25000.5"),
        (0.0, "0"),
        (-3.14, "-3.14"),
        (1e20, "100000000000000000000"),
        (1e-7, "0.0000001"),
    ],
)
def test_fmt_num(value, expected):
    assert fmt_num(value) == expected


def test_validate_rejects_nan_time():
    args = DrawShapeArgs(shape="horizontal_line", point=DrawPoint(time=math.nan, price=25000))
    with pytest.raises(ValueError, match="point.time"):
        args.validate()


def test_validate_rejects_infinite_second_price():
    args = DrawShapeArgs(
        shape="trend_line",
        point=DrawPoint(time=1, price=2),
        point2=DrawPoint(time=3, price=math.inf),
    )
    with pytest.raises(ValueError, match="point2.price"):
        args.validate()


def test_create_expression_rejects_nan():
    args = DrawShapeArgs(shape="horizontal_line", point=DrawPoint(time=math.nan, price=25000))
    with pytest.raises(ValueError):
        create_shape_expression(args)


def test_single_point_expression():
    args = DrawShapeArgs(shape="horizontal_line", point=DrawPoint(time=1700000000.0, price=25000.5))
    expected = (
        CHART_API
        + '.createShape({time:1700000000,price:25000.5},'
        + '{shape:"horizontal_line",overrides:{},text:""})'
    )
    assert create_shape_expression(args) == expected


def test_multipoint_expression_with_overrides_and_text():
    args = DrawShapeArgs(
        shape="trend_line",
        point=DrawPoint(time=100, price=1.5),
        point2=DrawPoint(time=200, price=2.5),
        overrides={"linewidth": 2, "linecolor": "#FF0000"},
        text="hi",
    )
    expected = (
        CHART_API
        + ".createMultipointShape([{time:100,price:1.5},{time:200,price:2.5}],"
        + '{shape:"trend_line",overrides:{"linecolor":"#FF0000","linewidth":2},text:"hi"})'
    )
    assert create_shape_expression(args) == expected


def test_expression_escapes_html_characters_in_text():
    args = DrawShapeArgs(shape="text", point=DrawPoint(time=1, price=1), text="<a&b>")
    assert 'text:"\\u003ca\\u0026b\\u003e"' in create_shape_expression(args)


def test_new_entity_id_finds_first_new():
    assert new_entity_id(["a", "b"], ["a", "c", "b", "d"]) == "c"


def test_new_entity_id_none_new():
    assert new_entity_id(["a", "b"], ["b", "a"]) == ""