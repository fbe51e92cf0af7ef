import pytest

from tvchartkit.pane import (
    focus_pane_expression,
    layout_name,
    resolve_layout,
    set_layout_expression,
)


@pytest.mark.parametrize(
    ("layout", "expected"),
    [("s", "s"), ("2h", "2h"), ("4", "4"), ("16", "16")],
)
def test_resolve_known_codes(layout, expected):
    assert resolve_layout(layout) == expected


@pytest.mark.parametrize(
    ("layout", "expected"),
    [
        ("single", "s"),
        ("1", "s"),
        ("1x1", "s"),
        ("2x2", "4"),
        ("quad", "4"),
        ("grid", "4"),
        ("2x1", "2h"),
        ("1x2", "2v"),
    ],
)
def test_resolve_aliases(layout, expected):
    assert resolve_layout(layout) == expected


def test_resolve_case_insensitive():
    assert resolve_layout("SINGLE") == "s"


def test_resolve_ignores_spaces():
    assert resolve_layout(" 2 x 2 ") == "4"


def test_resolve_unknown_raises():
    with pytest.raises(ValueError, match="unknown layout 'bogus'"):
        resolve_layout("bogus")


def test_unknown_error_lists_available():
    with pytest.raises(ValueError, match=r"4 \(2x2 grid\)"):
        resolve_layout("nope")


def test_layout_name():
    assert layout_name("4") == "2x2 grid"
    assert layout_name("2-1") == "2 top, 1 bottom"
    assert layout_name("zzz") == ""


def test_set_layout_expression_uses_resolved_code():
    expr = set_layout_expression("quad")
    assert expr == 'window.TradingViewApi._chartWidgetCollection.setLayout("4")'


def test_set_layout_expression_rejects_unknown():
    with pytest.raises(ValueError):
        set_layout_expression("bogus")


def test_focus_pane_expression_embeds_index():
    expr = focus_pane_expression(3)
    assert "var chart = all[3];" in expr
    assert "focused: 3" in expr
    assert "Pane index 3 out of range" in expr


def test_focus_pane_expression_rejects_non_integer():
    with pytest.raises(TypeError):
        focus_pane_expression("1")