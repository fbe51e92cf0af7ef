import pytest

from tvchartkit.replay import (
    REPLAY_API,
    VALID_AUTOPLAY_DELAYS,
    select_date_expression,
    trade_expression,
    validate_autoplay_delay,
    wv,
)


def test_autoplay_invalid_speed_raises():
    with pytest.raises(ValueError, match="invalid autoplay delay 999ms"):
        validate_autoplay_delay(999)


@pytest.mark.parametrize("speed", [100, 143, 200, 300, 1000, 2000, 3000, 5000, 10000])
def test_autoplay_valid_speeds_pass(speed):
    assert validate_autoplay_delay(speed) == speed


def test_valid_autoplay_delays_set():
    assert sorted(VALID_AUTOPLAY_DELAYS) == [100, 143, 200, 300, 1000, 2000, 3000, 5000, 10000]
    accepted = [validate_autoplay_delay(delay) for delay in sorted(VALID_AUTOPLAY_DELAYS)]
    assert accepted == sorted(VALID_AUTOPLAY_DELAYS)


def test_autoplay_zero_means_toggle():
    assert validate_autoplay_delay(0) == 0


def test_wv_wraps_expression():
    result = wv("foo.bar()")
    assert result != "foo.bar()"
    assert "var v = foo.bar();" in result
    assert "v.value()" in result


@pytest.mark.parametrize(
    "action, method",
    [("buy", ".buy()"), ("sell", ".sell()"), ("close", ".closePosition()")],
)
def test_trade_expression_valid(action, method):
    assert trade_expression(action) == REPLAY_API + method


def test_trade_expression_invalid():
    with pytest.raises(ValueError, match="invalid action"):
        trade_expression("hold")


def test_select_date_expression_epoch():
    assert select_date_expression("1970-01-01") == (
        REPLAY_API + ".selectDate(0).then(function() { return 'ok'; })"
    )


def test_select_date_expression_value():
    assert ".selectDate(1705276800000)." in select_date_expression("2024-01-15")


@pytest.mark.parametrize("bad", ["2024-1-5", "2024-13-01", "2024-02-30", "yesterday", ""])
def test_select_date_expression_invalid(bad):
    with pytest.raises(ValueError, match="use YYYY-MM-DD format"):
        select_date_expression(bad)