"""
Unit tests for the payoff-at-expiration model.

This module validates:
1. Intrinsic value of calls and puts (including the zero floor)
2. Aggregate strategy profit/loss at a price
3. Max profit/loss and break-even points derived from the legs
"""

from datetime import date
from decimal import Decimal

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from options_risk.core.catalog import strategy_config
from options_risk.core.curve import profit_loss_curve
from options_risk.core.payoff import (
    break_even_points,
    max_loss,
    max_profit,
    profit_loss,
    summarize_payoff,
    value_at_expiry,
)
from options_risk.core.strategy import build_strategy
from options_risk.utils.types import OptionLeg, StockPosition

_money = st.decimals(min_value="0.01", max_value="10000", places=2, allow_nan=False, allow_infinity=False)


# ===========================
# Intrinsic Value Tests
# ===========================


@given(price=_money, strike=_money, kind=st.sampled_from(["call", "put"]))
@settings(max_examples=200)
def test_intrinsic_value_is_never_negative(price, strike, kind):
    """Option value at expiry is floored at zero for any price and strike."""
    leg = OptionLeg(kind, "long", strike, Decimal("1"), 1, date(2030, 1, 1))
    assert value_at_expiry(price, leg) >= 0


def test_call_value_in_and_out_of_the_money(make_leg):
    call = make_leg("call", "long", 100, 5)
    assert value_at_expiry(120, call) == Decimal("20")
    assert value_at_expiry(80, call) == Decimal("0")


def test_put_value_in_and_out_of_the_money(make_leg):
    put = make_leg("put", "long", 100, 5)
    assert value_at_expiry(80, put) == Decimal("20")
    assert value_at_expiry(120, put) == Decimal("0")


# ===========================
# Profit/Loss Tests
# ===========================


def test_long_call_profit_at_expiry(long_call):
    """Long 100 call for $5, settling at 120: (20 - 5) × 1 × 100 = 1500."""
    assert profit_loss(120, [long_call]) == Decimal("1500")


def test_long_call_loses_premium_below_strike(long_call):
    assert profit_loss(90, [long_call]) == Decimal("-500")


def test_short_leg_mirrors_long_leg(make_leg):
    long_put = make_leg("put", "long", 100, 4, quantity=3)
    short_put = make_leg("put", "short", 100, 4, quantity=3)
    for price in (50, 96, 100, 104, 150):
        assert profit_loss(price, [short_put]) == -profit_loss(price, [long_put])


def test_profit_loss_accepts_float_price(long_call):
    """Float prices are converted through str(), so 120.1 stays exact."""
    assert profit_loss(120.1, [long_call]) == Decimal("1510.0")


def test_vertical_spread_profit_is_capped(bull_call_spread):
    legs = bull_call_spread.legs
    assert profit_loss(150, legs) == Decimal("700")
    assert profit_loss(80, legs) == Decimal("-300")


# ===========================
# Payoff Summary Tests
# ===========================


def test_long_call_summary(long_call):
    summary = summarize_payoff([long_call])
    assert summary.max_profit == Decimal("Infinity")
    assert summary.max_loss == Decimal("-500")
    assert summary.break_even_points == (Decimal("105"),)


def test_long_put_summary(make_leg):
    put = make_leg("put", "long", 100, 5)
    assert max_profit([put]) == Decimal("9500")
    assert max_loss([put]) == Decimal("-500")
    assert break_even_points([put]) == (Decimal("95"),)


def test_short_call_has_unlimited_loss(make_leg):
    call = make_leg("call", "short", 100, 5)
    assert max_loss([call]) == Decimal("-Infinity")
    assert max_profit([call]) == Decimal("500")


def test_vertical_spread_summary(bull_call_spread):
    assert bull_call_spread.max_profit == Decimal("700")
    assert bull_call_spread.max_loss == Decimal("-300")
    assert bull_call_spread.break_even_points == (Decimal("103"),)


def test_iron_condor_summary(iron_condor):
    assert iron_condor.max_profit == Decimal("200")
    assert iron_condor.max_loss == Decimal("-300")
    assert iron_condor.break_even_points == (Decimal("93"), Decimal("107"))


def test_long_straddle_has_two_break_evens(make_leg):
    legs = [make_leg("call", "long", 100, 4), make_leg("put", "long", 100, 3)]
    assert break_even_points(legs) == (Decimal("93"), Decimal("107"))
    assert max_loss(legs) == Decimal("-700")


@pytest.mark.parametrize("price", ["93", "107"])
def test_break_evens_are_zero_crossings(iron_condor, price):
    assert profit_loss(price, iron_condor.legs) == 0


def test_empty_legs_have_no_break_even():
    assert break_even_points([]) == ()


# ===========================
# Stock-Holding Strategy Tests
# ===========================


def test_shares_add_linear_payoff(make_leg):
    call = make_leg("call", "short", 105, 2)
    stock = StockPosition(shares=100, entry_price=Decimal("100"))
    assert profit_loss(90, [call], stock) == Decimal("-800")
    assert profit_loss(120, [call], stock) == Decimal("700")


def test_covered_call_summary_is_limited(make_leg):
    """100 shares at 100 plus a short 105 call for $2."""
    strategy = build_strategy("covered_call", [make_leg("call", "short", 105, 2)], Decimal("100"))

    assert strategy.max_profit == Decimal("700")
    assert strategy.max_loss == Decimal("-9800")
    assert strategy.break_even_points == (Decimal("98"),)
    assert strategy.return_on_risk == Decimal("7.14")
    assert strategy_config("covered_call").profit_potential == "Limited"


def test_protective_put_summary_is_unlimited(make_leg):
    """100 shares at 100 plus a long 95 put for $2."""
    strategy = build_strategy("protective_put", [make_leg("put", "long", 95, 2)], Decimal("100"))

    assert strategy.max_profit == Decimal("Infinity")
    assert strategy.max_loss == Decimal("-700")
    assert strategy.break_even_points == (Decimal("102"),)
    assert strategy_config("protective_put").profit_potential == "Unlimited"


def test_covered_call_shares_scale_with_contracts(make_leg):
    strategy = build_strategy("covered_call", [make_leg("call", "short", 105, 2, quantity=3)], Decimal("100"))
    assert strategy.max_profit == Decimal("2100")
    assert strategy.max_loss == Decimal("-29400")


def test_covered_call_curve_includes_shares(make_leg, market_data):
    strategy = build_strategy("covered_call", [make_leg("call", "short", 105, 2)], Decimal("100"))
    curve = profit_loss_curve(strategy, market_data)

    # Grid 25 → 175 in steps of 1.5; point 50 is the current price
    assert curve[50].price == Decimal("100")
    assert curve[50].profit_loss == Decimal("200")
    assert curve[-1].profit_loss == Decimal("700")
    assert curve[0].profit_loss == Decimal("-7300")
