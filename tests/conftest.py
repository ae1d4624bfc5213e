"""
Pytest configuration and shared fixtures.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from options_risk.core.strategy import build_strategy
from options_risk.utils.types import MarketData, OptionLeg, StrategyVariant

TODAY = date(2026, 10, 19)
MONTHLY_EXPIRY = TODAY + timedelta(days=30)


@pytest.fixture
def today():
    """Fixed reference date for expiry windows."""
    return TODAY


@pytest.fixture
def make_leg():
    """Factory for monthly legs expiring in 30 days."""

    def _make_leg(kind, position, strike, premium, quantity=1, **kwargs):
        kwargs.setdefault("expiry", MONTHLY_EXPIRY)
        kwargs.setdefault("term", "monthly")
        return OptionLeg(kind, position, Decimal(str(strike)), Decimal(str(premium)), quantity, **kwargs)

    return _make_leg


@pytest.fixture
def market_data():
    """At-the-money market snapshot: S=100, 25% vol, 30 days."""
    return MarketData(
        underlying_price=Decimal("100"),
        volatility=Decimal("25"),
        risk_free_rate=Decimal("5"),
        days_to_expiration=30,
        dividend_yield=Decimal("0"),
    )


@pytest.fixture
def long_call(make_leg):
    """Long 100 call bought for $5."""
    return make_leg("call", "long", 100, 5, delta=0.55, gamma=0.04, theta=-0.05, vega=0.12, rho=0.04)


@pytest.fixture
def long_call_strategy(long_call):
    return build_strategy(StrategyVariant.SINGLE, [long_call], Decimal("100"))


@pytest.fixture
def bull_call_spread(make_leg):
    """Long 100 call at $5, short 110 call at $2."""
    legs = [
        make_leg("call", "long", 100, 5, delta=0.55, gamma=0.04, theta=-0.05, vega=0.12, rho=0.04),
        make_leg("call", "short", 110, 2, delta=0.25, gamma=0.03, theta=-0.03, vega=0.09, rho=0.02),
    ]
    return build_strategy(StrategyVariant.VERTICAL, legs, Decimal("100"))


@pytest.fixture
def iron_condor(make_leg):
    """Short 95/105 iron condor with 90/110 wings."""
    legs = [
        make_leg("put", "long", 90, 1, delta=-0.10),
        make_leg("put", "short", 95, 2, delta=-0.25),
        make_leg("call", "short", 105, 2, delta=0.25),
        make_leg("call", "long", 110, 1, delta=0.10),
    ]
    return build_strategy(StrategyVariant.IRON_CONDOR, legs, Decimal("100"))
