"""
Tests for end-to-end evaluation, the risk profile and the result cache.
"""

from dataclasses import replace
from decimal import Decimal

import pytest

from options_risk.core import evaluation as evaluation_module
from options_risk.core.evaluation import evaluate_strategy
from options_risk.core.risk_profile import build_risk_profile
from options_risk.utils.cache import CalculationCache, cache_key
from options_risk.utils.exceptions import ConfigurationError, InputValidationError
from options_risk.utils.types import Strategy


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


# ===========================
# Risk Profile Tests
# ===========================


def test_risk_profile_of_spread(bull_call_spread, market_data):
    profile = build_risk_profile(bull_call_spread, market_data)
    assert profile.max_profit == Decimal("700")
    assert profile.max_loss == Decimal("-300")
    assert profile.break_even_points == (Decimal("103"),)
    assert profile.risk_level == "Medium"
    assert profile.profit_potential == "Limited"
    assert profile.margin_requirement == Decimal("1000")
    assert profile.return_on_risk == Decimal("233.33")
    assert len(profile.profit_loss_curve) == 101


def test_risk_profile_of_long_call(long_call_strategy, market_data):
    profile = build_risk_profile(long_call_strategy, market_data)
    assert profile.risk_level == "High"
    assert profile.profit_potential == "Unlimited"
    assert profile.return_on_risk == Decimal("Infinity")
    assert profile.profit_probability == pytest.approx(0.5146, abs=1e-3)


def test_risk_profile_does_not_need_margin(bull_call_spread, market_data):
    """Return on capital belongs to the analysis; a zero margin still profiles."""
    profile = build_risk_profile(replace(bull_call_spread, margin_requirement=Decimal("0")), market_data)
    assert profile.margin_requirement == Decimal("0")
    assert profile.max_profit == Decimal("700")


def test_risk_profile_is_rebuilt_per_call(iron_condor, market_data):
    first = build_risk_profile(iron_condor, market_data)
    second = build_risk_profile(iron_condor, replace(market_data, volatility=Decimal("50")))
    assert first.profit_loss_curve != second.profit_loss_curve
    assert first.profit_probability != second.profit_probability


# ===========================
# Evaluation Tests
# ===========================


def test_full_evaluation(bull_call_spread, market_data, today):
    result = evaluate_strategy("SPY", Decimal("100"), bull_call_spread, market_data, today=today)
    assert result.symbol == "SPY"
    assert result.risk_profile.max_profit == Decimal("700")
    assert result.analysis.risk_reward_ratio == pytest.approx(700 / 300)
    assert result.analysis.expected_value is not None
    assert result.greeks.net_delta_equivalent == pytest.approx(30.0)


def test_unlimited_profit_evaluation(long_call_strategy, market_data, today):
    result = evaluate_strategy("AAPL", 100, long_call_strategy, market_data, today=today)
    assert result.analysis.expected_value is None
    assert result.analysis.risk_reward_ratio is None
    assert result.analysis.max_return_on_capital is None


def test_validation_failure_stops_analysis(bull_call_spread, market_data, today, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("analysis must not run on invalid input")

    monkeypatch.setattr(evaluation_module, "build_risk_profile", fail)
    monkeypatch.setattr(evaluation_module, "analyze_strategy", fail)
    monkeypatch.setattr(evaluation_module, "aggregate_greeks", fail)

    with pytest.raises(InputValidationError) as excinfo:
        evaluate_strategy("SPY", -5, bull_call_spread, market_data, today=today)

    assert [error.field for error in excinfo.value.errors] == ["underlyingPrice"]
    assert str(excinfo.value) == "1 invalid input(s): underlyingPrice"


def test_invalid_market_price_stops_analysis(bull_call_spread, market_data, today):
    market = replace(market_data, underlying_price=Decimal("-5"))
    with pytest.raises(InputValidationError) as excinfo:
        evaluate_strategy("SPY", 100, bull_call_spread, market, today=today)
    assert [error.field for error in excinfo.value.errors] == ["marketData.underlyingPrice"]


def test_summary_is_derived_after_validation(bull_call_spread, market_data, today):
    shell = Strategy(bull_call_spread.variant, bull_call_spread.legs)
    result = evaluate_strategy("SPY", 100, shell, market_data, today=today)
    assert result.risk_profile.max_profit == Decimal("700")
    assert result.risk_profile.max_loss == Decimal("-300")
    assert result.risk_profile.margin_requirement == Decimal("1000")
    assert result.analysis.max_return_on_capital == pytest.approx(70.0)


def test_leg_count_is_a_validation_error_before_derivation(make_leg, market_data, today, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("summary must not be derived for invalid input")

    monkeypatch.setattr(evaluation_module, "build_strategy", fail)
    legs = (
        make_leg("call", "long", 100, 5),
        make_leg("call", "short", 110, 2),
        make_leg("call", "short", 120, 1),
    )

    with pytest.raises(InputValidationError) as excinfo:
        evaluate_strategy("SPY", 100, Strategy("vertical", legs), market_data, today=today)

    assert [error.field for error in excinfo.value.errors] == ["strategy"]
    assert excinfo.value.errors[0].message == "Vertical Spread cannot have more than 2 legs"


def test_shape_mismatch_is_a_configuration_error(bull_call_spread, market_data, today):
    legs = (bull_call_spread.legs[0], replace(bull_call_spread.legs[1], kind="put"))
    strategy = Strategy("vertical", legs, Decimal("-300"), Decimal("700"), (Decimal("103"),), Decimal("1000"))
    with pytest.raises(ConfigurationError):
        evaluate_strategy("SPY", 100, strategy, market_data, today=today)


# ===========================
# Cache Tests
# ===========================


def test_cache_returns_identical_result(iron_condor, market_data, today):
    cache = CalculationCache()
    first = evaluate_strategy("SPY", 100, iron_condor, market_data, today=today, cache=cache)
    second = evaluate_strategy("SPY", 100, iron_condor, market_data, today=today, cache=cache)
    assert second is first
    assert len(cache) == 1


def test_cache_entry_expires(iron_condor, market_data, today):
    clock = FakeClock()
    cache = CalculationCache(ttl=300, clock=clock)
    first = evaluate_strategy("SPY", 100, iron_condor, market_data, today=today, cache=cache)

    clock.now = 301.0
    second = evaluate_strategy("SPY", 100, iron_condor, market_data, today=today, cache=cache)

    assert second is not first
    assert second == first


def test_cache_evicts_least_recently_used():
    cache = CalculationCache(max_size=2)
    cache.set("a", 1)
    cache.set("b", 2)
    assert cache.get("a") == 1
    cache.set("c", 3)

    assert cache.get("b") is None
    assert cache.get("a") == 1
    assert cache.get("c") == 3


def test_cache_clear():
    cache = CalculationCache()
    cache.set("a", 1)
    cache.clear()
    assert len(cache) == 0
    assert cache.get("a") is None


@pytest.mark.parametrize("kwargs", [{"max_size": 0}, {"ttl": 0}])
def test_cache_rejects_bad_parameters(kwargs):
    with pytest.raises(ValueError):
        CalculationCache(**kwargs)


def test_cache_key_ignores_ordering_and_trailing_zeros():
    assert cache_key({"a": Decimal("1.50"), "b": 2}) == cache_key({"b": 2, "a": Decimal("1.5")})
    assert cache_key({"a": Decimal("1.5")}) != cache_key({"a": Decimal("1.6")})
