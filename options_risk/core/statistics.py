"""
Probability and return statistics for a strategy.

The probability of profit treats the terminal price as normally
distributed around the current price and asks how likely it is to move
past the nearest break-even point:

    σ = vol/100 × √(days/365) × S
    d = min |break_even - S|
    P(profit) = 1 - 2·Φ(-d/σ)

This is a heuristic, symmetric estimate. It does not know on which side of
the break-even the strategy profits.
"""

import logging
import math
from decimal import Decimal
from typing import Optional

from options_risk.core.distributions import normal_cdf
from options_risk.core.greeks import aggregate_greeks
from options_risk.utils.constants import DAYS_PER_YEAR, MONEY_QUANTUM
from options_risk.utils.exceptions import DegenerateInputError
from options_risk.utils.types import MarketData, Strategy, StrategyAnalysis

log = logging.getLogger(__name__)


def probability_of_profit(strategy: Strategy, market_data: MarketData) -> Optional[float]:
    """
    Estimate the probability that the strategy finishes profitable.

    Args:
        strategy: Strategy with its break-even points
        market_data: Market snapshot

    Returns:
        Probability in [0, 1], or None when no estimate is available
        (no break-even points, or zero volatility/time to expiration)
    """
    if not strategy.break_even_points:
        log.warning("No break-even points for %s; probability unavailable", strategy.variant.value)
        return None

    price = float(market_data.underlying_price)
    std_dev = (
        float(market_data.volatility)
        / 100.0
        * math.sqrt(market_data.days_to_expiration / DAYS_PER_YEAR)
        * price
    )
    if std_dev <= 0.0:
        log.warning("Zero price dispersion (vol=%s, days=%d); probability unavailable",
                    market_data.volatility, market_data.days_to_expiration)
        return None

    distance = min(abs(float(point) - price) for point in strategy.break_even_points)
    probability = 1.0 - 2.0 * normal_cdf(-distance / std_dev)

    # Φ(0) is approximated as 0.49999985, so p is ~3e-7 at a break-even
    return min(1.0, max(0.0, probability))


def expected_value(strategy: Strategy, probability: Optional[float]) -> Optional[Decimal]:
    """
    Probability-weighted outcome: max_profit·p + max_loss·(1 - p).

    Returns None when the probability is unavailable or either bound is
    unlimited.
    """
    if probability is None:
        return None
    if strategy.max_profit.is_infinite() or strategy.max_loss.is_infinite():
        return None

    p = Decimal(repr(probability))
    value = strategy.max_profit * p + strategy.max_loss * (1 - p)
    return value.quantize(MONEY_QUANTUM)


def risk_reward_ratio(strategy: Strategy) -> Optional[float]:
    """
    |max_profit / max_loss|, or None for a riskless or unbounded strategy.
    """
    if strategy.max_loss == 0:
        return None
    if strategy.max_profit.is_infinite() or strategy.max_loss.is_infinite():
        return None
    return abs(float(strategy.max_profit / strategy.max_loss))


def max_return_on_capital(strategy: Strategy) -> Optional[float]:
    """
    Max profit as a percent of the margin requirement.

    Returns:
        Percent return, or None for unlimited-profit strategies

    Raises:
        DegenerateInputError: If the margin requirement is zero
    """
    if strategy.margin_requirement == 0:
        raise DegenerateInputError(
            f"Margin requirement of {strategy.variant.value} is zero; return on capital is undefined"
        )
    if strategy.max_profit.is_infinite():
        return None
    return float(strategy.max_profit / strategy.margin_requirement * 100)


def analyze_strategy(strategy: Strategy, market_data: MarketData) -> StrategyAnalysis:
    """
    Compute the statistical summary and Greeks exposure of a strategy.

    Raises:
        DegenerateInputError: If the margin requirement is zero
    """
    probability = probability_of_profit(strategy, market_data)
    exposures = aggregate_greeks(strategy.legs)

    return StrategyAnalysis(
        probability_of_profit=probability,
        expected_value=expected_value(strategy, probability),
        max_return_on_capital=max_return_on_capital(strategy),
        risk_reward_ratio=risk_reward_ratio(strategy),
        delta_exposure=exposures.total_delta,
        gamma_exposure=exposures.total_gamma,
        theta_exposure=exposures.total_theta,
        vega_exposure=exposures.total_vega,
        rho_exposure=exposures.total_rho,
        time_decay_exposure=exposures.total_theta,
        volatility_exposure=exposures.total_vega,
    )
