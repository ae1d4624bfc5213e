"""
Profit/loss curve across a volatility-scaled price range.

The grid spans ±3 standard deviations around the current price, where the
standard deviation is taken as ``price × volatility`` (one year of
volatility, not scaled by time to expiration), floored at $0.01:

    σ = S × vol / 100
    grid = linspace(max(0.01, S - 3σ), S + 3σ, 101)

Covered calls and protective puts include their implied shares, bought at
the current price.

Known approximation: the Greeks attached to each point are the strategy's
static input Greeks. They do not vary with the grid price because no
pricing model is run.
"""

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from typing import Optional

import pandas as pd

from options_risk.core.catalog import implied_stock
from options_risk.core.greeks import aggregate_greeks
from options_risk.core.payoff import profit_loss
from options_risk.utils.constants import CURVE_STD_DEVIATIONS, CURVE_STEPS, MIN_CURVE_PRICE
from options_risk.utils.types import MarketData, ProfitLossPoint, Strategy, to_decimal


def price_grid(underlying_price, volatility) -> tuple:
    """
    Equally spaced prices for the profit/loss curve.

    Computed in ``Decimal`` so that the first point is exactly the lower
    bound and the last exactly the upper bound.

    Args:
        underlying_price: Current underlying price
        volatility: Annualized volatility in whole percent

    Returns:
        Tuple of ``CURVE_STEPS + 1`` ascending prices
    """
    price = to_decimal(underlying_price)
    std_dev = price * to_decimal(volatility) / 100

    min_price = max(MIN_CURVE_PRICE, price - CURVE_STD_DEVIATIONS * std_dev)
    max_price = price + CURVE_STD_DEVIATIONS * std_dev
    step = (max_price - min_price) / CURVE_STEPS

    grid = [min_price + i * step for i in range(CURVE_STEPS)]
    grid.append(max_price)
    return tuple(grid)


def profit_loss_curve(
    strategy: Strategy,
    market_data: MarketData,
    max_workers: Optional[int] = None,
) -> tuple:
    """
    Evaluate the strategy's expiration profit/loss at every grid price.

    Points are independent of each other; with ``max_workers`` > 1 they are
    computed on a thread pool. Results are always returned in grid order.

    Args:
        strategy: Strategy to evaluate
        market_data: Market snapshot (price and volatility set the grid)
        max_workers: Optional thread count for parallel evaluation

    Returns:
        Tuple of 101 ProfitLossPoint, point i at grid price i
    """
    grid = price_grid(market_data.underlying_price, market_data.volatility)
    # Static per-leg Greeks: the snapshot is the same at every grid price
    greeks = aggregate_greeks(strategy.legs)
    stock = implied_stock(strategy.variant, strategy.legs, market_data.underlying_price)

    def evaluate(price: Decimal) -> ProfitLossPoint:
        return ProfitLossPoint(
            price=price,
            profit_loss=profit_loss(price, strategy.legs, stock),
            delta=greeks.total_delta,
            gamma=greeks.total_gamma,
            theta=greeks.total_theta,
        )

    if max_workers is not None and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            return tuple(pool.map(evaluate, grid))

    return tuple(evaluate(price) for price in grid)


def curve_frame(curve) -> pd.DataFrame:
    """
    Tabulate a profit/loss curve for export.

    Args:
        curve: Sequence of ProfitLossPoint

    Returns:
        DataFrame with columns price, profit_loss, delta, gamma, theta
    """
    return pd.DataFrame(
        {
            "price": [float(point.price) for point in curve],
            "profit_loss": [float(point.profit_loss) for point in curve],
            "delta": [point.delta for point in curve],
            "gamma": [point.gamma for point in curve],
            "theta": [point.theta for point in curve],
        },
        columns=["price", "profit_loss", "delta", "gamma", "theta"],
    )
