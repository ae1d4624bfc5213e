"""Assembly of the read-only ``RiskProfile`` snapshot."""

from typing import Optional

from options_risk.core.catalog import strategy_config
from options_risk.core.curve import profit_loss_curve
from options_risk.core.statistics import probability_of_profit
from options_risk.utils.types import MarketData, RiskProfile, Strategy


def build_risk_profile(
    strategy: Strategy,
    market_data: MarketData,
    max_workers: Optional[int] = None,
) -> RiskProfile:
    """
    Compose catalog classification, probability estimate and P/L curve.

    A new profile is built on every call; profiles are never updated.

    Args:
        strategy: Strategy to profile
        market_data: Market snapshot
        max_workers: Optional thread count for curve generation

    Raises:
        ConfigurationError: If the strategy variant is not in the catalog
    """
    config = strategy_config(strategy.variant)

    return RiskProfile(
        max_loss=strategy.max_loss,
        max_profit=strategy.max_profit,
        break_even_points=strategy.break_even_points,
        profit_probability=probability_of_profit(strategy, market_data),
        risk_level=config.risk_level,
        profit_potential=config.profit_potential,
        margin_requirement=strategy.margin_requirement,
        return_on_risk=strategy.return_on_risk,
        profit_loss_curve=profit_loss_curve(strategy, market_data, max_workers=max_workers),
    )
