"""Construction of a ``Strategy`` whose summary is derived from its legs."""

from decimal import Decimal
from typing import Sequence

from options_risk.core.catalog import implied_stock, margin_requirement
from options_risk.core.payoff import summarize_payoff
from options_risk.utils.constants import PERCENT_QUANTUM
from options_risk.utils.types import OptionLeg, Strategy, to_variant


def return_on_risk(max_profit: Decimal, max_loss: Decimal) -> Decimal:
    """
    Max profit as a percent of max loss.

    Unlimited profit or a riskless position gives ``Infinity``; unlimited
    risk with bounded profit gives 0.
    """
    if max_profit.is_infinite() or max_loss == 0:
        return Decimal("Infinity")
    if max_loss.is_infinite():
        return Decimal("0")
    return (max_profit / abs(max_loss) * 100).quantize(PERCENT_QUANTUM)


def build_strategy(variant, legs: Sequence[OptionLeg], underlying_price) -> Strategy:
    """
    Build a strategy, deriving max profit/loss, break-evens and margin.

    Covered calls and protective puts include their implied shares, bought
    at ``underlying_price``, in the payoff summary.

    Args:
        variant: Strategy variant
        legs: Legs in the variant's fixed order
        underlying_price: Current underlying price (margin rules and share entry)

    Raises:
        ConfigurationError: If the legs do not fit the variant's shape
    """
    variant = to_variant(variant)
    legs = tuple(legs)
    summary = summarize_payoff(legs, implied_stock(variant, legs, underlying_price))

    return Strategy(
        variant=variant,
        legs=legs,
        max_loss=summary.max_loss,
        max_profit=summary.max_profit,
        break_even_points=summary.break_even_points,
        margin_requirement=margin_requirement(variant, legs, underlying_price),
        return_on_risk=return_on_risk(summary.max_profit, summary.max_loss),
    )
