"""
Strategy catalog: per-variant limits, margin rules and risk classification.

The set of variants is closed. Each entry of ``STRATEGY_CONFIG`` names the
variant, caps its leg count, classifies its risk and profit potential and
carries the broker margin formula for that shape. Adding a variant means
adding one entry here; no other module branches on the variant except to
look up this table.

Margin conventions (all amounts for ``quantity`` contracts of 100 shares):
    single          long: premium paid; short: premium + 20% of underlying
    vertical        |strike0 - strike1|
    iron_condor     max(put spread width, call spread width)
    butterfly       long wings: net debit; short wings: widest wing
    straddle        all long: premiums paid; otherwise largest naked short
    strangle          requirement plus premiums of the other legs
    covered_call    underlying - premium received (share purchase)
    protective_put  underlying + premium paid (share purchase)
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, Optional, Sequence

from options_risk.core.structure import check_leg_structure
from options_risk.utils.constants import (
    CONTRACT_MULTIPLIER,
    MONEY_QUANTUM,
    NAKED_SHORT_UNDERLYING_RATE,
)
from options_risk.utils.exceptions import ConfigurationError
from options_risk.utils.types import (
    OptionLeg,
    ProfitPotential,
    RiskLevel,
    StockPosition,
    StrategyVariant,
    to_decimal,
    to_variant,
)

MarginFormula = Callable[[Sequence[OptionLeg], Decimal], Decimal]


@dataclass(frozen=True)
class StrategyConfig:
    """Static description of one strategy variant."""

    name: str
    description: str
    max_legs: int
    margin_formula: MarginFormula
    risk_level: RiskLevel
    profit_potential: ProfitPotential
    implied_shares: bool = False


def _premium_cost(leg: OptionLeg) -> Decimal:
    return leg.premium * leg.quantity * CONTRACT_MULTIPLIER


def _naked_short_requirement(leg: OptionLeg, underlying_price: Decimal) -> Decimal:
    return (leg.premium + NAKED_SHORT_UNDERLYING_RATE * underlying_price) * leg.quantity * CONTRACT_MULTIPLIER


def single_margin(legs: Sequence[OptionLeg], underlying_price: Decimal) -> Decimal:
    leg = legs[0]
    if leg.position == "long":
        return _premium_cost(leg)
    return _naked_short_requirement(leg, underlying_price)


def vertical_margin(legs: Sequence[OptionLeg], underlying_price: Decimal) -> Decimal:
    width = abs(legs[0].strike - legs[1].strike)
    return width * legs[0].quantity * CONTRACT_MULTIPLIER


def iron_condor_margin(legs: Sequence[OptionLeg], underlying_price: Decimal) -> Decimal:
    # Legs are ordered put, put, call, call
    put_width = abs(legs[0].strike - legs[1].strike)
    call_width = abs(legs[2].strike - legs[3].strike)
    return max(put_width, call_width) * legs[0].quantity * CONTRACT_MULTIPLIER


def butterfly_margin(legs: Sequence[OptionLeg], underlying_price: Decimal) -> Decimal:
    lower, body, upper = legs
    if lower.position == "long":
        net_debit = sum(leg.sign * _premium_cost(leg) for leg in legs)
        return max(net_debit, Decimal("0"))

    wing = max(body.strike - lower.strike, upper.strike - body.strike)
    return wing * lower.quantity * CONTRACT_MULTIPLIER


def volatility_pair_margin(legs: Sequence[OptionLeg], underlying_price: Decimal) -> Decimal:
    """Margin for straddles and strangles."""
    shorts = [leg for leg in legs if leg.position == "short"]
    if not shorts:
        return sum(_premium_cost(leg) for leg in legs)

    largest = max(shorts, key=lambda leg: _naked_short_requirement(leg, underlying_price))
    others = sum(_premium_cost(leg) for leg in legs if leg is not largest)
    return _naked_short_requirement(largest, underlying_price) + others


def covered_call_margin(legs: Sequence[OptionLeg], underlying_price: Decimal) -> Decimal:
    leg = legs[0]
    return (underlying_price - leg.premium) * leg.quantity * CONTRACT_MULTIPLIER


def protective_put_margin(legs: Sequence[OptionLeg], underlying_price: Decimal) -> Decimal:
    leg = legs[0]
    return (underlying_price + leg.premium) * leg.quantity * CONTRACT_MULTIPLIER


STRATEGY_CONFIG: Dict[StrategyVariant, StrategyConfig] = {
    StrategyVariant.SINGLE: StrategyConfig(
        name="Single Option",
        description="One long or short call or put",
        max_legs=1,
        margin_formula=single_margin,
        risk_level="High",
        profit_potential="Unlimited",
    ),
    StrategyVariant.VERTICAL: StrategyConfig(
        name="Vertical Spread",
        description="Long and short option of the same type at different strikes",
        max_legs=2,
        margin_formula=vertical_margin,
        risk_level="Medium",
        profit_potential="Limited",
    ),
    StrategyVariant.IRON_CONDOR: StrategyConfig(
        name="Iron Condor",
        description="Put spread below and call spread above the market, same expiry",
        max_legs=4,
        margin_formula=iron_condor_margin,
        risk_level="Medium",
        profit_potential="Limited",
    ),
    StrategyVariant.BUTTERFLY: StrategyConfig(
        name="Butterfly Spread",
        description="1:-2:1 position in one option type around a center strike",
        max_legs=3,
        margin_formula=butterfly_margin,
        risk_level="Low",
        profit_potential="Limited",
    ),
    StrategyVariant.STRADDLE: StrategyConfig(
        name="Straddle",
        description="Call and put at the same strike",
        max_legs=2,
        margin_formula=volatility_pair_margin,
        risk_level="High",
        profit_potential="Unlimited",
    ),
    StrategyVariant.STRANGLE: StrategyConfig(
        name="Strangle",
        description="Out-of-the-money call and put at different strikes",
        max_legs=2,
        margin_formula=volatility_pair_margin,
        risk_level="High",
        profit_potential="Unlimited",
    ),
    StrategyVariant.COVERED_CALL: StrategyConfig(
        name="Covered Call",
        description="Short call written against 100 shares per contract",
        max_legs=1,
        margin_formula=covered_call_margin,
        risk_level="Low",
        profit_potential="Limited",
        implied_shares=True,
    ),
    StrategyVariant.PROTECTIVE_PUT: StrategyConfig(
        name="Protective Put",
        description="Long put bought against 100 shares per contract",
        max_legs=1,
        margin_formula=protective_put_margin,
        risk_level="Low",
        profit_potential="Unlimited",
        implied_shares=True,
    ),
}


def strategy_config(variant) -> StrategyConfig:
    """
    Look up the catalog entry for a variant.

    Args:
        variant: ``StrategyVariant`` or its string value

    Raises:
        ConfigurationError: If the variant is not in the catalog
    """
    resolved = to_variant(variant)
    try:
        return STRATEGY_CONFIG[resolved]
    except KeyError:
        raise ConfigurationError(f"No catalog entry for {resolved.value!r}") from None


def margin_requirement(variant, legs: Sequence[OptionLeg], underlying_price) -> Decimal:
    """
    Compute the broker margin requirement of a strategy.

    Args:
        variant: Strategy variant
        legs: Legs in the variant's fixed order
        underlying_price: Current underlying price

    Returns:
        Margin in currency units, rounded to cents

    Raises:
        ConfigurationError: If the legs do not fit the variant's shape
    """
    config = strategy_config(variant)
    check_leg_structure(variant, legs)
    amount = config.margin_formula(legs, to_decimal(underlying_price))
    return to_decimal(amount).quantize(MONEY_QUANTUM)


def implied_stock(variant, legs: Sequence[OptionLeg], underlying_price) -> Optional[StockPosition]:
    """
    Shares implied by a stock-holding variant, bought at the current price.

    Returns:
        StockPosition of 100 shares per contract, or None for pure option
        strategies
    """
    if not strategy_config(variant).implied_shares:
        return None
    shares = sum(leg.quantity for leg in legs) * CONTRACT_MULTIPLIER
    return StockPosition(shares=shares, entry_price=to_decimal(underlying_price))
