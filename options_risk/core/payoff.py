"""
Payoff-at-expiration model for multi-leg strategies.

Model boundary: option values are intrinsic values at expiration. No time
value is modeled, so the profit/loss reported for a price before expiry is
what the position would be worth if the underlying settled at that price
on the expiration date. This is intentional, not a mark-to-market.

Formulas (per share, M = 100 shares per contract):
    call value      max(0, S - K)
    put value       max(0, K - S)
    profit/loss     Σ sign × (value - premium) × quantity × M
    shares          (S - entry) × shares, for strategies holding stock

Because the payoff is piecewise linear in S with kinks only at strikes, its
extremes and zero crossings can be found exactly from the values at the
strikes and the slope beyond the highest strike.
"""

from decimal import Decimal
from typing import List, Optional, Sequence

from options_risk.utils.constants import CONTRACT_MULTIPLIER, MONEY_QUANTUM, PRICE_QUANTUM
from options_risk.utils.types import OptionLeg, PayoffSummary, StockPosition, to_decimal

UNLIMITED = Decimal("Infinity")
ZERO = Decimal("0")


def value_at_expiry(price, leg: OptionLeg) -> Decimal:
    """
    Intrinsic value of one option at the given underlying price.

    Args:
        price: Underlying price at expiration
        leg: Option leg

    Returns:
        Non-negative value per share

    Examples:
        >>> from datetime import date
        >>> call = OptionLeg("call", "long", 100, 5, 1, date(2030, 1, 1))
        >>> value_at_expiry(120, call)
        Decimal('20')
        >>> value_at_expiry(80, call)
        Decimal('0')
    """
    price = to_decimal(price)
    if leg.kind == "call":
        return max(ZERO, price - leg.strike)
    else:  # put
        return max(ZERO, leg.strike - price)


def profit_loss(price, legs: Sequence[OptionLeg], stock: Optional[StockPosition] = None) -> Decimal:
    """
    Aggregate expiration profit/loss of a strategy at one underlying price.

    Args:
        price: Underlying price at expiration
        legs: Strategy legs
        stock: Shares held with the legs, if any

    Returns:
        Signed profit (positive) or loss (negative) in currency units

    Example:
        >>> from datetime import date
        >>> call = OptionLeg("call", "long", 100, 5, 1, date(2030, 1, 1))
        >>> profit_loss(120, [call])
        Decimal('1500')
    """
    price = to_decimal(price)
    total = ZERO
    for leg in legs:
        total += leg.sign * (value_at_expiry(price, leg) - leg.premium) * leg.quantity * CONTRACT_MULTIPLIER
    if stock is not None:
        total += (price - stock.entry_price) * stock.shares
    return total


def _terminal_slope(legs: Sequence[OptionLeg], stock: Optional[StockPosition] = None) -> int:
    """Change in profit/loss per $1 of underlying above the highest strike."""
    slope = sum(leg.sign * leg.quantity * CONTRACT_MULTIPLIER for leg in legs if leg.kind == "call")
    if stock is not None:
        slope += stock.shares
    return slope


def _kinks(legs: Sequence[OptionLeg]) -> List[Decimal]:
    return sorted({ZERO} | {leg.strike for leg in legs})


def _round_money(amount: Decimal) -> Decimal:
    if amount.is_infinite():
        return amount
    return amount.quantize(MONEY_QUANTUM)


def max_profit(legs: Sequence[OptionLeg], stock: Optional[StockPosition] = None) -> Decimal:
    """Largest expiration profit, or ``Decimal("Infinity")`` when unbounded."""
    if _terminal_slope(legs, stock) > 0:
        return UNLIMITED
    return _round_money(max(profit_loss(k, legs, stock) for k in _kinks(legs)))


def max_loss(legs: Sequence[OptionLeg], stock: Optional[StockPosition] = None) -> Decimal:
    """Largest expiration loss as a negative amount, or ``-Infinity`` when unbounded."""
    if _terminal_slope(legs, stock) < 0:
        return -UNLIMITED
    return _round_money(min(profit_loss(k, legs, stock) for k in _kinks(legs)))


def break_even_points(legs: Sequence[OptionLeg], stock: Optional[StockPosition] = None) -> tuple:
    """
    Underlying prices at which the expiration profit/loss is zero.

    Each linear segment between consecutive kinks is checked for a sign
    change and its root located by linear interpolation; the open segment
    above the highest strike is extended with the terminal slope.

    Returns:
        Sorted tuple of distinct prices rounded to 4 decimals
    """
    if not legs and stock is None:
        return ()

    kinks = _kinks(legs)
    values = [profit_loss(k, legs, stock) for k in kinks]
    roots = set()

    for (a, pa), (b, pb) in zip(zip(kinks, values), zip(kinks[1:], values[1:])):
        if pa == 0:
            roots.add(a)
        elif pa * pb < 0:
            roots.add(a + (b - a) * (-pa) / (pb - pa))

    last, p_last = kinks[-1], values[-1]
    slope = _terminal_slope(legs, stock)
    if p_last == 0:
        roots.add(last)
    elif slope != 0 and p_last * slope < 0:
        roots.add(last - p_last / slope)

    return tuple(sorted({root.quantize(PRICE_QUANTUM) for root in roots}))


def summarize_payoff(legs: Sequence[OptionLeg], stock: Optional[StockPosition] = None) -> PayoffSummary:
    """
    Max profit, max loss and break-even points of the expiration payoff.

    Args:
        legs: Strategy legs
        stock: Shares held with the legs (covered calls, protective puts)
    """
    return PayoffSummary(
        max_profit=max_profit(legs, stock),
        max_loss=max_loss(legs, stock),
        break_even_points=break_even_points(legs, stock),
    )
