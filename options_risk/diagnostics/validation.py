"""
Input validation for strategy evaluation requests.

Every rule is evaluated independently and all violations are returned
together, tagged with the form field they belong to:

- Symbol: required, upper-case letters only
- Underlying price bounds
- Leg count against the variant's limit
- Per leg: strike, premium and quantity bounds; days to expiry within the
  window of the leg's expiry term
- Market data: underlying price, volatility, risk-free rate and dividend
  yield bounds; the market price must match the entered underlying price

Validation is pure. Callers must not run any analysis when the returned
list is non-empty.
"""

import math
import re
from datetime import date, datetime, time
from decimal import Decimal
from typing import List, Optional, Union

from options_risk.core.catalog import strategy_config
from options_risk.utils.constants import ANALYSIS_CONSTANTS, EXPIRY_CONFIG
from options_risk.utils.types import MarketData, Strategy, ValidationError, to_decimal

SYMBOL_PATTERN = re.compile(r"[A-Z]+")
SECONDS_PER_DAY = 24 * 60 * 60


def days_to_expiry(expiry: date, today: Optional[Union[date, datetime]] = None) -> int:
    """
    Calendar days from ``today`` until ``expiry``, rounded up.

    Args:
        expiry: Expiration date
        today: Reference date or timestamp; defaults to the current date

    Returns:
        Whole days, negative for past expirations

    Examples:
        >>> days_to_expiry(date(2026, 11, 20), date(2026, 11, 1))
        19
        >>> days_to_expiry(date(2026, 11, 20), datetime(2026, 11, 1, 12, 0))
        19
    """
    if today is None:
        today = date.today()

    if isinstance(today, datetime):
        remaining = datetime.combine(expiry, time.min, tzinfo=today.tzinfo) - today
        return math.ceil(remaining.total_seconds() / SECONDS_PER_DAY)

    return (expiry - today).days


def _in_range(value, lower, upper) -> bool:
    """False for values outside [lower, upper] and for non-numeric values."""
    try:
        value = to_decimal(value)
    except ValueError:
        return False
    return lower <= value <= upper


def _validate_symbol(symbol: str) -> Optional[ValidationError]:
    if not symbol:
        return ValidationError("underlyingSymbol", "Underlying symbol is required")
    if not SYMBOL_PATTERN.fullmatch(symbol):
        return ValidationError("underlyingSymbol", "Symbol must contain only uppercase letters")
    return None


def _validate_legs(strategy: Strategy, today) -> List[ValidationError]:
    errors = []
    limits = ANALYSIS_CONSTANTS
    config = strategy_config(strategy.variant)

    if not strategy.legs:
        errors.append(ValidationError("strategy", f"{config.name} requires at least one leg"))
    elif len(strategy.legs) > config.max_legs:
        errors.append(
            ValidationError("strategy", f"{config.name} cannot have more than {config.max_legs} legs")
        )

    for index, leg in enumerate(strategy.legs):
        prefix = f"option-{index}"

        if not _in_range(leg.strike, limits["minStrikePrice"], limits["maxStrikePrice"]):
            errors.append(
                ValidationError(
                    f"{prefix}-strike",
                    f"Strike must be between {limits['minStrikePrice']} and {limits['maxStrikePrice']}",
                )
            )

        if not _in_range(leg.premium, limits["minPremium"], limits["maxPremium"]):
            errors.append(
                ValidationError(
                    f"{prefix}-premium",
                    f"Premium must be between {limits['minPremium']} and {limits['maxPremium']}",
                )
            )

        if not limits["minQuantity"] <= leg.quantity <= limits["maxQuantity"]:
            errors.append(
                ValidationError(
                    f"{prefix}-quantity",
                    f"Quantity must be between {limits['minQuantity']} and {limits['maxQuantity']}",
                )
            )

        window = EXPIRY_CONFIG[leg.term]
        days = days_to_expiry(leg.expiry, today)
        if not window["minDays"] <= days <= window["maxDays"]:
            errors.append(
                ValidationError(
                    f"{prefix}-expiry",
                    f"{window['label']} must expire between {window['minDays']} and {window['maxDays']} days",
                )
            )

    return errors


def _validate_market_data(market_data: MarketData) -> List[ValidationError]:
    errors = []
    limits = ANALYSIS_CONSTANTS

    if not _in_range(market_data.underlying_price, limits["minUnderlyingPrice"], limits["maxUnderlyingPrice"]):
        errors.append(
            ValidationError(
                "marketData.underlyingPrice",
                f"Price must be between {limits['minUnderlyingPrice']} and {limits['maxUnderlyingPrice']}",
            )
        )

    if not _in_range(market_data.volatility, limits["minVolatility"], limits["maxVolatility"]):
        errors.append(
            ValidationError(
                "volatility",
                f"Volatility must be between {limits['minVolatility']}% and {limits['maxVolatility']}%",
            )
        )

    if not _in_range(market_data.risk_free_rate, limits["minRiskFreeRate"], limits["maxRiskFreeRate"]):
        errors.append(
            ValidationError(
                "riskFreeRate",
                f"Risk-free rate must be between {limits['minRiskFreeRate']}% and {limits['maxRiskFreeRate']}%",
            )
        )

    if not _in_range(market_data.dividend_yield, limits["minDividendYield"], limits["maxDividendYield"]):
        errors.append(
            ValidationError(
                "dividendYield",
                f"Dividend yield must be between {limits['minDividendYield']}% and {limits['maxDividendYield']}%",
            )
        )

    return errors


def validate_inputs(
    symbol: str,
    underlying_price: Union[Decimal, float, int, str],
    strategy: Strategy,
    market_data: MarketData,
    today: Optional[Union[date, datetime]] = None,
) -> List[ValidationError]:
    """
    Check an evaluation request and collect every violation.

    Args:
        symbol: Underlying ticker symbol
        underlying_price: Current underlying price as entered
        strategy: Strategy with its legs
        market_data: Market snapshot
        today: Reference date for expiry windows; defaults to the current date

    Returns:
        List of ValidationError, empty when the request is valid

    Example:
        >>> errors = validate_inputs("SPY", -5, strategy, market_data)  # doctest: +SKIP
        >>> [e.field for e in errors]  # doctest: +SKIP
        ['underlyingPrice']
    """
    errors: List[ValidationError] = []
    limits = ANALYSIS_CONSTANTS

    symbol_error = _validate_symbol(symbol)
    if symbol_error is not None:
        errors.append(symbol_error)

    price_in_range = _in_range(underlying_price, limits["minUnderlyingPrice"], limits["maxUnderlyingPrice"])
    if not price_in_range:
        errors.append(
            ValidationError(
                "underlyingPrice",
                f"Price must be between {limits['minUnderlyingPrice']} and {limits['maxUnderlyingPrice']}",
            )
        )

    errors.extend(_validate_legs(strategy, today))
    errors.extend(_validate_market_data(market_data))

    market_price = market_data.underlying_price
    if (
        price_in_range
        and _in_range(market_price, limits["minUnderlyingPrice"], limits["maxUnderlyingPrice"])
        and to_decimal(underlying_price) != market_price
    ):
        errors.append(
            ValidationError(
                "marketData.underlyingPrice",
                f"Market price {market_price} does not match underlying price {underlying_price}",
            )
        )

    return errors
