"""
End-to-end evaluation of a strategy request.

Pipeline: validate inputs (fail closed) → derive the payoff summary when the
request carries none → check the variant's leg shape → aggregate Greeks,
compute statistics and build the risk profile. Results can be memoized in a
``CalculationCache`` keyed by the canonical request.
"""

import logging
from datetime import date, datetime
from typing import Optional, Union

from options_risk.core.greeks import aggregate_greeks
from options_risk.core.risk_profile import build_risk_profile
from options_risk.core.serialization import request_to_dict
from options_risk.core.statistics import analyze_strategy
from options_risk.core.strategy import build_strategy
from options_risk.core.structure import check_leg_structure
from options_risk.diagnostics.validation import validate_inputs
from options_risk.utils.cache import CalculationCache, cache_key
from options_risk.utils.exceptions import InputValidationError
from options_risk.utils.types import MarketData, Strategy, StrategyEvaluation

log = logging.getLogger(__name__)


def evaluate_strategy(
    symbol: str,
    underlying_price,
    strategy: Strategy,
    market_data: MarketData,
    today: Optional[Union[date, datetime]] = None,
    cache: Optional[CalculationCache] = None,
    max_workers: Optional[int] = None,
) -> StrategyEvaluation:
    """
    Validate and analyze a strategy.

    Args:
        symbol: Underlying ticker symbol
        underlying_price: Current underlying price as entered
        strategy: Strategy with its legs; a missing payoff summary is derived
        market_data: Market snapshot
        today: Reference date for expiry windows; defaults to the current date
        cache: Optional cache shared between calls
        max_workers: Optional thread count for curve generation

    Returns:
        StrategyEvaluation with risk profile, statistics and Greeks

    Raises:
        InputValidationError: If any input is invalid; nothing is computed
        ConfigurationError: If the legs do not fit the variant's shape
        DegenerateInputError: If the margin requirement is zero
    """
    errors = validate_inputs(symbol, underlying_price, strategy, market_data, today=today)
    if errors:
        log.info("Rejected %s request: %d validation error(s)", strategy.variant.value, len(errors))
        raise InputValidationError(errors)

    if not strategy.has_summary:
        strategy = build_strategy(strategy.variant, strategy.legs, market_data.underlying_price)

    key = None
    if cache is not None:
        key = cache_key(request_to_dict(symbol, underlying_price, strategy, market_data))
        cached = cache.get(key)
        if cached is not None:
            log.info("Cache hit for %s %s", symbol, strategy.variant.value)
            return cached

    check_leg_structure(strategy.variant, strategy.legs)

    log.debug("Evaluating %s %s with %d leg(s)", symbol, strategy.variant.value, len(strategy.legs))
    evaluation = StrategyEvaluation(
        symbol=symbol,
        risk_profile=build_risk_profile(strategy, market_data, max_workers=max_workers),
        analysis=analyze_strategy(strategy, market_data),
        greeks=aggregate_greeks(strategy.legs),
    )

    if cache is not None:
        cache.set(key, evaluation)
    return evaluation
