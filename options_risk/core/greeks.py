"""
Strategy-level Greeks aggregation.

Per-leg Greeks are supplied inputs. The strategy exposure is the
position-signed, quantity-weighted sum over legs:

    total = Σ sign × quantity × greek,    sign = +1 long, -1 short

Sums use ``math.fsum`` which is exactly rounded, so the result does not
depend on the order of the legs.
"""

import math
from typing import Iterable

from options_risk.utils.constants import CONTRACT_MULTIPLIER
from options_risk.utils.types import GreeksExposure, OptionLeg


def _net(legs: Iterable[OptionLeg], greek: str) -> float:
    return math.fsum(leg.sign * leg.quantity * getattr(leg, greek) for leg in legs)


def aggregate_greeks(legs: Iterable[OptionLeg]) -> GreeksExposure:
    """
    Aggregate per-leg Greeks into the strategy's net exposure.

    Args:
        legs: Option legs with their per-contract Greeks

    Returns:
        GreeksExposure with net Delta/Gamma/Theta/Vega/Rho and the share
        equivalent of the net delta

    Example:
        >>> from datetime import date
        >>> leg = OptionLeg("call", "short", 100, 2, 3, date(2030, 1, 1), delta=0.5)
        >>> aggregate_greeks([leg]).total_delta
        -1.5
    """
    legs = tuple(legs)
    total_delta = _net(legs, "delta")

    return GreeksExposure(
        total_delta=total_delta,
        total_gamma=_net(legs, "gamma"),
        total_theta=_net(legs, "theta"),
        total_vega=_net(legs, "vega"),
        total_rho=_net(legs, "rho"),
        net_delta_equivalent=total_delta * CONTRACT_MULTIPLIER,
    )
