"""
Structural leg-shape rules shared by the catalog and the evaluation pipeline.

Each rule returns None when the legs fit the variant's fixed shape, or a
message describing the first mismatch. Margin formulas index legs by
position, so a mismatch is a programming error in the caller rather than
a user input problem.
"""

from typing import Callable, Dict, Optional, Sequence

from options_risk.utils.exceptions import ConfigurationError
from options_risk.utils.types import OptionLeg, StrategyVariant, to_variant

Rule = Callable[[Sequence[OptionLeg]], Optional[str]]


def _same_expiry(legs: Sequence[OptionLeg]) -> bool:
    return len({leg.expiry for leg in legs}) == 1


def validate_single(legs: Sequence[OptionLeg]) -> Optional[str]:
    """SINGLE: exactly 1 leg."""
    if len(legs) != 1:
        return f"single requires exactly 1 leg, got {len(legs)}"
    return None


def validate_vertical(legs: Sequence[OptionLeg]) -> Optional[str]:
    """VERTICAL: 2 legs, same type and expiry, different strikes."""
    if len(legs) != 2:
        return f"vertical requires exactly 2 legs, got {len(legs)}"
    l0, l1 = legs
    if l0.kind != l1.kind:
        return "vertical requires both legs of the same option type"
    if l0.strike == l1.strike:
        return "vertical requires different strikes"
    if not _same_expiry(legs):
        return "vertical requires a common expiry"
    return None


def validate_iron_condor(legs: Sequence[OptionLeg]) -> Optional[str]:
    """IRON_CONDOR: 4 legs ordered put, put, call, call; one expiry."""
    if len(legs) != 4:
        return f"iron_condor requires exactly 4 legs, got {len(legs)}"
    kinds = [leg.kind for leg in legs]
    if kinds != ["put", "put", "call", "call"]:
        return f"iron_condor legs must be ordered put, put, call, call; got {', '.join(kinds)}"
    if legs[0].strike == legs[1].strike:
        return "iron_condor put spread requires different strikes"
    if legs[2].strike == legs[3].strike:
        return "iron_condor call spread requires different strikes"
    if not _same_expiry(legs):
        return "iron_condor requires a common expiry"
    return None


def validate_butterfly(legs: Sequence[OptionLeg]) -> Optional[str]:
    """BUTTERFLY: 3 legs of one type, ascending strikes, wings opposite the body."""
    if len(legs) != 3:
        return f"butterfly requires exactly 3 legs, got {len(legs)}"
    lower, body, upper = legs
    if len({leg.kind for leg in legs}) != 1:
        return "butterfly requires all legs of the same option type"
    if not lower.strike < body.strike < upper.strike:
        return "butterfly strikes must be strictly ascending"
    if lower.position != upper.position or body.position == lower.position:
        return "butterfly wings must share a position opposite the body"
    if not _same_expiry(legs):
        return "butterfly requires a common expiry"
    return None


def _validate_call_put_pair(legs: Sequence[OptionLeg], name: str) -> Optional[str]:
    if len(legs) != 2:
        return f"{name} requires exactly 2 legs, got {len(legs)}"
    if {leg.kind for leg in legs} != {"call", "put"}:
        return f"{name} requires one call and one put"
    if not _same_expiry(legs):
        return f"{name} requires a common expiry"
    return None


def validate_straddle(legs: Sequence[OptionLeg]) -> Optional[str]:
    """STRADDLE: one call and one put, same strike and expiry."""
    problem = _validate_call_put_pair(legs, "straddle")
    if problem is None and legs[0].strike != legs[1].strike:
        return "straddle requires both legs at the same strike"
    return problem


def validate_strangle(legs: Sequence[OptionLeg]) -> Optional[str]:
    """STRANGLE: one call and one put, different strikes, same expiry."""
    problem = _validate_call_put_pair(legs, "strangle")
    if problem is None and legs[0].strike == legs[1].strike:
        return "strangle requires different strikes"
    return problem


def validate_covered_call(legs: Sequence[OptionLeg]) -> Optional[str]:
    """COVERED_CALL: a single short call (shares are implicit)."""
    if len(legs) != 1:
        return f"covered_call requires exactly 1 leg, got {len(legs)}"
    if legs[0].kind != "call" or legs[0].position != "short":
        return "covered_call leg must be a short call"
    return None


def validate_protective_put(legs: Sequence[OptionLeg]) -> Optional[str]:
    """PROTECTIVE_PUT: a single long put (shares are implicit)."""
    if len(legs) != 1:
        return f"protective_put requires exactly 1 leg, got {len(legs)}"
    if legs[0].kind != "put" or legs[0].position != "long":
        return "protective_put leg must be a long put"
    return None


STRUCTURE_RULES: Dict[StrategyVariant, Rule] = {
    StrategyVariant.SINGLE: validate_single,
    StrategyVariant.VERTICAL: validate_vertical,
    StrategyVariant.IRON_CONDOR: validate_iron_condor,
    StrategyVariant.BUTTERFLY: validate_butterfly,
    StrategyVariant.STRADDLE: validate_straddle,
    StrategyVariant.STRANGLE: validate_strangle,
    StrategyVariant.COVERED_CALL: validate_covered_call,
    StrategyVariant.PROTECTIVE_PUT: validate_protective_put,
}


def check_leg_structure(variant, legs: Sequence[OptionLeg]) -> None:
    """
    Assert that the legs fit the variant's fixed shape.

    Raises:
        ConfigurationError: If the variant is unknown or the legs do not fit
    """
    resolved = to_variant(variant)
    problem = STRUCTURE_RULES[resolved](legs)
    if problem is not None:
        raise ConfigurationError(problem)
