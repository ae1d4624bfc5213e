"""
Data types and structures for options strategy analysis.

This module defines the immutable records exchanged between the engine's
components: option legs, strategies, market snapshots and the derived
risk/reward results. Monetary amounts and percents are carried as
``Decimal``; Greeks and probabilities are plain floats.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Literal, Optional

from options_risk.utils.exceptions import ConfigurationError

OptionKind = Literal["call", "put"]
Position = Literal["long", "short"]
ExpiryTerm = Literal["weekly", "monthly", "quarterly", "leaps"]
RiskLevel = Literal["Low", "Medium", "High"]
ProfitPotential = Literal["Limited", "Unlimited"]

OPTION_KINDS = ("call", "put")
POSITIONS = ("long", "short")
EXPIRY_TERMS = ("weekly", "monthly", "quarterly", "leaps")


class StrategyVariant(str, Enum):
    """Closed set of supported strategy shapes."""

    SINGLE = "single"
    VERTICAL = "vertical"
    IRON_CONDOR = "iron_condor"
    BUTTERFLY = "butterfly"
    STRADDLE = "straddle"
    STRANGLE = "strangle"
    COVERED_CALL = "covered_call"
    PROTECTIVE_PUT = "protective_put"


def to_decimal(value) -> Decimal:
    """
    Coerce a number or numeric string to ``Decimal``.

    Floats go through ``str()`` so that ``0.1`` becomes ``Decimal("0.1")``
    rather than its binary expansion. ``"Infinity"`` and ``"-Infinity"`` are
    accepted as the unlimited profit/loss sentinels.

    Raises:
        ValueError: If the value is not numeric or is NaN
    """
    if isinstance(value, bool):
        raise ValueError(f"Expected a number, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(value)
        except InvalidOperation:
            raise ValueError(f"Expected a number, got {value!r}") from None
    else:
        raise ValueError(f"Expected a number, got {value!r}")

    if result.is_nan():
        raise ValueError("NaN is not a valid amount")
    return result


def to_variant(value) -> StrategyVariant:
    """Resolve a variant name, raising ConfigurationError for unknown names."""
    try:
        return StrategyVariant(value)
    except ValueError:
        raise ConfigurationError(f"Unknown strategy variant: {value!r}") from None


@dataclass(frozen=True)
class OptionLeg:
    """
    One option contract line within a strategy.

    Greeks are supplied per contract by the caller; this engine does not
    derive them from a pricing model.

    Attributes:
        kind: "call" or "put"
        position: "long" or "short"
        strike: Strike price
        premium: Premium per share paid (long) or received (short)
        quantity: Number of contracts
        expiry: Expiration date
        term: Expiry cycle the contract belongs to
        implied_volatility: Implied volatility in whole percent
        delta, gamma, theta, vega, rho: Per-contract sensitivities
    """

    kind: OptionKind
    position: Position
    strike: Decimal
    premium: Decimal
    quantity: int
    expiry: date
    term: ExpiryTerm = "monthly"
    implied_volatility: Decimal = Decimal("0")
    delta: float = 0.0
    gamma: float = 0.0
    theta: float = 0.0
    vega: float = 0.0
    rho: float = 0.0

    def __post_init__(self) -> None:
        """Check enumerated fields and normalize numeric ones."""
        if self.kind not in OPTION_KINDS:
            raise ValueError(f"Option kind must be 'call' or 'put', got {self.kind!r}")
        if self.position not in POSITIONS:
            raise ValueError(f"Position must be 'long' or 'short', got {self.position!r}")
        if self.term not in EXPIRY_TERMS:
            raise ValueError(f"Unknown expiry term {self.term!r}")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError(f"Quantity must be an integer, got {self.quantity!r}")
        if not isinstance(self.expiry, date):
            raise ValueError(f"Expiry must be a date, got {self.expiry!r}")

        object.__setattr__(self, "strike", to_decimal(self.strike))
        object.__setattr__(self, "premium", to_decimal(self.premium))
        object.__setattr__(self, "implied_volatility", to_decimal(self.implied_volatility))
        for greek in ("delta", "gamma", "theta", "vega", "rho"):
            object.__setattr__(self, greek, float(getattr(self, greek)))

    @property
    def sign(self) -> int:
        """+1 for long legs, -1 for short legs."""
        return 1 if self.position == "long" else -1


@dataclass(frozen=True)
class StockPosition:
    """
    Shares held alongside the option legs.

    Covered calls and protective puts imply 100 shares per contract,
    bought at the current underlying price.
    """

    shares: int
    entry_price: Decimal

    def __post_init__(self) -> None:
        if isinstance(self.shares, bool) or not isinstance(self.shares, int):
            raise ValueError(f"Shares must be an integer, got {self.shares!r}")
        object.__setattr__(self, "entry_price", to_decimal(self.entry_price))


@dataclass(frozen=True)
class Strategy:
    """
    A multi-leg strategy together with its payoff summary.

    ``max_profit`` may be ``Decimal("Infinity")`` for unlimited-profit
    shapes and ``max_loss`` may be ``Decimal("-Infinity")`` for unlimited
    risk. Losses are negative amounts.

    A strategy decoded without a summary has ``max_loss`` and
    ``max_profit`` set to None until ``build_strategy`` derives them.
    """

    variant: StrategyVariant
    legs: tuple
    max_loss: Optional[Decimal] = None
    max_profit: Optional[Decimal] = None
    break_even_points: tuple = ()
    margin_requirement: Decimal = Decimal("0")
    return_on_risk: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        object.__setattr__(self, "variant", to_variant(self.variant))
        object.__setattr__(self, "legs", tuple(self.legs))
        if self.max_loss is not None:
            object.__setattr__(self, "max_loss", to_decimal(self.max_loss))
        if self.max_profit is not None:
            object.__setattr__(self, "max_profit", to_decimal(self.max_profit))
        object.__setattr__(
            self, "break_even_points", tuple(to_decimal(p) for p in self.break_even_points)
        )
        object.__setattr__(self, "margin_requirement", to_decimal(self.margin_requirement))
        object.__setattr__(self, "return_on_risk", to_decimal(self.return_on_risk))

    @property
    def has_summary(self) -> bool:
        """True once max profit and max loss are known."""
        return self.max_loss is not None and self.max_profit is not None


@dataclass(frozen=True)
class MarketData:
    """
    Market snapshot the strategy is evaluated against.

    Attributes:
        underlying_price: Current price of the underlying
        volatility: Annualized volatility in whole percent (25 = 25%)
        risk_free_rate: Risk-free rate in whole percent
        days_to_expiration: Calendar days until expiration
        dividend_yield: Dividend yield in whole percent
    """

    underlying_price: Decimal
    volatility: Decimal
    risk_free_rate: Decimal
    days_to_expiration: int
    dividend_yield: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        if isinstance(self.days_to_expiration, bool) or not isinstance(self.days_to_expiration, int):
            raise ValueError(
                f"Days to expiration must be an integer, got {self.days_to_expiration!r}"
            )
        if self.days_to_expiration < 0:
            raise ValueError(
                f"Days to expiration must be non-negative, got {self.days_to_expiration}"
            )
        object.__setattr__(self, "underlying_price", to_decimal(self.underlying_price))
        object.__setattr__(self, "volatility", to_decimal(self.volatility))
        object.__setattr__(self, "risk_free_rate", to_decimal(self.risk_free_rate))
        object.__setattr__(self, "dividend_yield", to_decimal(self.dividend_yield))


@dataclass(frozen=True)
class GreeksExposure:
    """
    Net Greeks of a strategy.

    Attributes:
        total_delta, total_gamma, total_theta, total_vega, total_rho:
            Position-signed, quantity-weighted sums over all legs
        net_delta_equivalent: Delta expressed in shares (total_delta × 100)
    """

    total_delta: float
    total_gamma: float
    total_theta: float
    total_vega: float
    total_rho: float
    net_delta_equivalent: float


@dataclass(frozen=True)
class ProfitLossPoint:
    """Strategy profit/loss and Greeks snapshot at one grid price."""

    price: Decimal
    profit_loss: Decimal
    delta: float
    gamma: float
    theta: float


@dataclass(frozen=True)
class PayoffSummary:
    """Extremes and zero crossings of a strategy's expiration payoff."""

    max_profit: Decimal
    max_loss: Decimal
    break_even_points: tuple


@dataclass(frozen=True)
class RiskProfile:
    """
    Read-only risk/reward snapshot of one analysis call.

    ``profit_probability`` is None when no estimate is available (no
    finite break-even point, or zero time/volatility).
    """

    max_loss: Decimal
    max_profit: Decimal
    break_even_points: tuple
    profit_probability: Optional[float]
    risk_level: RiskLevel
    profit_potential: ProfitPotential
    margin_requirement: Decimal
    return_on_risk: Decimal
    profit_loss_curve: tuple = field(default_factory=tuple)


@dataclass(frozen=True)
class StrategyAnalysis:
    """
    Statistical summary of a strategy.

    Fields that cannot be computed for the given input (for example the
    expected value of an unlimited-profit strategy) are None.
    """

    probability_of_profit: Optional[float]
    expected_value: Optional[Decimal]
    max_return_on_capital: Optional[float]
    risk_reward_ratio: Optional[float]
    delta_exposure: float
    gamma_exposure: float
    theta_exposure: float
    vega_exposure: float
    rho_exposure: float
    time_decay_exposure: float
    volatility_exposure: float


@dataclass(frozen=True)
class StrategyEvaluation:
    """Everything one evaluation request produces."""

    symbol: str
    risk_profile: RiskProfile
    analysis: StrategyAnalysis
    greeks: GreeksExposure


@dataclass(frozen=True)
class ValidationError:
    """
    A single field-tagged input problem.

    This is a record, not an exception; the validator returns a list of
    them so that all problems are reported at once.
    """

    field: str
    message: str
