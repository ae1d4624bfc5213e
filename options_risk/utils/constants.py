"""
Numerical constants, input bounds and model parameters for strategy analysis.

This module is the single configuration surface of the engine. Input
bounds mirror the limits enforced on the strategy entry form; model
parameters describe the simplified payoff-at-expiration model.
"""

from decimal import Decimal

# Contract conventions
CONTRACT_MULTIPLIER = 100  # One option contract covers 100 shares
DAYS_PER_YEAR = 365

# Decimal quantization
MONEY_QUANTUM = Decimal("0.01")
PRICE_QUANTUM = Decimal("0.0001")
PERCENT_QUANTUM = Decimal("0.01")

# Input bounds enforced by the validator (percents are whole percents)
ANALYSIS_CONSTANTS = {
    "minUnderlyingPrice": Decimal("0.01"),
    "maxUnderlyingPrice": Decimal("10000"),
    "minStrikePrice": Decimal("0.01"),
    "maxStrikePrice": Decimal("10000"),
    "minPremium": Decimal("0.01"),
    "maxPremium": Decimal("1000"),
    "minQuantity": 1,
    "maxQuantity": 100,
    "minVolatility": Decimal("1"),
    "maxVolatility": Decimal("200"),
    "minRiskFreeRate": Decimal("0"),
    "maxRiskFreeRate": Decimal("20"),
    "minDividendYield": Decimal("0"),
    "maxDividendYield": Decimal("20"),
}

# Expiry windows per term, in calendar days (inclusive)
EXPIRY_CONFIG = {
    "weekly": {"label": "Weekly options", "minDays": 1, "maxDays": 7},
    "monthly": {"label": "Monthly options", "minDays": 8, "maxDays": 45},
    "quarterly": {"label": "Quarterly options", "minDays": 46, "maxDays": 180},
    "leaps": {"label": "LEAPS", "minDays": 181, "maxDays": 730},
}

# Profit/loss curve
CURVE_STEPS = 100  # 101 inclusive grid points
CURVE_STD_DEVIATIONS = 3  # Grid spans ±3σ around the current price
MIN_CURVE_PRICE = Decimal("0.01")

# Margin
NAKED_SHORT_UNDERLYING_RATE = Decimal("0.20")  # 20% of underlying for uncovered shorts

# Zelen–Severo approximation of the standard normal CDF
ZS_PDF_SCALE = 0.3989423  # 1/√(2π)
ZS_T_SCALE = 0.2316419
ZS_COEFFICIENTS = (0.3193815, -0.3565638, 1.781478, -1.821256, 1.330274)

# Normal distribution bounds
MAX_STANDARD_DEVIATIONS = 8.0  # Beyond ±8σ, CDF is effectively 0 or 1

# Cache parameters
DEFAULT_CACHE_SIZE = 100
DEFAULT_CACHE_TTL = 300  # 5 minutes in seconds
