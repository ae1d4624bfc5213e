"""
JSON document codec for evaluation requests and results.

Documents use camelCase keys. Monetary amounts and percents are encoded
as decimal strings (``"1000.00"``, ``"Infinity"``) so that they survive a
round trip exactly; Greeks and probabilities are JSON numbers.
"""

from datetime import date
from typing import Any, Dict, Optional, Tuple

from options_risk.utils.types import (
    GreeksExposure,
    MarketData,
    OptionLeg,
    ProfitLossPoint,
    RiskProfile,
    Strategy,
    StrategyAnalysis,
    StrategyEvaluation,
    to_decimal,
    to_variant,
)

SUMMARY_FIELDS = ("maxLoss", "maxProfit", "breakEvenPoints", "marginRequirement", "returnOnRisk")


def _require(document: Dict[str, Any], key: str, context: str) -> Any:
    try:
        return document[key]
    except KeyError:
        raise ValueError(f"Missing field '{context}{key}'") from None


def _money(value) -> str:
    return str(value)


def _optional_money(value) -> Optional[str]:
    return None if value is None else str(value)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


def leg_from_dict(document: Dict[str, Any], context: str = "") -> OptionLeg:
    expiry = _require(document, "expiry", context)
    return OptionLeg(
        kind=_require(document, "kind", context),
        position=_require(document, "position", context),
        strike=to_decimal(_require(document, "strike", context)),
        premium=to_decimal(_require(document, "premium", context)),
        quantity=_require(document, "quantity", context),
        expiry=date.fromisoformat(expiry) if isinstance(expiry, str) else expiry,
        term=document.get("term", "monthly"),
        implied_volatility=to_decimal(document.get("impliedVolatility", "0")),
        delta=document.get("delta", 0.0),
        gamma=document.get("gamma", 0.0),
        theta=document.get("theta", 0.0),
        vega=document.get("vega", 0.0),
        rho=document.get("rho", 0.0),
    )


def leg_to_dict(leg: OptionLeg) -> Dict[str, Any]:
    return {
        "kind": leg.kind,
        "position": leg.position,
        "strike": _money(leg.strike),
        "premium": _money(leg.premium),
        "quantity": leg.quantity,
        "expiry": leg.expiry.isoformat(),
        "term": leg.term,
        "impliedVolatility": _money(leg.implied_volatility),
        "delta": leg.delta,
        "gamma": leg.gamma,
        "theta": leg.theta,
        "vega": leg.vega,
        "rho": leg.rho,
    }


def strategy_from_dict(document: Dict[str, Any]) -> Strategy:
    """
    Decode a strategy document.

    When any summary field (max loss/profit, break-evens, margin, return on
    risk) is absent or null, the strategy is returned without a summary.
    Nothing is derived here; the evaluation pipeline derives the summary
    once the request has passed validation.
    """
    variant = to_variant(_require(document, "variant", "strategy."))
    legs = tuple(
        leg_from_dict(leg, context=f"strategy.legs[{index}].")
        for index, leg in enumerate(_require(document, "legs", "strategy."))
    )

    if any(document.get(key) is None for key in SUMMARY_FIELDS):
        return Strategy(variant=variant, legs=legs)

    return Strategy(
        variant=variant,
        legs=legs,
        max_loss=to_decimal(document["maxLoss"]),
        max_profit=to_decimal(document["maxProfit"]),
        break_even_points=tuple(to_decimal(p) for p in document["breakEvenPoints"]),
        margin_requirement=to_decimal(document["marginRequirement"]),
        return_on_risk=to_decimal(document["returnOnRisk"]),
    )


def strategy_to_dict(strategy: Strategy) -> Dict[str, Any]:
    return {
        "variant": strategy.variant.value,
        "legs": [leg_to_dict(leg) for leg in strategy.legs],
        "maxLoss": _optional_money(strategy.max_loss),
        "maxProfit": _optional_money(strategy.max_profit),
        "breakEvenPoints": [_money(p) for p in strategy.break_even_points],
        "marginRequirement": _money(strategy.margin_requirement),
        "returnOnRisk": _money(strategy.return_on_risk),
    }


def market_data_from_dict(document: Dict[str, Any]) -> MarketData:
    context = "marketData."
    return MarketData(
        underlying_price=to_decimal(_require(document, "underlyingPrice", context)),
        volatility=to_decimal(_require(document, "volatility", context)),
        risk_free_rate=to_decimal(_require(document, "riskFreeRate", context)),
        days_to_expiration=_require(document, "daysToExpiration", context),
        dividend_yield=to_decimal(document.get("dividendYield", "0")),
    )


def market_data_to_dict(market_data: MarketData) -> Dict[str, Any]:
    return {
        "underlyingPrice": _money(market_data.underlying_price),
        "volatility": _money(market_data.volatility),
        "riskFreeRate": _money(market_data.risk_free_rate),
        "daysToExpiration": market_data.days_to_expiration,
        "dividendYield": _money(market_data.dividend_yield),
    }


def request_from_dict(document: Dict[str, Any]) -> Tuple[str, Any, Strategy, MarketData]:
    """
    Decode an evaluation request document.

    The top-level ``underlyingPrice`` defaults to the market snapshot's
    price. It is kept as entered (not coerced) so the validator can report
    it.

    Returns:
        (symbol, underlying_price, strategy, market_data)
    """
    market_data = market_data_from_dict(_require(document, "marketData", ""))
    underlying_price = document.get("underlyingPrice", market_data.underlying_price)
    strategy = strategy_from_dict(_require(document, "strategy", ""))
    return document.get("symbol", ""), underlying_price, strategy, market_data


def request_to_dict(symbol: str, underlying_price, strategy: Strategy, market_data: MarketData) -> Dict[str, Any]:
    return {
        "symbol": symbol,
        "underlyingPrice": _money(underlying_price),
        "strategy": strategy_to_dict(strategy),
        "marketData": market_data_to_dict(market_data),
    }


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


def point_to_dict(point: ProfitLossPoint) -> Dict[str, Any]:
    return {
        "price": _money(point.price),
        "profitLoss": _money(point.profit_loss),
        "delta": point.delta,
        "gamma": point.gamma,
        "theta": point.theta,
    }


def point_from_dict(document: Dict[str, Any]) -> ProfitLossPoint:
    return ProfitLossPoint(
        price=to_decimal(document["price"]),
        profit_loss=to_decimal(document["profitLoss"]),
        delta=float(document["delta"]),
        gamma=float(document["gamma"]),
        theta=float(document["theta"]),
    )


def risk_profile_to_dict(profile: RiskProfile) -> Dict[str, Any]:
    return {
        "maxLoss": _money(profile.max_loss),
        "maxProfit": _money(profile.max_profit),
        "breakEvenPoints": [_money(p) for p in profile.break_even_points],
        "profitProbability": profile.profit_probability,
        "riskLevel": profile.risk_level,
        "profitPotential": profile.profit_potential,
        "marginRequirement": _money(profile.margin_requirement),
        "returnOnRisk": _money(profile.return_on_risk),
        "profitLossCurve": [point_to_dict(point) for point in profile.profit_loss_curve],
    }


def risk_profile_from_dict(document: Dict[str, Any]) -> RiskProfile:
    probability = document["profitProbability"]
    return RiskProfile(
        max_loss=to_decimal(document["maxLoss"]),
        max_profit=to_decimal(document["maxProfit"]),
        break_even_points=tuple(to_decimal(p) for p in document["breakEvenPoints"]),
        profit_probability=None if probability is None else float(probability),
        risk_level=document["riskLevel"],
        profit_potential=document["profitPotential"],
        margin_requirement=to_decimal(document["marginRequirement"]),
        return_on_risk=to_decimal(document["returnOnRisk"]),
        profit_loss_curve=tuple(point_from_dict(p) for p in document["profitLossCurve"]),
    )


def analysis_to_dict(analysis: StrategyAnalysis) -> Dict[str, Any]:
    return {
        "probabilityOfProfit": analysis.probability_of_profit,
        "expectedValue": _optional_money(analysis.expected_value),
        "maxReturnOnCapital": analysis.max_return_on_capital,
        "riskRewardRatio": analysis.risk_reward_ratio,
        "deltaExposure": analysis.delta_exposure,
        "gammaExposure": analysis.gamma_exposure,
        "thetaExposure": analysis.theta_exposure,
        "vegaExposure": analysis.vega_exposure,
        "rhoExposure": analysis.rho_exposure,
        "timeDecayExposure": analysis.time_decay_exposure,
        "volatilityExposure": analysis.volatility_exposure,
    }


def greeks_to_dict(greeks: GreeksExposure) -> Dict[str, Any]:
    return {
        "totalDelta": greeks.total_delta,
        "totalGamma": greeks.total_gamma,
        "totalTheta": greeks.total_theta,
        "totalVega": greeks.total_vega,
        "totalRho": greeks.total_rho,
        "netDeltaEquivalent": greeks.net_delta_equivalent,
    }


def evaluation_to_dict(evaluation: StrategyEvaluation) -> Dict[str, Any]:
    return {
        "symbol": evaluation.symbol,
        "riskProfile": risk_profile_to_dict(evaluation.risk_profile),
        "analysis": analysis_to_dict(evaluation.analysis),
        "greeks": greeks_to_dict(evaluation.greeks),
    }
