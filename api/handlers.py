"""
Request handlers for the fund analytics endpoints.

Framework-agnostic: each handler takes a decoded JSON payload and returns a
JSON-ready envelope. Successful calls return ``{"success": True, "data": ...}``;
failures return ``{"success": False, "error": ..., "status": <http status>}``.
"""

from __future__ import annotations
from typing import Dict, Any, List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from models.fund import FundRecord
from models.portfolio import FundHolding
from models.preferences import UserPreferences
from operation.logging import get_logger, set_correlation_id, setup_logging_from_env
from utils.data.fund_provider import FundDataProvider
from utils.errors import FundAnalyticsError, PortfolioValidationError
from utils.recommendation.config import DEFAULT_LIMIT
from utils.recommendation.smart_recommender import SmartFundRecommender
from utils.risk.portfolio_risk import PortfolioRiskAnalyzer, validate_holdings, summarize_risk
from utils.scoring.multi_factor import MultiFactorScorer

load_dotenv()
setup_logging_from_env()

logger = get_logger(__name__)

REQUIRED_PREFERENCES = ("riskTolerance", "investmentHorizon", "investmentGoal")


def _ok(data: Dict[str, Any]) -> Dict[str, Any]:
    return {"success": True, "data": data}


def _error(message: str, status: int, detail: Optional[str] = None) -> Dict[str, Any]:
    response = {"success": False, "error": message, "status": status}
    if detail:
        response["message"] = detail
    return response


def _as_object(payload: Any) -> Dict[str, Any]:
    """Decoded JSON bodies other than objects carry no fields."""
    return payload if isinstance(payload, dict) else {}


def _validation_detail(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in error.errors()
    )


def handle_risk_analysis(
    payload: Dict[str, Any],
    analyzer: Optional[PortfolioRiskAnalyzer] = None
) -> Dict[str, Any]:
    """
    Analyze a portfolio.

    Args:
        payload: ``{"holdings": [{code, name, weight, return, volatility?}, ...]}``
        analyzer: Analyzer to use (default parameters if None)

    Returns:
        Envelope with metrics, stressTests and holdingsCount
    """
    cid = set_correlation_id()
    holdings_data = _as_object(payload).get("holdings")
    if not isinstance(holdings_data, list) or not holdings_data:
        return _error("Invalid holdings data", 400)

    try:
        holdings: List[FundHolding] = [FundHolding.model_validate(h) for h in holdings_data]
        validate_holdings(holdings)
    except ValidationError as e:
        return _error("Invalid holdings data", 400, _validation_detail(e))
    except PortfolioValidationError as e:
        return _error("Invalid holdings data", 400, str(e))

    analyzer = analyzer or PortfolioRiskAnalyzer()
    try:
        result = summarize_risk(analyzer.analyze_portfolio(holdings), analyzer.stress_test(holdings))
    except Exception as e:
        logger.error(f"Risk analysis error: {e}", exc_info=True)
        return _error("Internal server error", 500, str(e))

    result["holdingsCount"] = len(holdings)
    logger.info(f"Risk analysis {cid} completed for {len(holdings)} holdings")
    return _ok(result)


def handle_recommendation(
    payload: Dict[str, Any],
    provider: FundDataProvider,
    limit: int = DEFAULT_LIMIT,
    strict: bool = False
) -> Dict[str, Any]:
    """
    Recommend funds for the preferences in ``payload``.

    Args:
        payload: UserPreferences fields (camelCase)
        provider: Fund-data provider used for candidate search
        limit: Maximum number of recommendations
        strict: Report provider failures instead of skipping them

    Returns:
        Envelope with recommendations, advice and the echoed preferences
    """
    cid = set_correlation_id()
    payload = _as_object(payload)
    if any(not payload.get(key) for key in REQUIRED_PREFERENCES):
        return _error("Missing required preferences", 400)

    try:
        preferences = UserPreferences.model_validate(payload)
    except ValidationError as e:
        return _error("Invalid preferences", 400, _validation_detail(e))

    recommender = SmartFundRecommender(provider, strict=strict)
    try:
        recommendations = recommender.recommend(preferences, limit)
        advice = recommender.get_investment_advice(recommendations, preferences)
    except FundAnalyticsError as e:
        logger.error(f"Recommendation {cid} failed: {e}", exc_info=True)
        return _error("Fund data unavailable", 502, str(e))
    except Exception as e:
        logger.error(f"Recommendation error: {e}", exc_info=True)
        return _error("Internal server error", 500, str(e))

    return _ok({
        "recommendations": [r.model_dump(by_alias=True) for r in recommendations],
        "advice": advice,
        "preferences": preferences.model_dump(by_alias=True),
    })


def handle_scoring(
    payload: Dict[str, Any],
    scorer: Optional[MultiFactorScorer] = None
) -> Dict[str, Any]:
    """
    Score a batch of funds.

    Args:
        payload: ``{"funds": [FundRecord, ...]}``
        scorer: Scorer to use (default weights if None)

    Returns:
        Envelope with scores sorted best first
    """
    set_correlation_id()
    funds_data = _as_object(payload).get("funds")
    if not isinstance(funds_data, list):
        return _error("Invalid funds data", 400)

    try:
        funds = [FundRecord.model_validate(f) for f in funds_data]
    except ValidationError as e:
        return _error("Invalid funds data", 400, _validation_detail(e))

    scores = (scorer or MultiFactorScorer()).score_batch(funds)
    return _ok({"scores": [s.model_dump(by_alias=True) for s in scores], "count": len(scores)})
