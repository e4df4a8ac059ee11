# tools/fund_tools.py
from __future__ import annotations
from typing import Dict, Any, List, Optional
from langchain.tools import tool

from models.fund import FundRecord
from models.portfolio import FundHolding
from models.preferences import UserPreferences
from utils.data.eastmoney import EastmoneyFundDataProvider
from utils.recommendation.smart_recommender import SmartFundRecommender
from utils.errors import PortfolioValidationError
from utils.risk.portfolio_risk import PortfolioRiskAnalyzer, validate_holdings, summarize_risk
from utils.scoring.multi_factor import MultiFactorScorer


@tool("score_fund")
def score_fund(fund: Dict[str, Any]) -> Dict[str, Any]:
    """
    Score a fund on performance, risk, manager, fee, size and holdings.

    Args:
        fund: Fund record with 'code', 'name', 'type' and any of return1Y,
            return3Y, return5Y, volatility, maxDrawdown, sharpeRatio,
            managerExperience, managerScale, managementFee, fundScale,
            holdingsConcentration, turnoverRate (percent units)

    Returns:
        Sub-scores (0-100), totalScore and rating (AAA..CCC)
    """
    record = FundRecord.model_validate(fund)
    return MultiFactorScorer().score(record).model_dump(by_alias=True)


@tool("analyze_portfolio_risk")
def analyze_portfolio_risk(holdings: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Analyze the risk of a fund portfolio and run stress scenarios.

    Args:
        holdings: Positions with 'code', 'name', 'weight' (0-1, summing to 1),
            'return' (decimal) and optional 'volatility' (decimal)

    Returns:
        Dictionary with 'metrics' (return, volatility, Sharpe, VaR, CVaR,
        concentration, risk level) and 'stressTests', or 'error' when the
        weights are invalid
    """
    positions = [FundHolding.model_validate(h) for h in holdings]
    try:
        validate_holdings(positions)
    except PortfolioValidationError as e:
        return {"error": str(e), "metrics": None, "stressTests": []}

    analyzer = PortfolioRiskAnalyzer()
    return summarize_risk(analyzer.analyze_portfolio(positions), analyzer.stress_test(positions))


@tool("recommend_funds")
def recommend_funds(
    risk_tolerance: str,
    investment_horizon: str,
    investment_goal: str,
    max_drawdown: Optional[float] = None,
    min_return: Optional[float] = None,
    limit: int = 10
) -> Dict[str, Any]:
    """
    Recommend funds matching an investor's preferences.

    Args:
        risk_tolerance: 'conservative', 'moderate' or 'aggressive'
        investment_horizon: 'short', 'medium', 'long' or 'very-long'
        investment_goal: 'preservation', 'steady', 'growth' or 'aggressive'
        max_drawdown: Optional maximum acceptable drawdown (percent)
        min_return: Optional minimum performance score
        limit: Maximum number of funds to return

    Returns:
        Dictionary with 'recommendations' and 'advice'
    """
    preferences = UserPreferences(
        risk_tolerance=risk_tolerance,
        investment_horizon=investment_horizon,
        investment_goal=investment_goal,
        max_drawdown=max_drawdown,
        min_return=min_return,
    )
    recommender = SmartFundRecommender(EastmoneyFundDataProvider())
    recommendations = recommender.recommend(preferences, limit)
    return {
        "recommendations": [r.model_dump(by_alias=True) for r in recommendations],
        "advice": recommender.get_investment_advice(recommendations, preferences),
    }


# Tool registry for easy integration
FUND_TOOLS = [
    score_fund,
    analyze_portfolio_risk,
    recommend_funds
]
