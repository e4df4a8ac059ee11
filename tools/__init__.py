"""
Agent tools exposing fund scoring, portfolio risk analysis and
recommendations.
"""

from .fund_tools import score_fund, analyze_portfolio_risk, recommend_funds, FUND_TOOLS

__all__ = [
    'score_fund',
    'analyze_portfolio_risk',
    'recommend_funds',
    'FUND_TOOLS',
]
