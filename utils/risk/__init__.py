"""
Risk Module

Portfolio risk metrics, stress testing and holdings validation.
"""

from .config import ASSUMED_PAIRWISE_CORRELATION, RISK_FREE_RATE, STRESS_WEIGHT_SEED
from .portfolio_risk import PortfolioRiskAnalyzer, validate_holdings, summarize_risk

__all__ = [
    'ASSUMED_PAIRWISE_CORRELATION',
    'RISK_FREE_RATE',
    'STRESS_WEIGHT_SEED',
    'PortfolioRiskAnalyzer',
    'validate_holdings',
    'summarize_risk',
]
