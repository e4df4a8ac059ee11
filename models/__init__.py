# models package
from .fund import FundRecord, FundScore, Rating
from .portfolio import FundHolding, RiskMetrics, StressScenario, RiskLevel
from .preferences import (
    UserPreferences,
    FundRecommendation,
    RiskTolerance,
    InvestmentHorizon,
    InvestmentGoal
)

__all__ = [
    'FundRecord',
    'FundScore',
    'Rating',
    'FundHolding',
    'RiskMetrics',
    'StressScenario',
    'RiskLevel',
    'UserPreferences',
    'FundRecommendation',
    'RiskTolerance',
    'InvestmentHorizon',
    'InvestmentGoal'
]
