"""
Recommendation Module

Preference-driven fund recommendations built on the multi-factor scorer.
"""

from .smart_recommender import SmartFundRecommender
from .messages import RecommendationMessages
from .config import RISK_TOLERANCE_FUND_TYPES, get_fund_types

__all__ = [
    'SmartFundRecommender',
    'RecommendationMessages',
    'RISK_TOLERANCE_FUND_TYPES',
    'get_fund_types',
]
