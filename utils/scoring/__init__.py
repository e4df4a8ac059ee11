"""
Scoring Module

Multi-factor fund scoring with immutable factor weights.
"""

from .config import ScoringWeights, DEFAULT_WEIGHTS, get_default_weights, rating_rank
from .multi_factor import MultiFactorScorer, scores_to_frame

__all__ = [
    'ScoringWeights',
    'DEFAULT_WEIGHTS',
    'get_default_weights',
    'rating_rank',
    'MultiFactorScorer',
    'scores_to_frame',
]
