# api package
from .handlers import handle_risk_analysis, handle_recommendation, handle_scoring

__all__ = [
    'handle_risk_analysis',
    'handle_recommendation',
    'handle_scoring'
]
