"""
Risk Module Configuration

Assumed parameters for portfolio risk analysis. These are simplified
assumptions standing in for data the system does not have (a real covariance
matrix, historical drawdowns, tail distributions).
"""

from typing import Dict, List

# =============================================================================
# PORTFOLIO MODEL PARAMETERS
# =============================================================================

RISK_FREE_RATE = 0.03                  # Annual risk-free rate (3%)
ASSUMED_PAIRWISE_CORRELATION = 0.3     # Uniform correlation between distinct holdings
MIN_VOLATILITY = 0.10                  # Volatility floor for holdings without one
RETURN_TO_VOLATILITY_DIVISOR = 3.0     # Estimated vol = |return| / 3 + floor
DRAWDOWN_MULTIPLIER = 2.0              # Max drawdown ~ 2x volatility
CVAR_MULTIPLIER = 1.2                  # CVaR ~ 1.2x VaR

# Z-scores for normal quantiles at common confidence levels
Z_SCORES: Dict[float, float] = {
    0.90: 1.28,
    0.95: 1.65,
    0.99: 2.33,
}
DEFAULT_CONFIDENCE = 0.95
DEFAULT_Z_SCORE = 1.65

# =============================================================================
# RISK LEVELS
# =============================================================================

LOW_VOLATILITY_CEILING = 0.10
MEDIUM_VOLATILITY_CEILING = 0.20

# =============================================================================
# HOLDINGS CONTRACT
# =============================================================================

WEIGHT_SUM_TOLERANCE = 0.01

# =============================================================================
# STRESS TESTS
# =============================================================================

# Seed of the portfolio-weight sum scaling stress impacts. Earlier versions
# seeded this at 1, which inflated every impact by one full portfolio.
STRESS_WEIGHT_SEED = 0.0

STRESS_SCENARIOS: List[Dict[str, object]] = [
    {
        "scenario": "Market crash",
        "impact": -0.30,
        "description": "Loss if the market falls 30%",
    },
    {
        "scenario": "Bear market",
        "impact": -0.15,
        "description": "Loss if the market falls 15%",
    },
    {
        "scenario": "High volatility",
        "impact": -0.10,
        "description": "Loss if volatility rises by 10%",
    },
    {
        "scenario": "Rate hike",
        "impact": -0.05,
        "description": "Loss if interest rates rise by 1%",
    },
]


def get_z_score(confidence: float) -> float:
    """Z-score for a confidence level, 1.65 for unlisted levels"""
    return Z_SCORES.get(confidence, DEFAULT_Z_SCORE)


def get_stress_scenarios() -> List[Dict[str, object]]:
    """Get a copy of the fixed stress scenarios"""
    return [dict(s) for s in STRESS_SCENARIOS]
