"""
Recommendation Module Configuration

Lookup tables and thresholds for the preference-driven fund recommender.
"""

from typing import Dict, List

# =============================================================================
# RISK TOLERANCE -> ELIGIBLE FUND TYPES
# =============================================================================

RISK_TOLERANCE_FUND_TYPES: Dict[str, List[str]] = {
    "conservative": ["money-market", "bond", "capital-protected"],
    "moderate": ["bond", "mixed", "capital-protected", "index"],
    "aggressive": ["equity", "mixed", "index", "QDII"],
}

# =============================================================================
# CANDIDATE SEARCH
# =============================================================================

CANDIDATES_PER_TYPE = 20           # Candidates kept from each type search
DEFAULT_LIMIT = 10                 # Recommendations returned by default
ENRICHMENT_MAX_WORKERS = 8         # Parallel historical-metric lookups

# =============================================================================
# FILTERS
# =============================================================================

MAX_DRAWDOWN_MIN_RISK_SCORE = 50   # Risk sub-score floor when a drawdown cap is set
SHORT_HORIZON_RATINGS = ("AAA", "AA")
TOP_RATINGS = ("AAA", "AA")

# =============================================================================
# MATCH REASONS AND RISK LEVEL
# =============================================================================

STRONG_FACTOR_SCORE = 80
GOOD_FACTOR_SCORE = 60

LOW_RISK_MIN_SCORE = 70
MEDIUM_RISK_MIN_SCORE = 50

DEFAULT_EXPECTED_RISK = 15.0       # Percent, when neither volatility nor drawdown is known

# =============================================================================
# ADVICE
# =============================================================================

MAX_SUGGESTED_FUNDS = 5
DOLLAR_COST_AVERAGING_HORIZONS = ("long",)


def get_fund_types(risk_tolerance: str) -> List[str]:
    """Eligible fund types for a risk tolerance, empty for unknown values"""
    return list(RISK_TOLERANCE_FUND_TYPES.get(risk_tolerance, []))
