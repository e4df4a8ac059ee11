"""
Scoring Module Configuration

Factor weights, band tables and rating thresholds used by the multi-factor
scorer. Bands are evaluated top to bottom and the first match wins; a
``None`` threshold is the fallback band.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict, replace as dc_replace
from typing import Dict, List, Optional, Tuple

# =============================================================================
# FACTOR WEIGHTS
# =============================================================================

WEIGHT_SUM_TOLERANCE = 1e-6


@dataclass(frozen=True)
class ScoringWeights:
    """Immutable factor weights. Must be non-negative and sum to 1.0."""
    performance: float = 0.30
    risk: float = 0.25
    manager: float = 0.20
    fee: float = 0.10
    size: float = 0.10
    holdings: float = 0.05

    def __post_init__(self):
        values = self.as_dict()
        negative = [name for name, value in values.items() if value < 0]
        if negative:
            raise ValueError(f"Factor weights must be non-negative: {negative}")
        total = sum(values.values())
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"Factor weights must sum to 1.0, got {total:.6f}")

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)

    def replace(self, **overrides: float) -> "ScoringWeights":
        """Return a new weights value with the given factors overridden."""
        return dc_replace(self, **overrides)


DEFAULT_WEIGHTS = ScoringWeights()

# =============================================================================
# BAND TABLES
# =============================================================================

NEUTRAL_SCORE = 50.0

# (threshold, adjustment); "higher is better" tables use value > threshold
RETURN_1Y_BANDS: List[Tuple[Optional[float], float]] = [(30, 20), (20, 15), (10, 10), (0, 5), (None, -10)]
RETURN_3Y_BANDS: List[Tuple[Optional[float], float]] = [(80, 40), (50, 30), (30, 20), (10, 10), (0, 5), (None, -10)]
RETURN_5Y_BANDS: List[Tuple[Optional[float], float]] = [(150, 40), (100, 30), (50, 20), (20, 10), (0, 5), (None, -10)]
SHARPE_BANDS: List[Tuple[Optional[float], float]] = [(1.5, 40), (1.0, 30), (0.5, 20), (0, 10), (None, -10)]
MANAGER_EXPERIENCE_BANDS: List[Tuple[Optional[float], float]] = [(10, 50), (7, 40), (5, 30), (3, 20), (1, 10)]
MANAGER_SCALE_BANDS: List[Tuple[Optional[float], float]] = [(500, 50), (200, 40), (100, 30), (50, 20), (10, 10)]

# "lower is better" tables use value < threshold
VOLATILITY_BANDS: List[Tuple[Optional[float], float]] = [(10, 30), (15, 20), (20, 10), (25, 0), (None, -10)]
MAX_DRAWDOWN_BANDS: List[Tuple[Optional[float], float]] = [(5, 30), (10, 20), (15, 10), (20, 0), (None, -10)]
MANAGEMENT_FEE_BANDS: List[Tuple[Optional[float], float]] = [(0.5, 50), (1.0, 40), (1.5, 30), (2.0, 20), (None, -10)]
TURNOVER_BANDS: List[Tuple[Optional[float], float]] = [(50, 50), (100, 40), (200, 30), (300, 20), (None, -10)]

# Inclusive (low, high) ranges, sweet spot first
FUND_SCALE_RANGES: List[Tuple[float, float, float]] = [(10, 100, 50), (5, 200, 40), (2, 500, 30)]
FUND_SCALE_POSITIVE_BONUS = 10
FUND_SCALE_PENALTY = -10

CONCENTRATION_RANGES: List[Tuple[float, float, float]] = [(30, 60, 50), (20, 70, 40)]
CONCENTRATION_FALLBACK = 20

# =============================================================================
# RATINGS
# =============================================================================

RATING_THRESHOLDS: List[Tuple[float, str]] = [
    (90, "AAA"),
    (85, "AA"),
    (80, "A"),
    (75, "BBB"),
    (70, "BB"),
    (65, "B"),
]
LOWEST_RATING = "CCC"

RATING_ORDER = ["AAA", "AA", "A", "BBB", "BB", "B", "CCC"]


def get_default_weights() -> ScoringWeights:
    """Get the default factor weights"""
    return DEFAULT_WEIGHTS


def rating_rank(rating: str) -> int:
    """Rank of a rating, 0 for the best (AAA)"""
    return RATING_ORDER.index(rating)
