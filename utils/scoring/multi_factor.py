# scoring/multi_factor.py
from __future__ import annotations
from typing import Dict, Any, List, Optional, Sequence, Tuple
import logging
import pandas as pd

from models.fund import FundRecord, FundScore
from utils.scoring.config import (
    ScoringWeights,
    DEFAULT_WEIGHTS,
    NEUTRAL_SCORE,
    RETURN_1Y_BANDS,
    RETURN_3Y_BANDS,
    RETURN_5Y_BANDS,
    VOLATILITY_BANDS,
    MAX_DRAWDOWN_BANDS,
    SHARPE_BANDS,
    MANAGER_EXPERIENCE_BANDS,
    MANAGER_SCALE_BANDS,
    MANAGEMENT_FEE_BANDS,
    TURNOVER_BANDS,
    FUND_SCALE_RANGES,
    FUND_SCALE_POSITIVE_BONUS,
    FUND_SCALE_PENALTY,
    CONCENTRATION_RANGES,
    CONCENTRATION_FALLBACK,
    RATING_THRESHOLDS,
    LOWEST_RATING,
)

logger = logging.getLogger(__name__)

Bands = List[Tuple[Optional[float], float]]


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def _band_above(value: Optional[float], bands: Bands) -> float:
    """Adjustment for a higher-is-better field (value > threshold)."""
    if value is None:
        return 0.0
    for threshold, adjustment in bands:
        if threshold is None or value > threshold:
            return adjustment
    return 0.0


def _band_below(value: Optional[float], bands: Bands) -> float:
    """Adjustment for a lower-is-better field (value < threshold)."""
    if value is None:
        return 0.0
    for threshold, adjustment in bands:
        if threshold is None or value < threshold:
            return adjustment
    return 0.0


def _band_within(value: float, ranges: List[Tuple[float, float, float]]) -> Optional[float]:
    for low, high, adjustment in ranges:
        if low <= value <= high:
            return adjustment
    return None


class MultiFactorScorer:
    """
    Multi-factor fund scorer.

    Each of six factors starts from a neutral 50 and is moved by fixed bands
    over the fields the record carries; the total is the weighted sum of the
    factor scores. Scoring is pure: the same record always yields the same
    score, and missing fields never raise.
    """

    def __init__(self, weights: ScoringWeights = DEFAULT_WEIGHTS):
        """
        Initialize the MultiFactorScorer.

        Args:
            weights: Immutable factor weights (defaults to DEFAULT_WEIGHTS)
        """
        self.weights = weights

    def score(self, fund: FundRecord) -> FundScore:
        """
        Compute the composite score of a fund.

        Args:
            fund: Fund record to evaluate

        Returns:
            FundScore with six sub-scores, total score and rating
        """
        scores = {
            "performance": self.calc_performance_score(fund),
            "risk": self.calc_risk_score(fund),
            "manager": self.calc_manager_score(fund),
            "fee": self.calc_fee_score(fund),
            "size": self.calc_size_score(fund),
            "holdings": self.calc_holdings_score(fund),
        }

        weights = self.weights.as_dict()
        total_score = _clamp(sum(scores[factor] * weights[factor] for factor in scores))

        return FundScore(
            code=fund.code,
            name=fund.name,
            total_score=total_score,
            rating=self.get_rating(total_score),
            **scores,
        )

    def score_batch(self, funds: Sequence[FundRecord]) -> List[FundScore]:
        """
        Score funds independently and sort by total score, best first.

        Ties keep their input order.
        """
        scores = [self.score(fund) for fund in funds]
        logger.debug(f"Scored {len(scores)} funds")
        return sorted(scores, key=lambda s: s.total_score, reverse=True)

    def calc_performance_score(self, fund: FundRecord) -> float:
        """Performance factor from 1, 3 and 5 year returns."""
        score = NEUTRAL_SCORE
        score += _band_above(fund.return_1y, RETURN_1Y_BANDS)
        score += _band_above(fund.return_3y, RETURN_3Y_BANDS)
        score += _band_above(fund.return_5y, RETURN_5Y_BANDS)
        return _clamp(score)

    def calc_risk_score(self, fund: FundRecord) -> float:
        """Risk factor: low volatility, shallow drawdown, high Sharpe."""
        score = NEUTRAL_SCORE
        score += _band_below(fund.volatility, VOLATILITY_BANDS)
        score += _band_below(fund.max_drawdown, MAX_DRAWDOWN_BANDS)
        score += _band_above(fund.sharpe_ratio, SHARPE_BANDS)
        return _clamp(score)

    def calc_manager_score(self, fund: FundRecord) -> float:
        score = NEUTRAL_SCORE
        score += _band_above(fund.manager_experience, MANAGER_EXPERIENCE_BANDS)
        score += _band_above(fund.manager_scale, MANAGER_SCALE_BANDS)
        return _clamp(score)

    def calc_fee_score(self, fund: FundRecord) -> float:
        score = NEUTRAL_SCORE
        score += _band_below(fund.management_fee, MANAGEMENT_FEE_BANDS)
        return _clamp(score)

    def calc_size_score(self, fund: FundRecord) -> float:
        """Size factor: funds between 10 and 100 score best, extremes lower."""
        score = NEUTRAL_SCORE
        if fund.fund_scale is not None:
            adjustment = _band_within(fund.fund_scale, FUND_SCALE_RANGES)
            if adjustment is not None:
                score += adjustment
            elif fund.fund_scale > 0:
                score += FUND_SCALE_POSITIVE_BONUS
            else:
                score += FUND_SCALE_PENALTY
        return _clamp(score)

    def calc_holdings_score(self, fund: FundRecord) -> float:
        """Holdings factor: moderate concentration and low turnover."""
        score = NEUTRAL_SCORE
        if fund.holdings_concentration is not None:
            adjustment = _band_within(fund.holdings_concentration, CONCENTRATION_RANGES)
            score += CONCENTRATION_FALLBACK if adjustment is None else adjustment
        score += _band_below(fund.turnover_rate, TURNOVER_BANDS)
        return _clamp(score)

    @staticmethod
    def get_rating(total_score: float) -> str:
        """Map a total score to its letter rating."""
        for threshold, rating in RATING_THRESHOLDS:
            if total_score >= threshold:
                return rating
        return LOWEST_RATING


def scores_to_frame(scores: Sequence[FundScore]) -> pd.DataFrame:
    """
    Tabulate a batch of scores, one row per fund.

    Args:
        scores: Fund scores, typically the output of score_batch

    Returns:
        DataFrame indexed by fund code with one column per factor
    """
    columns = ["code", "name", "performance", "risk", "manager", "fee",
               "size", "holdings", "total_score", "rating"]
    if not scores:
        return pd.DataFrame(columns=columns).set_index("code")
    rows: List[Dict[str, Any]] = [score.model_dump() for score in scores]
    return pd.DataFrame(rows, columns=columns).set_index("code")
