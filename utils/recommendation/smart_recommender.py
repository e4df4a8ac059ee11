# recommendation/smart_recommender.py
from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
import contextvars
from typing import Dict, List, Optional, Sequence
import logging

from models.fund import FundRecord, FundScore
from models.preferences import UserPreferences, FundRecommendation
from operation.logging import log_performance
from utils.data.fund_provider import FundDataProvider
from utils.errors import FundDataError
from utils.recommendation.config import (
    CANDIDATES_PER_TYPE,
    DEFAULT_LIMIT,
    ENRICHMENT_MAX_WORKERS,
    MAX_DRAWDOWN_MIN_RISK_SCORE,
    SHORT_HORIZON_RATINGS,
    TOP_RATINGS,
    STRONG_FACTOR_SCORE,
    GOOD_FACTOR_SCORE,
    LOW_RISK_MIN_SCORE,
    MEDIUM_RISK_MIN_SCORE,
    DEFAULT_EXPECTED_RISK,
    MAX_SUGGESTED_FUNDS,
    DOLLAR_COST_AVERAGING_HORIZONS,
    get_fund_types,
)
from utils.recommendation.messages import RecommendationMessages
from utils.scoring.multi_factor import MultiFactorScorer

logger = logging.getLogger(__name__)

# Errors from a provider call that degrade to "no data" instead of failing
PROVIDER_ERRORS = (FundDataError, OSError)


class SmartFundRecommender:
    """
    Preference-driven fund recommender.

    Picks eligible fund types for the investor's risk tolerance, pulls
    candidates from a fund-data provider, scores them with the multi-factor
    scorer and keeps the best funds that satisfy the preference filters.
    """

    def __init__(
        self,
        provider: FundDataProvider,
        scorer: Optional[MultiFactorScorer] = None,
        candidates_per_type: int = CANDIDATES_PER_TYPE,
        enrich: bool = True,
        strict: bool = False,
        max_workers: int = ENRICHMENT_MAX_WORKERS
    ):
        """
        Initialize the SmartFundRecommender.

        Args:
            provider: Source of candidate fund records
            scorer: Multi-factor scorer (default weights if None)
            candidates_per_type: Candidates kept from each type search
            enrich: Merge provider historical metrics into each candidate
            strict: Propagate provider errors instead of skipping them
            max_workers: Threads used for historical-metric lookups
        """
        self.provider = provider
        self.scorer = scorer or MultiFactorScorer()
        self.candidates_per_type = candidates_per_type
        self.enrich = enrich
        self.strict = strict
        self.max_workers = max_workers

    @log_performance
    def recommend(
        self,
        preferences: UserPreferences,
        limit: int = DEFAULT_LIMIT
    ) -> List[FundRecommendation]:
        """
        Recommend funds for an investor.

        Args:
            preferences: Investor preferences
            limit: Maximum number of recommendations

        Returns:
            Recommendations ordered by total score, possibly empty
        """
        fund_types = get_fund_types(preferences.risk_tolerance)
        candidates = self.search_candidates(fund_types)
        scores = self.scorer.score_batch(candidates)
        filtered = self.filter_by_preferences(scores, preferences)

        funds_by_code: Dict[str, FundRecord] = {fund.code: fund for fund in candidates}
        recommendations = [
            FundRecommendation(
                fund=funds_by_code[score.code],
                score=score,
                match_reasons=self.generate_match_reasons(score),
                risk_level=self.get_risk_level(score),
                expected_return=self.estimate_return(funds_by_code[score.code]),
                expected_risk=self.estimate_risk(funds_by_code[score.code]),
            )
            for score in filtered[:limit]
        ]

        logger.info(
            f"Recommended {len(recommendations)} of {len(candidates)} candidates "
            f"for {preferences.risk_tolerance}/{preferences.investment_horizon}"
        )
        return recommendations

    def search_candidates(self, fund_types: Sequence[str]) -> List[FundRecord]:
        """
        Collect candidate funds across types.

        Each type contributes at most ``candidates_per_type`` records; a code
        already collected from an earlier type is skipped.
        """
        candidates: List[FundRecord] = []
        seen = set()

        for fund_type in fund_types:
            try:
                results = self.provider.search_by_type(fund_type)
            except PROVIDER_ERRORS as e:
                if self.strict:
                    raise
                logger.warning(f"Failed to search funds for type {fund_type}: {e}")
                continue

            for fund in results[:self.candidates_per_type]:
                if fund.code in seen:
                    continue
                seen.add(fund.code)
                candidates.append(fund)

        if self.enrich and candidates:
            candidates = self.enrich_candidates(candidates)
        return candidates

    def enrich_candidates(self, candidates: Sequence[FundRecord]) -> List[FundRecord]:
        """
        Merge historical metrics into each candidate, keeping input order.

        Each lookup runs in a copy of the caller's context so worker logs keep
        the request's correlation id.
        """
        workers = max(1, min(self.max_workers, len(candidates)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(contextvars.copy_context().run, self._enrich_one, fund)
                for fund in candidates
            ]
            return [future.result() for future in futures]

    def _enrich_one(self, fund: FundRecord) -> FundRecord:
        try:
            metrics = self.provider.get_historical_metrics(fund.code)
            return fund.merge(metrics)
        except PROVIDER_ERRORS + (ValueError,) as e:
            if self.strict:
                raise
            logger.warning(f"Historical metrics unavailable for {fund.code}: {e}")
            return fund

    @staticmethod
    def filter_by_preferences(
        scores: Sequence[FundScore],
        preferences: UserPreferences
    ) -> List[FundScore]:
        """
        Drop scores that violate the investor's constraints.

        A drawdown cap requires a risk sub-score of at least 50, a minimum
        return requires a performance sub-score of at least that value, and a
        short horizon admits only AAA and AA ratings.
        """
        filtered = []
        for score in scores:
            if preferences.max_drawdown is not None and score.risk < MAX_DRAWDOWN_MIN_RISK_SCORE:
                continue
            if preferences.min_return is not None and score.performance < preferences.min_return:
                continue
            if preferences.investment_horizon == "short" and score.rating not in SHORT_HORIZON_RATINGS:
                continue
            filtered.append(score)
        return filtered

    @staticmethod
    def generate_match_reasons(score: FundScore) -> List[str]:
        reasons = []

        if score.rating in TOP_RATINGS:
            reasons.append(RecommendationMessages.top_rating(score.rating))

        if score.risk >= STRONG_FACTOR_SCORE:
            reasons.append(RecommendationMessages.STRONG_RISK_CONTROL)
        elif score.risk >= GOOD_FACTOR_SCORE:
            reasons.append(RecommendationMessages.GOOD_RISK_CONTROL)

        if score.performance >= STRONG_FACTOR_SCORE:
            reasons.append(RecommendationMessages.EXCELLENT_RETURNS)
        elif score.performance >= GOOD_FACTOR_SCORE:
            reasons.append(RecommendationMessages.GOOD_RETURNS)

        if score.manager >= STRONG_FACTOR_SCORE:
            reasons.append(RecommendationMessages.EXPERIENCED_MANAGEMENT)

        if score.fee >= STRONG_FACTOR_SCORE:
            reasons.append(RecommendationMessages.LOW_COST)

        if score.size >= STRONG_FACTOR_SCORE:
            reasons.append(RecommendationMessages.WELL_SIZED)

        return reasons

    @staticmethod
    def get_risk_level(score: FundScore) -> str:
        if score.risk >= LOW_RISK_MIN_SCORE:
            return "low"
        if score.risk >= MEDIUM_RISK_MIN_SCORE:
            return "medium"
        return "high"

    @staticmethod
    def estimate_return(fund: FundRecord) -> float:
        """Annualized return estimate in percent: 3-year return / 3, else 1-year return."""
        if fund.return_3y is not None:
            return fund.return_3y / 3
        if fund.return_1y is not None:
            return fund.return_1y
        return 0.0

    @staticmethod
    def estimate_risk(fund: FundRecord) -> float:
        """Risk estimate in percent: volatility, else twice the max drawdown."""
        if fund.volatility is not None:
            return fund.volatility
        if fund.max_drawdown is not None:
            return fund.max_drawdown * 2
        return DEFAULT_EXPECTED_RISK

    @staticmethod
    def get_investment_advice(
        recommendations: Sequence[FundRecommendation],
        preferences: UserPreferences
    ) -> str:
        """
        Summarize advice for a set of recommendations.

        Args:
            recommendations: Output of recommend
            preferences: Investor preferences used for the recommendations

        Returns:
            Advice lines joined with newlines
        """
        advice = []

        tolerance_advice = RecommendationMessages.TOLERANCE_ADVICE.get(preferences.risk_tolerance)
        if tolerance_advice:
            advice.append(tolerance_advice)

        advice.append(
            RecommendationMessages.diversification(min(MAX_SUGGESTED_FUNDS, len(recommendations)))
        )

        if preferences.investment_horizon in DOLLAR_COST_AVERAGING_HORIZONS:
            advice.append(RecommendationMessages.DOLLAR_COST_AVERAGING)

        return "\n".join(advice)
