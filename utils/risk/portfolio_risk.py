# risk/portfolio_risk.py
from __future__ import annotations
from typing import Dict, Any, List, Sequence, Tuple
import logging
import numpy as np

from models.portfolio import FundHolding, RiskMetrics, StressScenario
from utils.errors import PortfolioValidationError
from utils.risk.config import (
    RISK_FREE_RATE,
    ASSUMED_PAIRWISE_CORRELATION,
    MIN_VOLATILITY,
    RETURN_TO_VOLATILITY_DIVISOR,
    DRAWDOWN_MULTIPLIER,
    CVAR_MULTIPLIER,
    DEFAULT_CONFIDENCE,
    LOW_VOLATILITY_CEILING,
    MEDIUM_VOLATILITY_CEILING,
    WEIGHT_SUM_TOLERANCE,
    STRESS_WEIGHT_SEED,
    get_z_score,
    get_stress_scenarios,
)

logger = logging.getLogger(__name__)


class PortfolioRiskAnalyzer:
    """
    Portfolio risk analyzer.

    Aggregates per-holding return and volatility into portfolio metrics under
    a uniform pairwise correlation assumption, and runs fixed stress
    scenarios. The analyzer does not check that weights sum to 1; use
    ``validate_holdings`` at the boundary for that.
    """

    def __init__(
        self,
        risk_free_rate: float = RISK_FREE_RATE,
        correlation: float = ASSUMED_PAIRWISE_CORRELATION,
        stress_weight_seed: float = STRESS_WEIGHT_SEED,
    ):
        """
        Initialize the PortfolioRiskAnalyzer.

        Args:
            risk_free_rate: Annual risk-free rate used by the Sharpe ratio
            correlation: Assumed correlation between every pair of holdings
            stress_weight_seed: Starting value of the weight sum that scales
                stress impacts (1.0 reproduces the legacy scaling)
        """
        self.risk_free_rate = risk_free_rate
        self.correlation = correlation
        self.stress_weight_seed = stress_weight_seed

    def analyze_portfolio(self, holdings: Sequence[FundHolding]) -> RiskMetrics:
        """
        Analyze portfolio risk.

        Args:
            holdings: Portfolio positions with weights summing to 1

        Returns:
            RiskMetrics for the portfolio, or the empty sentinel for no holdings
        """
        if not holdings:
            return self.get_empty_metrics()

        portfolio_return = self.calc_portfolio_return(holdings)
        portfolio_volatility = self.calc_portfolio_volatility(holdings)
        portfolio_sharpe = self.calc_sharpe_ratio(portfolio_return, portfolio_volatility)
        risk_level, risk_score = self.get_risk_level(portfolio_volatility)

        metrics = RiskMetrics(
            portfolio_return=portfolio_return,
            portfolio_volatility=portfolio_volatility,
            portfolio_sharpe=portfolio_sharpe,
            max_drawdown=self.estimate_max_drawdown(portfolio_volatility),
            var_95=self.calc_var(portfolio_volatility, DEFAULT_CONFIDENCE),
            cvar_95=self.calc_cvar(portfolio_volatility, DEFAULT_CONFIDENCE),
            correlation=self.estimate_correlation(holdings),
            concentration=self.calc_concentration(holdings),
            risk_level=risk_level,
            risk_score=risk_score,
        )
        logger.debug(
            f"Analyzed {len(holdings)} holdings: return={portfolio_return:.4f}, "
            f"volatility={portfolio_volatility:.4f}, level={risk_level}"
        )
        return metrics

    def calc_portfolio_return(self, holdings: Sequence[FundHolding]) -> float:
        total = 0.0
        for holding in holdings:
            total += holding.return_ * holding.weight
        return total

    @staticmethod
    def estimate_volatility(return_rate: float) -> float:
        """Volatility estimate for a holding without one: |return| / 3 + 10%."""
        return abs(return_rate) / RETURN_TO_VOLATILITY_DIVISOR + MIN_VOLATILITY

    def holding_volatility(self, holding: FundHolding) -> float:
        if holding.volatility is not None:
            return holding.volatility
        return self.estimate_volatility(holding.return_)

    def calc_portfolio_volatility(self, holdings: Sequence[FundHolding]) -> float:
        """
        Portfolio volatility from the implied covariance matrix.

        Off-diagonal correlations are all ``self.correlation``, so the
        variance is sum(w_i^2 s_i^2) + sum_{i<j} 2 rho w_i w_j s_i s_j.
        """
        weights = np.array([h.weight for h in holdings], dtype=float)
        vols = np.array([self.holding_volatility(h) for h in holdings], dtype=float)

        corr = np.full((len(holdings), len(holdings)), self.correlation, dtype=float)
        np.fill_diagonal(corr, 1.0)
        covariance = np.outer(vols, vols) * corr

        variance = float(weights @ covariance @ weights)
        return float(np.sqrt(max(variance, 0.0)))

    def calc_sharpe_ratio(self, portfolio_return: float, portfolio_volatility: float) -> float:
        if portfolio_volatility == 0:
            return 0.0
        return (portfolio_return - self.risk_free_rate) / portfolio_volatility

    @staticmethod
    def estimate_max_drawdown(volatility: float) -> float:
        return volatility * DRAWDOWN_MULTIPLIER

    @staticmethod
    def calc_var(volatility: float, confidence: float = DEFAULT_CONFIDENCE) -> float:
        """Parametric Value-at-Risk at a confidence level."""
        return get_z_score(confidence) * volatility

    @classmethod
    def calc_cvar(cls, volatility: float, confidence: float = DEFAULT_CONFIDENCE) -> float:
        """Conditional VaR, approximated as a fixed multiple of VaR."""
        return cls.calc_var(volatility, confidence) * CVAR_MULTIPLIER

    def estimate_correlation(self, holdings: Sequence[FundHolding]) -> float:
        if len(holdings) <= 1:
            return 0.0
        return self.correlation

    @staticmethod
    def calc_concentration(holdings: Sequence[FundHolding]) -> float:
        """Herfindahl-Hirschman index on percent weights, normalized to [0, 1]."""
        hhi = sum((h.weight * 100) ** 2 for h in holdings)
        return min(1.0, hhi / 10000)

    @staticmethod
    def get_risk_level(volatility: float) -> Tuple[str, float]:
        """
        Map portfolio volatility to a risk level and a 0-100 risk score.

        Returns:
            Tuple of (risk_level, risk_score); higher score means safer
        """
        if volatility < LOW_VOLATILITY_CEILING:
            return "low", 100 - volatility * 500
        if volatility < MEDIUM_VOLATILITY_CEILING:
            return "medium", 75 - (volatility - LOW_VOLATILITY_CEILING) * 250
        return "high", 50 - min(50.0, (volatility - MEDIUM_VOLATILITY_CEILING) * 200)

    @staticmethod
    def get_empty_metrics() -> RiskMetrics:
        return RiskMetrics(
            portfolio_return=0.0,
            portfolio_volatility=0.0,
            portfolio_sharpe=0.0,
            max_drawdown=0.0,
            var_95=0.0,
            cvar_95=0.0,
            correlation=0.0,
            concentration=0.0,
            risk_level="low",
            risk_score=100.0,
        )

    def stress_test(self, holdings: Sequence[FundHolding]) -> List[StressScenario]:
        """
        Apply the fixed stress scenarios to a portfolio.

        Each scenario impact is scaled by the portfolio's total weight.

        Args:
            holdings: Portfolio positions

        Returns:
            List of StressScenario, one per fixed scenario
        """
        portfolio_value = self.stress_weight_seed
        for holding in holdings:
            portfolio_value += holding.weight

        return [
            StressScenario(
                scenario=s["scenario"],
                impact=portfolio_value * s["impact"],
                description=s["description"],
            )
            for s in get_stress_scenarios()
        ]


def validate_holdings(
    holdings: Sequence[FundHolding],
    tolerance: float = WEIGHT_SUM_TOLERANCE
) -> None:
    """
    Check the holdings weight contract.

    Args:
        holdings: Portfolio positions
        tolerance: Allowed deviation of the weight sum from 1

    Raises:
        PortfolioValidationError: If a weight lies outside [0, 1] (NaN included) or the
            weights do not sum to 1 within tolerance
    """
    if not holdings:
        raise PortfolioValidationError("Portfolio has no holdings")

    out_of_range = [h.code for h in holdings if not 0 <= h.weight <= 1]
    if out_of_range:
        raise PortfolioValidationError(f"Weights outside [0, 1] for: {', '.join(out_of_range)}")

    total = sum(h.weight for h in holdings)
    if abs(total - 1.0) > tolerance:
        raise PortfolioValidationError(
            f"Holding weights must sum to 1 (+/- {tolerance}), got {total:.4f}"
        )


def summarize_risk(metrics: RiskMetrics, scenarios: Sequence[StressScenario]) -> Dict[str, Any]:
    """Flatten metrics and stress outcomes into a JSON-ready dict."""
    return {
        "metrics": metrics.model_dump(by_alias=True),
        "stressTests": [s.model_dump() for s in scenarios],
    }
