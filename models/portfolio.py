# models/portfolio.py
from __future__ import annotations
from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, Field


RiskLevel = Literal["low", "medium", "high"]


class FundHolding(BaseModel):
    """
    One position of a portfolio under risk analysis.

    ``weight`` is the fraction of the portfolio (0-1). ``return`` and
    ``volatility`` are decimals (0.08 means 8%). Weights of one portfolio are
    expected to sum to 1; see ``utils.risk.validate_holdings``.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    code: str
    name: str = ""
    weight: float
    return_: float = Field(alias="return")
    volatility: Optional[float] = None


class RiskMetrics(BaseModel):
    """Portfolio-level risk summary."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    portfolio_return: float = Field(alias="portfolioReturn")
    portfolio_volatility: float = Field(alias="portfolioVolatility")
    portfolio_sharpe: float = Field(alias="portfolioSharpe")
    max_drawdown: float = Field(alias="maxDrawdown")
    var_95: float = Field(alias="var95")
    cvar_95: float = Field(alias="cvar95")
    correlation: float
    concentration: float
    risk_level: RiskLevel = Field(alias="riskLevel")
    risk_score: float = Field(alias="riskScore")


class StressScenario(BaseModel):
    """Outcome of one stress scenario. Negative impact is a loss."""
    model_config = ConfigDict(frozen=True)

    scenario: str
    impact: float
    description: str
