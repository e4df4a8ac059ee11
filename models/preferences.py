# models/preferences.py
from __future__ import annotations
from typing import List, Optional, Literal
from pydantic import BaseModel, ConfigDict, Field

from models.fund import FundRecord, FundScore
from models.portfolio import RiskLevel


RiskTolerance = Literal["conservative", "moderate", "aggressive"]
InvestmentHorizon = Literal["short", "medium", "long", "very-long"]
InvestmentGoal = Literal["preservation", "steady", "growth", "aggressive"]


class UserPreferences(BaseModel):
    """Investor preferences driving the recommender."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    risk_tolerance: RiskTolerance = Field(alias="riskTolerance")
    investment_horizon: InvestmentHorizon = Field(alias="investmentHorizon")
    investment_goal: InvestmentGoal = Field(alias="investmentGoal")
    max_drawdown: Optional[float] = Field(default=None, alias="maxDrawdown")
    min_return: Optional[float] = Field(default=None, alias="minReturn")


class FundRecommendation(BaseModel):
    """One recommended fund with its score and the reasons it matched."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    fund: FundRecord
    score: FundScore
    match_reasons: List[str] = Field(default_factory=list, alias="matchReasons")
    risk_level: RiskLevel = Field(alias="riskLevel")
    expected_return: float = Field(alias="expectedReturn")
    expected_risk: float = Field(alias="expectedRisk")
