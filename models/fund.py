# models/fund.py
from __future__ import annotations
from typing import Dict, Any, Optional, Literal
from pydantic import BaseModel, ConfigDict, Field


Rating = Literal["AAA", "AA", "A", "BBB", "BB", "B", "CCC"]


class FundRecord(BaseModel):
    """
    Identity and historical data for one fund, as returned by a fund-data
    provider.

    Percent fields use percent units (12.5 means 12.5%). Every historical
    field is optional; a missing field scores as neutral.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    code: str
    name: str = ""
    type: str = ""

    # Performance
    return_1y: Optional[float] = Field(default=None, alias="return1Y")
    return_3y: Optional[float] = Field(default=None, alias="return3Y")
    return_5y: Optional[float] = Field(default=None, alias="return5Y")

    # Risk
    volatility: Optional[float] = None
    max_drawdown: Optional[float] = Field(default=None, alias="maxDrawdown")
    sharpe_ratio: Optional[float] = Field(default=None, alias="sharpeRatio")

    # Manager
    manager_experience: Optional[float] = Field(default=None, alias="managerExperience")
    manager_scale: Optional[float] = Field(default=None, alias="managerScale")

    # Cost and size
    management_fee: Optional[float] = Field(default=None, alias="managementFee")
    fund_scale: Optional[float] = Field(default=None, alias="fundScale")

    # Holdings
    holdings_concentration: Optional[float] = Field(default=None, alias="holdingsConcentration")
    turnover_rate: Optional[float] = Field(default=None, alias="turnoverRate")

    def merge(self, partial: Dict[str, Any]) -> "FundRecord":
        """
        Return a copy with the non-null fields of ``partial`` applied.

        Keys may be either the camelCase wire names or the Python field names.
        Unknown keys are ignored.
        """
        aliases = {
            field.alias or name: name
            for name, field in type(self).model_fields.items()
        }
        updates = {}
        for key, value in (partial or {}).items():
            if value is None:
                continue
            name = aliases.get(key, key)
            if name in type(self).model_fields and name != "code":
                updates[name] = value
        if not updates:
            return self
        data = self.model_dump()
        data.update(updates)
        return type(self).model_validate(data)


class FundScore(BaseModel):
    """Multi-factor evaluation of one fund. Sub-scores and total lie in [0, 100]."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    code: str
    name: str = ""
    performance: float
    risk: float
    manager: float
    fee: float
    size: float
    holdings: float
    total_score: float = Field(alias="totalScore")
    rating: Rating
