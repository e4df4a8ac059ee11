# data/fund_provider.py
from __future__ import annotations
from typing import Dict, Any, List, Iterable, Optional, Protocol, runtime_checkable
import logging

from models.fund import FundRecord
from utils.errors import FundDataError

logger = logging.getLogger(__name__)


@runtime_checkable
class FundDataProvider(Protocol):
    """
    Source of fund records for the recommender.

    ``search_by_type`` returns an empty list when nothing matches and raises
    FundDataError only for genuine failures (network, unparseable payload).
    ``get_historical_metrics`` returns partial FundRecord fields keyed by
    wire name; any field may be absent.
    """

    def search_by_type(self, fund_type: str) -> List[FundRecord]:
        ...

    def get_historical_metrics(self, code: str) -> Dict[str, Any]:
        ...


class InMemoryFundDataProvider:
    """
    Provider backed by a fixed list of records.

    Used for tests and offline runs. Types listed in ``failing_types`` raise
    FundDataError to simulate an unreachable upstream.
    """

    def __init__(
        self,
        funds: Iterable[FundRecord],
        metrics: Optional[Dict[str, Dict[str, Any]]] = None,
        failing_types: Iterable[str] = ()
    ):
        """
        Initialize the in-memory provider.

        Args:
            funds: Records to serve
            metrics: Optional fund code -> partial metrics for enrichment
            failing_types: Category tags whose searches raise FundDataError
        """
        self.funds = list(funds)
        self.metrics = dict(metrics or {})
        self.failing_types = set(failing_types)
        self.search_calls: List[str] = []

    def search_by_type(self, fund_type: str) -> List[FundRecord]:
        self.search_calls.append(fund_type)
        if fund_type in self.failing_types:
            raise FundDataError(f"Search failed for type {fund_type}", source="memory")
        return [fund for fund in self.funds if fund.type == fund_type]

    def get_historical_metrics(self, code: str) -> Dict[str, Any]:
        return dict(self.metrics.get(code, {}))
