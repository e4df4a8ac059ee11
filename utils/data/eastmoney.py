# data/eastmoney.py
from __future__ import annotations
from typing import Dict, Any, List, Optional
import json
import logging
import re
import time

import pandas as pd
import requests

from models.fund import FundRecord
from operation.logging import log_function_call
from operation.retry import retry_from_config, RetryConfig, FUND_DATA_RETRY_CONFIG
from utils.data.config import (
    EASTMONEY_SEARCH_URL,
    EASTMONEY_HISTORY_URL,
    REQUEST_TIMEOUT,
    USER_AGENT,
    MAX_SEARCH_RESULTS,
    HISTORY_LOOKBACK_YEARS,
    get_type_label,
)
from utils.data.nav_metrics import compute_history_metrics
from utils.errors import FundDataError

logger = logging.getLogger(__name__)

_CATALOG_PATTERN = re.compile(r"var r = (\[.*?\]);", re.S)
_WORK_TIME_PATTERN = re.compile(r"(?:(\d+)年)?(?:又)?(?:(\d+)天)?")
_SCALE_PATTERN = re.compile(r"([\d.]+)亿")


def parse_js_variable(text: str, name: str) -> Optional[Any]:
    """
    Extract and decode ``var <name> = <json>;`` from an Eastmoney script.

    Returns None when the variable is missing or not valid JSON.
    """
    match = re.search(
        rf"var\s+{re.escape(name)}\s*=\s*(.*?)\s*;\s*(?:/\*|var\s|$)", text, re.S
    )
    if not match:
        return None
    raw = match.group(1)
    try:
        return json.loads(raw)
    except ValueError:
        # scalar strings are sometimes single-quoted
        if len(raw) >= 2 and raw[0] == raw[-1] == "'":
            return raw[1:-1]
        return None


def parse_work_time(work_time: str) -> Optional[float]:
    """Convert a tenure such as '8年又120天' to years."""
    if not work_time:
        return None
    match = _WORK_TIME_PATTERN.match(work_time.strip())
    if not match or not any(match.groups()):
        return None
    years = int(match.group(1) or 0)
    days = int(match.group(2) or 0)
    return round(years + days / 365.0, 2)


def parse_scale(text: str) -> Optional[float]:
    """Extract the amount in 亿 from strings such as '123.45亿(5只基金)'."""
    match = _SCALE_PATTERN.search(text or "")
    return float(match.group(1)) if match else None


def nav_series_from_trend(trend: List[Dict[str, Any]]) -> pd.Series:
    """Build a date-indexed NAV series from Data_netWorthTrend points."""
    if not trend:
        return pd.Series(dtype=float)
    frame = pd.DataFrame(trend)
    if "x" not in frame or "y" not in frame:
        return pd.Series(dtype=float)
    index = pd.to_datetime(frame["x"], unit="ms")
    return pd.Series(frame["y"].astype(float).values, index=index, name="nav")


class EastmoneyFundDataProvider:
    """
    Fund-data provider for the public Eastmoney fund scripts.

    Searches use the full fund catalog (fetched once per provider and cached);
    historical metrics are derived from the per-fund ``pingzhongdata`` script.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        retry_config: RetryConfig = FUND_DATA_RETRY_CONFIG,
        timeout: float = REQUEST_TIMEOUT,
        max_results: int = MAX_SEARCH_RESULTS
    ):
        """
        Initialize the provider.

        Args:
            session: Optional requests session (a new one is created if None)
            retry_config: Retry policy for network failures
            timeout: Per-request timeout in seconds
            max_results: Maximum records returned by one search
        """
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)
        self.timeout = timeout
        self.max_results = max_results
        self._catalog: Optional[List[List[str]]] = None
        self._fetch = retry_from_config(retry_config)(self._fetch_text)

    def _fetch_text(self, url: str) -> str:
        response = self.session.get(
            url, params={"rt": int(time.time() * 1000)}, timeout=self.timeout
        )
        response.raise_for_status()
        response.encoding = "utf-8"
        return response.text

    def _get(self, url: str) -> str:
        try:
            return self._fetch(url)
        except (requests.RequestException, OSError) as e:
            raise FundDataError(f"Request to {url} failed: {e}", source="eastmoney") from e

    def load_catalog(self) -> List[List[str]]:
        """
        Fetch and cache the fund catalog.

        Returns:
            List of [code, pinyin, name, type_label, full_pinyin] entries

        Raises:
            FundDataError: If the catalog cannot be fetched or parsed
        """
        if self._catalog is not None:
            return self._catalog

        text = self._get(EASTMONEY_SEARCH_URL)
        match = _CATALOG_PATTERN.search(text)
        if not match:
            raise FundDataError("Unable to parse fund catalog", source="eastmoney")
        try:
            self._catalog = json.loads(match.group(1))
        except ValueError as e:
            raise FundDataError(f"Invalid fund catalog payload: {e}", source="eastmoney") from e

        logger.info(f"Loaded {len(self._catalog)} funds from Eastmoney catalog")
        return self._catalog

    def search_by_type(self, fund_type: str) -> List[FundRecord]:
        """
        Find funds of a category.

        Args:
            fund_type: Category tag (e.g. 'bond', 'QDII')

        Returns:
            Up to ``max_results`` FundRecords, possibly empty
        """
        label = get_type_label(fund_type)
        results = []
        for entry in self.load_catalog():
            if len(entry) < 4:
                continue
            code, _, name, type_label = entry[:4]
            if type_label and type_label.startswith(label):
                results.append(FundRecord(code=code, name=name, type=fund_type))
                if len(results) >= self.max_results:
                    break

        logger.debug(f"search_by_type({fund_type}) matched {len(results)} funds")
        return results

    @log_function_call
    def get_historical_metrics(self, code: str) -> Dict[str, Any]:
        """
        Derive historical FundRecord fields for one fund.

        Args:
            code: Fund code

        Returns:
            Partial FundRecord fields keyed by wire name; missing data is omitted
        """
        text = self._get(EASTMONEY_HISTORY_URL.format(code=code))
        metrics: Dict[str, Any] = {}

        trend = parse_js_variable(text, "Data_netWorthTrend")
        if isinstance(trend, list):
            metrics.update(
                compute_history_metrics(
                    nav_series_from_trend(trend), lookback_years=HISTORY_LOOKBACK_YEARS
                )
            )

        scale = parse_js_variable(text, "Data_fluctuationScale")
        if isinstance(scale, dict) and scale.get("series"):
            latest = scale["series"][-1]
            if isinstance(latest, dict) and latest.get("y") is not None:
                metrics["fundScale"] = float(latest["y"])

        managers = parse_js_variable(text, "Data_currentFundManager")
        if isinstance(managers, list) and managers:
            lead = managers[0]
            experience = parse_work_time(lead.get("workTime", ""))
            if experience is not None:
                metrics["managerExperience"] = experience
            manager_scale = parse_scale(lead.get("fundSize", ""))
            if manager_scale is not None:
                metrics["managerScale"] = manager_scale

        return metrics
