"""
Unit tests for the fund-data providers and NAV metrics
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import json
import unittest
from unittest.mock import MagicMock

import numpy as np
import pandas as pd
import requests

from operation.retry import RetryConfig, NETWORK_EXCEPTIONS
from utils.data import InMemoryFundDataProvider, EastmoneyFundDataProvider, FundDataProvider, FUND_TYPES
from utils.recommendation.config import RISK_TOLERANCE_FUND_TYPES
from utils.data.eastmoney import parse_js_variable, parse_work_time, parse_scale
from utils.data.nav_metrics import (
    period_return,
    annualized_volatility,
    max_drawdown,
    sharpe_ratio,
    compute_history_metrics,
)
from utils.errors import FundDataError
from models.fund import FundRecord

CATALOG_JS = (
    'var r = [["000001","HXCZHH","华夏成长混合","混合型-偏股","HUAXIACHENGZHANGHUNHE"],'
    '["000003","ZHKZZZQA","中海可转债债券A","债券型-混合二级","ZHONGHAIKEZHUANZHAIZHAIQUANA"],'
    '["000009","YFDTTLCHBA","易方达天天理财货币A","货币型-普通货币","YIFANGDA"],'
    '["000004","ZHKZZZQC","中海可转债债券C","债券型-混合二级","ZHONGHAIKEZHUANZHAIZHAIQUANC"]];'
)

NO_RETRY = RetryConfig(
    max_attempts=1, initial_delay=0, max_delay=0, multiplier=1,
    jitter=False, retryable_exceptions=NETWORK_EXCEPTIONS,
)


def make_response(text, error=None):
    response = MagicMock()
    response.text = text
    if error is not None:
        response.raise_for_status.side_effect = error
    return response


def history_js():
    dates = pd.bdate_range("2019-01-02", "2025-01-02")
    values = np.linspace(1.0, 2.0, len(dates))
    trend = [
        {"x": int(ts.value // 1_000_000), "y": round(float(v), 4), "equityReturn": 0, "unitMoney": ""}
        for ts, v in zip(dates, values)
    ]
    scale = {"categories": ["2024-06-30", "2024-09-30"],
             "series": [{"y": 40.1, "mom": "-1%"}, {"y": 45.6, "mom": "13.7%"}]}
    managers = [{"id": "30198", "name": "张三", "workTime": "8年又120天", "fundSize": "123.45亿(5只基金)"}]
    return (
        'var ishb=false;var fS_name = "华夏成长混合";var fS_code = "000001";'
        f"var Data_netWorthTrend = {json.dumps(trend)};/*累计净值走势*/"
        "var Data_ACWorthTrend = [];"
        f"var Data_fluctuationScale = {json.dumps(scale, ensure_ascii=False)};/*持有人结构*/"
        f"var Data_currentFundManager ={json.dumps(managers, ensure_ascii=False)} ;/*申购赎回*/"
        "var Data_buySedemption = {};"
    )


class TestNavMetrics(unittest.TestCase):
    """Test cases for the NAV metric functions."""

    def setUp(self):
        """Set up test fixtures."""
        dates = pd.date_range("2020-01-01", "2022-01-01", freq="D")
        values = np.ones(len(dates))
        values[-1] = 1.5
        self.flat_then_jump = pd.Series(values, index=dates)

    def test_period_return(self):
        """Return over one year compares the last NAV with the NAV a year earlier."""
        self.assertAlmostEqual(period_return(self.flat_then_jump, 1), 50.0)

    def test_period_return_too_short(self):
        """A series shorter than the period has no return."""
        self.assertIsNone(period_return(self.flat_then_jump, 3))
        self.assertIsNone(period_return(pd.Series([1.0], index=pd.to_datetime(["2024-01-01"])), 1))

    def test_max_drawdown(self):
        """Drawdown is the largest fall from a running peak, as a positive percent."""
        nav = pd.Series([1.0, 1.2, 0.9, 1.1], index=pd.date_range("2024-01-01", periods=4))
        self.assertAlmostEqual(max_drawdown(nav), 25.0)

    def test_constant_series(self):
        """A flat series has zero volatility and no Sharpe ratio."""
        nav = pd.Series(np.ones(30), index=pd.date_range("2024-01-01", periods=30))
        self.assertEqual(annualized_volatility(nav), 0.0)
        self.assertIsNone(sharpe_ratio(nav))

    def test_invalid_values_are_dropped(self):
        """Non-positive and non-numeric NAVs are ignored."""
        nav = pd.Series([1.0, None, 0.0, 1.2, 0.9, 1.1], index=pd.date_range("2024-01-01", periods=6))
        self.assertAlmostEqual(max_drawdown(nav), 25.0)

    def test_compute_history_metrics_omits_missing(self):
        """Only metrics the series supports are returned."""
        metrics = compute_history_metrics(self.flat_then_jump)
        self.assertIn("return1Y", metrics)
        self.assertNotIn("return3Y", metrics)
        self.assertNotIn("return5Y", metrics)
        self.assertIn("volatility", metrics)
        self.assertIn("maxDrawdown", metrics)

    def test_compute_history_metrics_empty(self):
        """An empty series gives no metrics."""
        self.assertEqual(compute_history_metrics(pd.Series(dtype=float)), {})


class TestEastmoneyParsing(unittest.TestCase):
    """Test cases for the Eastmoney script parsers."""

    def test_parse_js_variable(self):
        """Variables decode from JSON; missing ones give None."""
        text = 'var a = "x";var b = [1, 2];/*c*/var c = {"k": 1};'
        self.assertEqual(parse_js_variable(text, "a"), "x")
        self.assertEqual(parse_js_variable(text, "b"), [1, 2])
        self.assertEqual(parse_js_variable(text, "c"), {"k": 1})
        self.assertIsNone(parse_js_variable(text, "missing"))

    def test_parse_work_time(self):
        """Tenure strings convert to years."""
        self.assertEqual(parse_work_time("8年又120天"), round(8 + 120 / 365.0, 2))
        self.assertEqual(parse_work_time("3年"), 3.0)
        self.assertEqual(parse_work_time("200天"), round(200 / 365.0, 2))
        self.assertIsNone(parse_work_time(""))

    def test_recommendation_types_have_labels(self):
        """Every type the recommender searches maps to a catalog label."""
        for fund_types in RISK_TOLERANCE_FUND_TYPES.values():
            for fund_type in fund_types:
                self.assertIn(fund_type, FUND_TYPES)

    def test_parse_scale(self):
        """Managed scale is read from the amount in 亿."""
        self.assertEqual(parse_scale("123.45亿(5只基金)"), 123.45)
        self.assertIsNone(parse_scale("--"))


class TestEastmoneyFundDataProvider(unittest.TestCase):
    """Test cases for EastmoneyFundDataProvider class."""

    def setUp(self):
        """Set up test fixtures."""
        self.session = MagicMock()
        self.provider = EastmoneyFundDataProvider(session=self.session, retry_config=NO_RETRY)

    def test_implements_provider_protocol(self):
        """The Eastmoney provider satisfies the provider protocol."""
        self.assertIsInstance(self.provider, FundDataProvider)

    def test_search_by_type_filters_catalog(self):
        """Searches match the category label prefix and tag the records."""
        self.session.get.return_value = make_response(CATALOG_JS)

        bonds = self.provider.search_by_type("bond")
        self.assertEqual([f.code for f in bonds], ["000003", "000004"])
        self.assertEqual(bonds[0].type, "bond")
        self.assertEqual(bonds[0].name, "中海可转债债券A")

        mixed = self.provider.search_by_type("mixed")
        self.assertEqual([f.code for f in mixed], ["000001"])
        self.assertEqual(self.provider.search_by_type("QDII"), [])

        # catalog fetched once
        self.assertEqual(self.session.get.call_count, 1)

    def test_search_respects_max_results(self):
        """No more than ``max_results`` records are returned."""
        self.session.get.return_value = make_response(CATALOG_JS)
        provider = EastmoneyFundDataProvider(session=self.session, retry_config=NO_RETRY, max_results=1)
        self.assertEqual(len(provider.search_by_type("bond")), 1)

    def test_unparseable_catalog_raises(self):
        """A catalog without the expected variable raises FundDataError."""
        self.session.get.return_value = make_response("<html>maintenance</html>")
        with self.assertRaises(FundDataError):
            self.provider.search_by_type("bond")

    def test_http_error_raises_fund_data_error(self):
        """HTTP errors surface as FundDataError."""
        self.session.get.return_value = make_response("", requests.HTTPError("503 Server Error"))
        with self.assertRaises(FundDataError) as ctx:
            self.provider.search_by_type("bond")
        self.assertEqual(ctx.exception.source, "eastmoney")

    def test_network_errors_are_retried(self):
        """Connection failures are retried before succeeding."""
        retry = RetryConfig(
            max_attempts=2, initial_delay=0, max_delay=0, multiplier=1,
            jitter=False, retryable_exceptions=NETWORK_EXCEPTIONS,
        )
        self.session.get.side_effect = [requests.ConnectionError("reset"), make_response(CATALOG_JS)]
        provider = EastmoneyFundDataProvider(session=self.session, retry_config=retry)
        self.assertEqual(len(provider.search_by_type("bond")), 2)
        self.assertEqual(self.session.get.call_count, 2)

    def test_exhausted_retries_raise_fund_data_error(self):
        """Persistent connection failures raise FundDataError."""
        self.session.get.side_effect = requests.ConnectionError("down")
        with self.assertRaises(FundDataError):
            self.provider.search_by_type("bond")

    def test_historical_metrics(self):
        """History scripts yield NAV, scale and manager metrics."""
        self.session.get.return_value = make_response(history_js())
        metrics = self.provider.get_historical_metrics("000001")

        self.assertEqual(metrics["fundScale"], 45.6)
        self.assertEqual(metrics["managerExperience"], round(8 + 120 / 365.0, 2))
        self.assertEqual(metrics["managerScale"], 123.45)
        for key in ("return1Y", "return3Y", "return5Y", "volatility", "maxDrawdown", "sharpeRatio"):
            self.assertIn(key, metrics)
        self.assertGreater(metrics["return1Y"], 0)
        self.assertGreater(metrics["return5Y"], metrics["return1Y"])
        self.assertAlmostEqual(metrics["maxDrawdown"], 0.0)

        url = self.session.get.call_args[0][0]
        self.assertIn("000001", url)

    def test_historical_metrics_merge_into_record(self):
        """Provider metrics merge into a FundRecord by wire name."""
        self.session.get.return_value = make_response(history_js())
        record = FundRecord(code="000001", type="mixed").merge(
            self.provider.get_historical_metrics("000001")
        )
        self.assertEqual(record.fund_scale, 45.6)
        self.assertIsNotNone(record.return_3y)

    def test_historical_metrics_missing_sections(self):
        """Scripts without known variables give empty metrics."""
        self.session.get.return_value = make_response("var nothing = 1;")
        self.assertEqual(self.provider.get_historical_metrics("000001"), {})


class TestInMemoryFundDataProvider(unittest.TestCase):
    """Test cases for InMemoryFundDataProvider class."""

    def test_search_and_metrics(self):
        """Searches filter by type; metrics come back as copies."""
        provider = InMemoryFundDataProvider(
            [FundRecord(code="1", type="bond"), FundRecord(code="2", type="equity")],
            metrics={"1": {"return1Y": 5}},
        )
        self.assertEqual([f.code for f in provider.search_by_type("bond")], ["1"])
        self.assertEqual(provider.search_by_type("QDII"), [])
        metrics = provider.get_historical_metrics("1")
        metrics["return1Y"] = 99
        self.assertEqual(provider.get_historical_metrics("1"), {"return1Y": 5})
        self.assertEqual(provider.get_historical_metrics("2"), {})
        self.assertEqual(provider.search_calls, ["bond", "QDII"])

    def test_failing_types(self):
        """Failing types raise FundDataError."""
        provider = InMemoryFundDataProvider([], failing_types=["bond"])
        with self.assertRaises(FundDataError):
            provider.search_by_type("bond")


if __name__ == '__main__':
    unittest.main()
