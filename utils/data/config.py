"""
Fund Data Configuration

Endpoints, timeouts and category mappings for the fund-data providers.
"""

import os
from typing import Dict, List

# =============================================================================
# EASTMONEY ENDPOINTS
# =============================================================================

EASTMONEY_SEARCH_URL = os.getenv(
    "EASTMONEY_SEARCH_URL", "https://fund.eastmoney.com/js/fundcode_search.js"
)
EASTMONEY_HISTORY_URL = os.getenv(
    "EASTMONEY_HISTORY_URL", "https://fund.eastmoney.com/pingzhongdata/{code}.js"
)
REQUEST_TIMEOUT = float(os.getenv("FUND_DATA_TIMEOUT", "10.0"))
USER_AGENT = "Mozilla/5.0 (compatible; fund-analytics/0.1)"

MAX_SEARCH_RESULTS = 50            # Records returned per search_by_type call
HISTORY_LOOKBACK_YEARS = 3         # Window for volatility, drawdown, Sharpe

# =============================================================================
# FUND CATEGORIES
# =============================================================================

# Category tag -> Eastmoney type label prefix
FUND_TYPE_LABELS: Dict[str, str] = {
    "money-market": "货币型",
    "bond": "债券型",
    "mixed": "混合型",
    "equity": "股票型",
    "index": "指数型",
    "QDII": "QDII",
    "capital-protected": "保本型",
}

FUND_TYPES: List[str] = list(FUND_TYPE_LABELS)


def get_type_label(fund_type: str) -> str:
    """Eastmoney label for a category tag; unknown tags are used verbatim"""
    return FUND_TYPE_LABELS.get(fund_type, fund_type)

