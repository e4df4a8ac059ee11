"""
Fund Data Module

Provider interface and implementations supplying fund records to the
recommender, plus NAV-history analytics.
"""

from .fund_provider import FundDataProvider, InMemoryFundDataProvider
from .eastmoney import EastmoneyFundDataProvider
from .config import FUND_TYPES, get_type_label

__all__ = [
    'FundDataProvider',
    'InMemoryFundDataProvider',
    'EastmoneyFundDataProvider',
    'FUND_TYPES',
    'get_type_label',
]
