"""
Exception hierarchy for the fund analytics packages.

The scoring and risk engines are total over well-typed input and raise none
of these; they are raised by data providers and boundary validation.
"""


class FundAnalyticsError(Exception):
    """Base class for all fund analytics errors"""


class FundDataError(FundAnalyticsError):
    """A fund-data provider could not be reached or returned unusable data"""

    def __init__(self, message: str, source: str = None):
        super().__init__(message)
        self.source = source


class PortfolioValidationError(FundAnalyticsError, ValueError):
    """Portfolio holdings violate the weight contract"""
