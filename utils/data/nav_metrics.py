"""
Historical metrics from a fund's net asset value (NAV) series.

Pure functions over a pandas Series of NAVs indexed by date. Outputs use the
FundRecord conventions: returns, volatility and drawdown in percent.
"""

from __future__ import annotations
from typing import Dict, Any, Optional
import numpy as np
import pandas as pd

TRADING_DAYS_PER_YEAR = 252


def _clean(nav: pd.Series) -> pd.Series:
    nav = pd.to_numeric(nav, errors="coerce").dropna()
    nav = nav[nav > 0]
    return nav.sort_index()


def trailing_window(nav: pd.Series, years: float) -> pd.Series:
    """Slice of the series covering the last ``years`` years."""
    nav = _clean(nav)
    if nav.empty:
        return nav
    start = nav.index[-1] - pd.DateOffset(days=int(round(365.25 * years)))
    return nav[nav.index >= start]


def period_return(nav: pd.Series, years: float) -> Optional[float]:
    """
    Cumulative return over the last ``years`` years, in percent.

    Returns None when the series does not reach back that far.
    """
    nav = _clean(nav)
    if len(nav) < 2:
        return None
    target = nav.index[-1] - pd.DateOffset(days=int(round(365.25 * years)))
    # allow a week of slack for holidays at the start of the window
    if nav.index[0] > target + pd.Timedelta(days=7):
        return None
    base = nav[nav.index <= target]
    start_value = base.iloc[-1] if not base.empty else nav.iloc[0]
    return float((nav.iloc[-1] / start_value - 1) * 100)


def annualized_volatility(nav: pd.Series, periods_per_year: int = TRADING_DAYS_PER_YEAR) -> Optional[float]:
    """Annualized volatility of periodic returns, in percent."""
    returns = _clean(nav).pct_change().dropna()
    if len(returns) < 2:
        return None
    return float(returns.std() * np.sqrt(periods_per_year) * 100)


def max_drawdown(nav: pd.Series) -> Optional[float]:
    """Largest peak-to-trough decline, as a positive percent."""
    nav = _clean(nav)
    if len(nav) < 2:
        return None
    running_max = nav.cummax()
    drawdown = nav / running_max - 1
    return float(-drawdown.min() * 100)


def sharpe_ratio(
    nav: pd.Series,
    risk_free_rate: float = 0.03,
    periods_per_year: int = TRADING_DAYS_PER_YEAR
) -> Optional[float]:
    """Annualized excess return over annualized volatility."""
    nav = _clean(nav)
    if len(nav) < 3:
        return None
    returns = nav.pct_change().dropna()
    volatility = returns.std() * np.sqrt(periods_per_year)
    if not volatility or np.isnan(volatility):
        return None
    annualized_return = (nav.iloc[-1] / nav.iloc[0]) ** (periods_per_year / len(returns)) - 1
    return float((annualized_return - risk_free_rate) / volatility)


def compute_history_metrics(
    nav: pd.Series,
    lookback_years: float = 3,
    risk_free_rate: float = 0.03
) -> Dict[str, Any]:
    """
    Compute the historical FundRecord fields from a NAV series.

    Returns, drawdown, volatility and Sharpe ratio are included only when the
    series supports them. Risk figures use the trailing ``lookback_years``.

    Args:
        nav: NAV series indexed by date
        lookback_years: Window for volatility, drawdown and Sharpe ratio
        risk_free_rate: Annual risk-free rate for the Sharpe ratio

    Returns:
        Dict keyed by FundRecord wire names (return1Y, volatility, ...)
    """
    window = trailing_window(nav, lookback_years)
    metrics = {
        "return1Y": period_return(nav, 1),
        "return3Y": period_return(nav, 3),
        "return5Y": period_return(nav, 5),
        "volatility": annualized_volatility(window),
        "maxDrawdown": max_drawdown(window),
        "sharpeRatio": sharpe_ratio(window, risk_free_rate),
    }
    return {key: round(value, 4) for key, value in metrics.items() if value is not None}
