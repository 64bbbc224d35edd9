# etf_pricer/volatility_engine.py
import math
from typing import Optional, Sequence

import numpy as np

from etf_pricer import config
from etf_pricer.errors import DegenerateInputError
from etf_pricer.utils import setup_logger

logger = setup_logger(__name__)


def log_returns(prices: Sequence[float]) -> np.ndarray:
    """Daily log returns ln(p[i] / p[i-1]) of a chronological close series."""
    arr = np.asarray(prices, dtype=float)
    if arr.size < 2:
        return np.empty(0, dtype=float)
    if np.any(arr <= 0) or not np.all(np.isfinite(arr)):
        raise DegenerateInputError("close prices must be positive and finite")
    return np.log(arr[1:] / arr[:-1])


def calculate_historical_volatility(prices: Optional[Sequence[float]],
                                    trading_days: int = None,
                                    fallback: float = None) -> float:
    """
    Annualized close-to-close volatility.

    Uses the population variance of the log returns (divide by n) scaled by
    the number of trading days per year. Series shorter than two closes
    return the fallback volatility instead of failing.

    Args:
        prices: Closing prices, oldest first.
        trading_days: Annualization factor, defaults to config.TRADING_DAYS_PER_YEAR.
        fallback: Value returned for short series, defaults to config.FALLBACK_VOLATILITY.

    Returns:
        Annualized volatility as a decimal (0.25 for 25%).
    """
    if trading_days is None:
        trading_days = config.TRADING_DAYS_PER_YEAR
    if fallback is None:
        fallback = config.FALLBACK_VOLATILITY

    if prices is None or len(prices) < 2:
        logger.debug(f"Only {0 if prices is None else len(prices)} closes, using fallback vol {fallback:.4f}")
        return fallback

    returns = log_returns(prices)
    variance = float(np.var(returns))  # ddof=0
    return math.sqrt(variance * trading_days)
