"""Theoretical call pricing for sector ETF baskets."""

from etf_pricer.config import VERSION

__version__ = VERSION
