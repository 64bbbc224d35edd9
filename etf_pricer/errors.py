# etf_pricer/errors.py
from typing import Optional


class PricingError(Exception):
    """Base class for errors raised by the pricing pipeline."""


class ProviderError(PricingError):
    """A quote or history lookup failed for one symbol."""

    def __init__(self, symbol: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"{symbol}: {message}")
        self.symbol = symbol
        self.message = message
        self.cause = cause


class DegenerateInputError(PricingError):
    """Pricing inputs for which the closed-form model is undefined."""
