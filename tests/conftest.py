# tests/conftest.py
"""Shared fixtures: deterministic market-data providers and a fixed clock."""

import sys
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

# Make the project root importable without installing the package
sys.path.insert(0, str(Path(__file__).parent.parent))

from etf_pricer.catalog import SectorCatalogEntry
from etf_pricer.errors import ProviderError
from etf_pricer.market_data import MarketDataProvider
from etf_pricer.models import PriceBar, SpotQuote

FIXED_NOW = datetime(2026, 10, 18, 12, 0, 0)


class FakeMarketDataProvider(MarketDataProvider):
    """In-memory provider. Symbols in `failing` raise ProviderError on quote."""

    def __init__(self, spots: Dict[str, Optional[float]], histories: Dict[str, Sequence[float]],
                 failing: Sequence[str] = ()):
        self.spots = dict(spots)
        self.histories = {k: list(v) for k, v in histories.items()}
        self.failing = set(failing)
        self.calls: List[tuple] = []

    def get_quote(self, symbol: str) -> SpotQuote:
        self.calls.append(("quote", symbol))
        if symbol in self.failing or symbol not in self.spots:
            raise ProviderError(symbol, "unknown symbol")
        return SpotQuote(symbol=symbol, spot_price=self.spots[symbol])

    def get_history(self, symbol: str, start: date, end: date) -> List[PriceBar]:
        self.calls.append(("history", symbol, start, end))
        if symbol not in self.histories:
            raise ProviderError(symbol, "no history")
        closes = self.histories[symbol]
        return [PriceBar(date=start + timedelta(days=i), close=c) for i, c in enumerate(closes)]


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def small_catalog():
    return (
        SectorCatalogEntry("Technology", "XLK", ("AAPL", "MSFT", "NVDA")),
        SectorCatalogEntry("Energy", "XLE", ("XOM", "CVX", "SLB")),
    )


@pytest.fixture
def sample_histories():
    return {
        "AAPL": [170.0, 172.5, 171.0, 174.2, 173.8, 176.1],
        "MSFT": [410.0, 405.2, 412.8, 415.0, 411.3, 418.9],
        "NVDA": [120.0, 118.4, 125.9, 123.1, 129.7, 131.2],
        "XOM": [112.0, 113.1, 111.7, 110.9, 112.4, 114.0],
        "CVX": [155.0, 153.2, 156.8, 158.1, 157.5, 159.3],
        "SLB": [44.0, 43.1, 44.9, 45.3, 44.2, 46.0],
    }


@pytest.fixture
def sample_spots(sample_histories):
    return {symbol: closes[-1] for symbol, closes in sample_histories.items()}


@pytest.fixture
def make_provider(sample_spots, sample_histories):
    def _make(failing=(), spots=None, histories=None):
        return FakeMarketDataProvider(
            spots if spots is not None else sample_spots,
            histories if histories is not None else sample_histories,
            failing=failing,
        )
    return _make
