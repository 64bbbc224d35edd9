# etf_pricer/catalog.py
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class SectorCatalogEntry:
    sector: str
    etf: str
    holdings: Tuple[str, ...]  # Representative holdings, in display order

    def __post_init__(self):
        # Accept lists from callers but store an immutable tuple
        object.__setattr__(self, "holdings", tuple(self.holdings))


DEFAULT_CATALOG: Tuple[SectorCatalogEntry, ...] = (
    SectorCatalogEntry("Technology", "XLK", ("AAPL", "MSFT", "NVDA")),
    SectorCatalogEntry("Healthcare", "XLV", ("JNJ", "PFE", "UNH")),
    SectorCatalogEntry("Finance", "XLF", ("JPM", "BAC", "WFC")),
    SectorCatalogEntry("Energy", "XLE", ("XOM", "CVX", "SLB")),
    SectorCatalogEntry("Consumer Discretionary", "XLY", ("AMZN", "TSLA", "HD")),
    SectorCatalogEntry("Communication", "XLC", ("GOOGL", "META", "VZ")),
    SectorCatalogEntry("Consumer Staples", "XLP", ("PG", "KO", "PEP")),
    SectorCatalogEntry("Industrials", "XLI", ("HON", "UPS", "CAT")),
    SectorCatalogEntry("Real Estate", "XLRE", ("PLD", "O", "AMT")),
    SectorCatalogEntry("Utilities", "XLU", ("NEE", "DUK", "SO")),
    SectorCatalogEntry("Large Cap", "SPY", ("AAPL", "MSFT", "AMZN")),
)
