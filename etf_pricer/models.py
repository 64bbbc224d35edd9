# etf_pricer/models.py
import json
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional

import pandas as pd


# --- Provider-side records ---
@dataclass
class SpotQuote:
    symbol: str
    spot_price: Optional[float]  # None when the provider has no market price


@dataclass
class PriceBar:
    date: date
    close: float


@dataclass
class HoldingQuote:
    """Spot and trailing closes for one holding, fetched fresh per run."""
    symbol: str
    spot_price: float
    closes: List[float] = field(default_factory=list)


# --- Pipeline results ---
@dataclass
class HoldingOutcome:
    """Result of pricing a single holding: a price or the error that stopped it."""
    symbol: str
    price: Optional[float] = None
    spot: Optional[float] = None
    strike: Optional[float] = None
    volatility: Optional[float] = None
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.price is not None


@dataclass
class EtfPricingResult:
    sector: str
    etf: str
    option_price: float
    top_holdings: List[str]

    def dict(self) -> Dict:
        return {
            "sector": self.sector,
            "etf": self.etf,
            "optionPrice": self.option_price,
            "topHoldings": list(self.top_holdings),
        }


@dataclass
class PricingReport:
    results: List[EtfPricingResult]
    generated_at: Optional[datetime] = None

    def to_records(self) -> List[Dict]:
        return [r.dict() for r in self.results]

    def to_json(self) -> str:
        return json.dumps(self.to_records(), separators=(",", ":"))

    def to_dataframe(self) -> pd.DataFrame:
        rows = [
            {
                "sector": r.sector,
                "etf": r.etf,
                "option_price": r.option_price,
                "top_holdings": ", ".join(r.top_holdings),
            }
            for r in self.results
        ]
        return pd.DataFrame(rows, columns=["sector", "etf", "option_price", "top_holdings"])

    def __len__(self):
        return len(self.results)
