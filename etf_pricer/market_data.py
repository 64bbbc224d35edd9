# etf_pricer/market_data.py
from abc import ABC, abstractmethod
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, List, Optional

import requests

from etf_pricer import config
from etf_pricer.errors import ProviderError
from etf_pricer.models import PriceBar, SpotQuote
from etf_pricer.utils import setup_logger

logger = setup_logger(__name__)


class MarketDataProvider(ABC):
    """The two lookups the pricing pipeline needs from a market-data source."""

    @abstractmethod
    def get_quote(self, symbol: str) -> SpotQuote:
        """Current spot quote. Raises ProviderError on failure."""

    @abstractmethod
    def get_history(self, symbol: str, start: date, end: date) -> List[PriceBar]:
        """Daily closes between start and end (inclusive), oldest first. Raises ProviderError on failure."""


def _to_epoch(day: date) -> int:
    if isinstance(day, datetime):
        day = day.date()
    return int(datetime.combine(day, time.min, tzinfo=timezone.utc).timestamp())


class YahooChartClient(MarketDataProvider):
    """
    Client for the public Yahoo Finance chart endpoint.

    Every request carries an explicit timeout; transport errors, HTTP errors
    and malformed payloads are all raised as ProviderError so the caller can
    isolate them per symbol.
    """

    def __init__(self, session: Optional[requests.Session] = None,
                 base_url: str = None, timeout: float = None):
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": config.PROVIDER_USER_AGENT})
        self.base_url = (base_url or config.PROVIDER_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.PROVIDER_TIMEOUT_SECONDS

    def _fetch_chart(self, symbol: str, params: Dict) -> Dict:
        url = f"{self.base_url}/{symbol}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise ProviderError(symbol, f"request failed: {e}", e) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderError(symbol, f"invalid JSON (HTTP {response.status_code})", e) from e

        chart = payload.get("chart") if isinstance(payload, dict) else None
        if not chart:
            raise ProviderError(symbol, f"malformed chart payload (HTTP {response.status_code})")

        error = chart.get("error")
        if error:
            description = error.get("description") if isinstance(error, dict) else error
            raise ProviderError(symbol, f"provider error: {description}")

        if response.status_code != 200:
            raise ProviderError(symbol, f"HTTP {response.status_code}")

        results = chart.get("result") or []
        if not results:
            raise ProviderError(symbol, "no chart result")
        return results[0]

    def get_quote(self, symbol: str) -> SpotQuote:
        result = self._fetch_chart(symbol, {"range": "1d", "interval": "1d"})
        price = (result.get("meta") or {}).get("regularMarketPrice")
        try:
            spot = float(price) if price is not None else None
        except (TypeError, ValueError) as e:
            raise ProviderError(symbol, f"bad regularMarketPrice {price!r}", e) from e
        logger.debug(f"{symbol}: spot {spot}")
        return SpotQuote(symbol=symbol, spot_price=spot)

    def get_history(self, symbol: str, start: date, end: date) -> List[PriceBar]:
        params = {
            "period1": _to_epoch(start),
            "period2": _to_epoch(end) + int(timedelta(days=1).total_seconds()),
            "interval": "1d",
        }
        result = self._fetch_chart(symbol, params)

        timestamps = result.get("timestamp") or []
        quotes = (result.get("indicators") or {}).get("quote") or [{}]
        closes = quotes[0].get("close") or []
        if len(closes) != len(timestamps):
            raise ProviderError(symbol, f"{len(timestamps)} timestamps but {len(closes)} closes")

        bars = []
        for ts, close in zip(timestamps, closes):
            if close is None:  # non-trading or missing bar
                continue
            bar_date = datetime.fromtimestamp(ts, tz=timezone.utc).date()
            bars.append(PriceBar(date=bar_date, close=float(close)))

        bars.sort(key=lambda bar: bar.date)
        logger.debug(f"{symbol}: {len(bars)} closes from {start} to {end}")
        return bars
