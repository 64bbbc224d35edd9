# etf_pricer/portfolio_aggregator.py
import math
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, List, Optional, Sequence

from etf_pricer import config
from etf_pricer.black_scholes import black_scholes_call, validate_pricing_inputs
from etf_pricer.catalog import DEFAULT_CATALOG, SectorCatalogEntry
from etf_pricer.errors import DegenerateInputError, ProviderError
from etf_pricer.market_data import MarketDataProvider
from etf_pricer.models import EtfPricingResult, HoldingOutcome, HoldingQuote, PricingReport
from etf_pricer.utils import setup_logger
from etf_pricer.volatility_engine import calculate_historical_volatility

logger = setup_logger(__name__)


class PortfolioAggregator:
    """
    Prices a theoretical OTM call for every holding in the sector catalog and
    averages the prices per ETF.

    Each run is independent: the history window is anchored to a single
    timestamp taken at the start of the run and nothing is cached between runs.
    """

    def __init__(self, provider: MarketDataProvider,
                 catalog: Sequence[SectorCatalogEntry] = DEFAULT_CATALOG,
                 risk_free_rate: float = None,
                 maturity_years: float = None,
                 strike_multiplier: float = None,
                 history_days: int = None,
                 fallback_spot: float = None,
                 max_workers: int = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.provider = provider
        self.catalog = tuple(catalog)
        self.risk_free_rate = config.RISK_FREE_RATE if risk_free_rate is None else risk_free_rate
        self.maturity_years = config.MATURITY_YEARS if maturity_years is None else maturity_years
        self.strike_multiplier = config.STRIKE_MULTIPLIER if strike_multiplier is None else strike_multiplier
        self.history_days = config.HISTORY_WINDOW_DAYS if history_days is None else history_days
        self.fallback_spot = config.FALLBACK_SPOT_PRICE if fallback_spot is None else fallback_spot
        self.max_workers = max(1, config.MAX_WORKERS if max_workers is None else max_workers)
        self.clock = clock or datetime.now

    def history_window(self, now: datetime = None):
        """(start, end) dates of the trailing history window."""
        now = now or self.clock()
        return (now - timedelta(days=self.history_days)).date(), now.date()

    def fetch_holding(self, symbol: str, start: date, end: date) -> HoldingQuote:
        """Quote then history for one symbol. Any provider or payload failure surfaces as ProviderError."""
        try:
            quote = self.provider.get_quote(symbol)
            history = self.provider.get_history(symbol, start, end)
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(symbol, f"{type(e).__name__}: {e}", e) from e

        spot = self._usable_spot(symbol, getattr(quote, "spot_price", None))
        try:
            closes = [float(bar.close) for bar in history]
        except (AttributeError, TypeError, ValueError) as e:
            raise ProviderError(symbol, f"malformed history: {e}", e) from e

        return HoldingQuote(symbol=symbol, spot_price=spot, closes=closes)

    def _usable_spot(self, symbol: str, spot) -> float:
        """Missing or non-positive spot falls back; a non-numeric one is a malformed quote."""
        if spot is not None:
            try:
                spot = float(spot)
            except (TypeError, ValueError) as e:
                raise ProviderError(symbol, f"malformed spot price {spot!r}", e) from e
        if spot is None or not math.isfinite(spot) or spot <= 0:
            logger.info(f"{symbol}: no usable spot price ({spot}), using fallback {self.fallback_spot}")
            spot = self.fallback_spot
        return spot

    def price_holding(self, symbol: str, start: date, end: date) -> HoldingOutcome:
        """Price one holding, converting per-symbol failures into a failed outcome."""
        try:
            holding = self.fetch_holding(symbol, start, end)
            volatility = calculate_historical_volatility(holding.closes)
            strike = holding.spot_price * self.strike_multiplier
            validate_pricing_inputs(holding.spot_price, strike, self.maturity_years, volatility)
            price = black_scholes_call(holding.spot_price, strike, self.maturity_years,
                                       self.risk_free_rate, volatility)
            if not math.isfinite(price):
                raise DegenerateInputError(f"non-finite call price {price}")
        except (ProviderError, DegenerateInputError) as e:
            logger.warning(f"Skipping {symbol}: {type(e).__name__}: {e}")
            return HoldingOutcome(symbol=symbol, error=e)

        logger.debug(f"{symbol}: S={holding.spot_price:.2f} K={strike:.2f} vol={volatility:.4f} => {price:.4f}")
        return HoldingOutcome(symbol=symbol, price=price, spot=holding.spot_price,
                              strike=strike, volatility=volatility)

    @staticmethod
    def fold_outcomes(entry: SectorCatalogEntry, outcomes: Iterable[HoldingOutcome]) -> EtfPricingResult:
        """
        Reduce per-holding outcomes into the ETF result.

        The sum of successful prices is divided by the number of holdings
        configured for the ETF, not the number that succeeded, so failed
        lookups pull the average toward zero.

        A holding with a flat close history (zero volatility) is a failed
        outcome here, so it is left out of top_holdings. Pricing it through
        the closed form would instead list it with a call price of 0.
        """
        total = 0.0
        contributing: List[str] = []
        for outcome in outcomes:
            if outcome.succeeded:
                total += outcome.price
                contributing.append(outcome.symbol)

        configured = len(entry.holdings)
        average = total / configured if configured else 0.0
        return EtfPricingResult(sector=entry.sector, etf=entry.etf,
                                option_price=average, top_holdings=contributing)

    def price_entry(self, entry: SectorCatalogEntry, start: date = None, end: date = None) -> EtfPricingResult:
        if start is None or end is None:
            start, end = self.history_window()

        if self.max_workers > 1 and len(entry.holdings) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                outcomes = list(pool.map(lambda s: self.price_holding(s, start, end), entry.holdings))
        else:
            outcomes = [self.price_holding(symbol, start, end) for symbol in entry.holdings]

        result = self.fold_outcomes(entry, outcomes)
        failed = len(entry.holdings) - len(result.top_holdings)
        log = logger.warning if failed else logger.info
        log(f"{entry.etf} ({entry.sector}): avg call {result.option_price:.4f} "
            f"from {len(result.top_holdings)}/{len(entry.holdings)} holdings")
        return result

    def build_report(self) -> PricingReport:
        now = self.clock()
        start, end = self.history_window(now)
        logger.info(f"Pricing {len(self.catalog)} ETFs, history {start} to {end}")
        results = [self.price_entry(entry, start, end) for entry in self.catalog]
        return PricingReport(results=results, generated_at=now)
