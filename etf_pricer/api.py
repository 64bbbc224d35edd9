# etf_pricer/api.py

import logging
import threading
import time
from typing import List

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from etf_pricer import config
from etf_pricer.black_scholes import black_scholes_price, validate_pricing_inputs
from etf_pricer.errors import DegenerateInputError
from etf_pricer.market_data import YahooChartClient
from etf_pricer.portfolio_aggregator import PortfolioAggregator
from etf_pricer.utils import setup_logger

logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logger = setup_logger(__name__)


# --- Pydantic Models ---
class EtfRecord(BaseModel):
    sector: str
    etf: str
    optionPrice: float
    topHoldings: List[str]


class BlackScholesRequest(BaseModel):
    spot: float
    strike: float
    time_to_expiry_years: float
    risk_free_rate: float = config.RISK_FREE_RATE
    volatility: float
    option_type: str = Field("call", pattern="^(call|put)$")


# --- FastAPI Application Setup ---
app = FastAPI(
    title=f"{config.PLATFORM_NAME} API",
    version=config.VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    allow_credentials=False
)


@app.middleware("http")
async def log_requests_middleware(request: Request, call_next):
    start_time = time.perf_counter()
    response = await call_next(request)
    process_time = time.perf_counter() - start_time
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} in {process_time:.3f}s")
    return response


_aggregator_lock = threading.Lock()


def get_aggregator(request: Request) -> PortfolioAggregator:
    """The app-wide aggregator; built against the live provider if none was installed."""
    with _aggregator_lock:
        aggregator = getattr(request.app.state, "aggregator", None)
        if aggregator is None:
            aggregator = PortfolioAggregator(provider=YahooChartClient())
            request.app.state.aggregator = aggregator
            logger.info("PortfolioAggregator created with YahooChartClient")
    return aggregator


# --- API Endpoints ---
@app.get("/")
async def health_check_endpoint():
    """Health check endpoint."""
    return {"status": "ok", "version": config.VERSION}


@app.get("/api/etf-data", response_model=List[EtfRecord])
def etf_data_endpoint(request: Request):
    """Average theoretical call price per sector ETF."""
    aggregator = get_aggregator(request)
    try:
        report = aggregator.build_report()
    except Exception as e:
        logger.error(f"ETF report generation failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Report error: {str(e)}")
    return report.to_records()


@app.post("/blackscholes/calculate")
async def calculate_black_scholes_endpoint(request_data: BlackScholesRequest):
    """Price a single European option."""
    try:
        validate_pricing_inputs(request_data.spot, request_data.strike,
                                request_data.time_to_expiry_years, request_data.volatility)
    except DegenerateInputError as e:
        raise HTTPException(status_code=400, detail=str(e))

    price = black_scholes_price(
        request_data.spot,
        request_data.strike,
        request_data.time_to_expiry_years,
        request_data.risk_free_rate,
        request_data.volatility,
        request_data.option_type,
    )
    return {"price": price, "option_type": request_data.option_type}
