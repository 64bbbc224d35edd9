# etf_pricer/main.py
import argparse
import sys

import pandas as pd
import uvicorn

from etf_pricer import config
from etf_pricer.market_data import YahooChartClient
from etf_pricer.portfolio_aggregator import PortfolioAggregator
from etf_pricer.utils import setup_logger

logger = setup_logger(__name__)


def run_once(as_json: bool = False, out=None, provider=None) -> int:
    """Build one report (against the live provider by default) and print it."""
    out = out or sys.stdout
    aggregator = PortfolioAggregator(provider=provider or YahooChartClient())
    report = aggregator.build_report()

    if as_json:
        out.write(report.to_json() + "\n")
    else:
        with pd.option_context("display.width", 120, "display.float_format", "{:.4f}".format):
            out.write(report.to_dataframe().to_string(index=False) + "\n")
    return 0


def serve() -> int:
    logger.info(f"Starting {config.PLATFORM_NAME} API on {config.API_HOST}:{config.API_PORT}")
    uvicorn.run(
        "etf_pricer.api:app",
        host=config.API_HOST,
        port=config.API_PORT,
        log_level=config.LOG_LEVEL.lower(),
    )
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=f"{config.PLATFORM_NAME} {config.VERSION}")
    parser.add_argument("--once", action="store_true", help="print one report and exit instead of serving the API")
    parser.add_argument("--json", action="store_true", help="with --once, print JSON records instead of a table")
    args = parser.parse_args(argv)

    if args.once:
        return run_once(as_json=args.json)
    return serve()


if __name__ == "__main__":
    sys.exit(main())
