# etf_pricer/config.py

import logging
import os

# === CORE PLATFORM SETTINGS ===
PLATFORM_NAME = "ETF Option Pricer"
VERSION = "1.0"

# === PRICING ENGINE SETTINGS ===
RISK_FREE_RATE = 0.03  # 3% annual risk-free rate
MATURITY_YEARS = 0.5  # 6-month calls
STRIKE_MULTIPLIER = 1.05  # Strike 5% above spot (OTM call)
FALLBACK_SPOT_PRICE = 100.0  # Used when the quote has no usable price

# === VOLATILITY SETTINGS ===
HISTORY_WINDOW_DAYS = 30  # Calendar days of closes fed to the estimator
TRADING_DAYS_PER_YEAR = 252
FALLBACK_VOLATILITY = 0.20  # 20% when fewer than 2 closes are available

# === DATA PROVIDER SETTINGS ===
PROVIDER_BASE_URL = "https://query1.finance.yahoo.com/v8/finance/chart"
PROVIDER_TIMEOUT_SECONDS = 10.0
PROVIDER_USER_AGENT = "Mozilla/5.0 (compatible; etf-option-pricer/1.0)"
MAX_WORKERS = 1  # 1 = strictly sequential holding lookups

# === API SETTINGS ===
API_PORT = 8000
API_HOST = "localhost"

CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

# === LOGGING ===
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# === CONFIGURATION HELPERS ===
def get_config_value(key: str, default=None):
    """Helper function to get config values with defaults."""
    return globals().get(key, default)

# === ENVIRONMENT-BASED OVERRIDES ===
ENV_PREFIX = "ETF_PRICER_"


def _cast_env_value(raw: str, current):
    if isinstance(current, bool):
        return raw.lower() in ('true', '1', 'yes', 'on')
    if isinstance(current, int):
        return int(raw)
    if isinstance(current, float):
        return float(raw)
    if isinstance(current, list):
        return [item.strip() for item in raw.split(',')]
    return raw


def apply_env_overrides(namespace: dict, environ=None) -> list:
    """Replace UPPERCASE settings with ETF_PRICER_<NAME> values; returns the names overridden."""
    environ = os.environ if environ is None else environ
    applied = []
    for name, current in list(namespace.items()):
        if not name.isupper() or not isinstance(current, (str, int, float, bool, list)):
            continue
        raw = environ.get(f"{ENV_PREFIX}{name}")
        if raw is None:
            continue
        try:
            namespace[name] = _cast_env_value(raw, current)
            applied.append(name)
        except ValueError as e:
            logging.getLogger(__name__).warning(
                f"Ignoring {ENV_PREFIX}{name}={raw!r}: not a valid {type(current).__name__} ({e})")
    return applied


apply_env_overrides(globals())
