# etf_pricer/black_scholes.py
import math
from typing import Tuple

from etf_pricer.errors import DegenerateInputError
from etf_pricer.utils import setup_logger

logger = setup_logger(__name__)

# Abramowitz & Stegun 7.1.26, |error| <= 1.5e-7
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429
_P = 0.3275911


def erf_approx(x: float) -> float:
    """Rational approximation of the Gauss error function."""
    sign = 1.0 if x >= 0 else -1.0
    x = abs(x)

    t = 1.0 / (1.0 + _P * x)
    y = 1.0 - (((((_A5 * t + _A4) * t + _A3) * t + _A2) * t + _A1) * t * math.exp(-x * x))

    return sign * y


def norm_cdf(x: float) -> float:
    """Standard normal CDF built on erf_approx."""
    return (1.0 + erf_approx(x / math.sqrt(2.0))) / 2.0


def validate_pricing_inputs(spot: float, strike: float, time_to_expiry_years: float,
                            volatility: float) -> None:
    """Raise DegenerateInputError if the closed form is undefined for these inputs."""
    values = {"spot": spot, "strike": strike, "T": time_to_expiry_years, "vol": volatility}
    for name, value in values.items():
        if value is None or not math.isfinite(value):
            raise DegenerateInputError(f"{name} must be a finite number, got {value}")
        if value <= 0:
            raise DegenerateInputError(f"{name} must be positive, got {value}")


def d1_d2(spot: float, strike: float, time_to_expiry_years: float,
          risk_free_rate: float, volatility: float) -> Tuple[float, float]:
    vol_sqrt_t = volatility * math.sqrt(time_to_expiry_years)
    d1 = (math.log(spot / strike) + (risk_free_rate + 0.5 * volatility ** 2) * time_to_expiry_years) / vol_sqrt_t
    d2 = d1 - vol_sqrt_t
    return d1, d2


def black_scholes_call(spot: float, strike: float, time_to_expiry_years: float,
                       risk_free_rate: float, volatility: float) -> float:
    """European call price. Not clamped; callers validate inputs."""
    d1, d2 = d1_d2(spot, strike, time_to_expiry_years, risk_free_rate, volatility)
    discount = math.exp(-risk_free_rate * time_to_expiry_years)
    return spot * norm_cdf(d1) - strike * discount * norm_cdf(d2)


def black_scholes_put(spot: float, strike: float, time_to_expiry_years: float,
                      risk_free_rate: float, volatility: float) -> float:
    """European put price via put-call parity form."""
    d1, d2 = d1_d2(spot, strike, time_to_expiry_years, risk_free_rate, volatility)
    discount = math.exp(-risk_free_rate * time_to_expiry_years)
    return strike * discount * norm_cdf(-d2) - spot * norm_cdf(-d1)


def black_scholes_price(spot: float, strike: float, time_to_expiry_years: float,
                        risk_free_rate: float, volatility: float,
                        option_type: str = "call") -> float:
    """
    Black-Scholes option pricing.

    Args:
        spot: Current asset price
        strike: Option strike price
        time_to_expiry_years: Time to expiry in years
        risk_free_rate: Annual risk-free rate (as decimal)
        volatility: Annualized volatility (as decimal, e.g., 0.25 for 25%)
        option_type: "call" or "put"

    Returns:
        Theoretical option premium
    """
    kind = option_type.lower()
    if kind == "call":
        price = black_scholes_call(spot, strike, time_to_expiry_years, risk_free_rate, volatility)
    elif kind == "put":
        price = black_scholes_put(spot, strike, time_to_expiry_years, risk_free_rate, volatility)
    else:
        raise ValueError(f"Invalid option type: {option_type}. Use 'call' or 'put'.")

    logger.debug(f"BS: {kind} S={spot:.2f} K={strike:.2f} T={time_to_expiry_years:.4f} "
                 f"r={risk_free_rate:.4f} vol={volatility:.4f} => {price:.4f}")
    return price
