"""
Black-Scholes Pricing
European option fair value and Greeks for a single call or put (no dividends)
"""

from typing import Optional, Tuple, Union
import numpy as np

from .config import DAYS_PER_YEAR
from .models import OptionType, Greeks
from .normal import normal_cdf, normal_pdf


# =============================================================================
# HELPERS
# =============================================================================

def intrinsic_value(S: float, K: float, option_type: Union[OptionType, str]) -> float:
    """Value of the option if exercised now: max(0, S-K) for calls, max(0, K-S) for puts."""
    if OptionType(option_type) is OptionType.CALL:
        return float(np.maximum(0.0, S - K))
    return float(np.maximum(0.0, K - S))


def d1_d2(S: float, K: float, T: float, r: float, sigma: float) -> Tuple[float, float]:
    """
    d1 and d2 terms of the Black-Scholes formula.

    Returns (0, 0) when T or sigma is not positive. Negative S or K yield NaN.
    """
    if T <= 0 or sigma <= 0:
        return 0.0, 0.0

    with np.errstate(divide='ignore', invalid='ignore'):
        vol_sqrt_t = sigma * np.sqrt(T)
        d1 = (np.log(np.float64(S) / K) + (r + 0.5 * sigma * sigma) * T) / vol_sqrt_t
        d2 = d1 - vol_sqrt_t
    return float(d1), float(d2)


# =============================================================================
# PRICE AND GREEKS
# =============================================================================

def black_scholes_price(S: float, K: float, T: float, r: float, sigma: float,
                        option_type: Union[OptionType, str]) -> float:
    """
    Black-Scholes fair value of a European option.

    Parameters
    ----------
    S : float
        Underlying price
    K : float
        Strike price
    T : float
        Time to expiration in years
    r : float
        Risk-free rate (annual, as decimal)
    sigma : float
        Volatility (annual, as decimal)
    option_type : OptionType or str
        'call' or 'put'

    Returns
    -------
    float
        Option value per share; intrinsic value when T or sigma is not positive

    Examples
    --------
    >>> black_scholes_price(100, 100, 0.25, 0.05, 0.20, 'call')
    4.61...
    """
    option_type = OptionType(option_type)
    if T <= 0 or sigma <= 0:
        return intrinsic_value(S, K, option_type)

    d1, d2 = d1_d2(S, K, T, r, sigma)
    with np.errstate(over='ignore', invalid='ignore'):
        discounted_strike = K * np.exp(-r * T)

        if option_type is OptionType.CALL:
            price = S * normal_cdf(d1) - discounted_strike * normal_cdf(d2)
        else:
            price = discounted_strike * normal_cdf(-d2) - S * normal_cdf(-d1)

    return float(price)


def calculate_greeks(S: float, K: float, T: float, r: float, sigma: float,
                     option_type: Union[OptionType, str]) -> Greeks:
    """
    Price and Greeks of a European option.

    Scaling: theta is per calendar day (annual / 365), vega is per 1 point of
    implied volatility and rho per 1 point of interest rate (both / 100).

    At or past expiration, or with zero volatility, delta collapses to a step
    function of moneyness and every other sensitivity is zero.
    """
    option_type = OptionType(option_type)
    is_call = option_type is OptionType.CALL

    if T <= 0 or sigma <= 0:
        if is_call:
            delta = 1.0 if S > K else 0.0
        else:
            delta = -1.0 if S < K else 0.0
        return Greeks(delta=delta, price=intrinsic_value(S, K, option_type))

    d1, d2 = d1_d2(S, K, T, r, sigma)

    with np.errstate(divide='ignore', over='ignore', invalid='ignore'):
        sqrt_t = np.sqrt(T)
        exp_rt = np.exp(-r * T)
        pdf_d1 = normal_pdf(d1)

        # Time decay from volatility is shared by calls and puts
        theta_vol = -S * pdf_d1 * sigma / (2 * sqrt_t)

        if is_call:
            delta = normal_cdf(d1)
            theta = theta_vol - r * K * exp_rt * normal_cdf(d2)
            rho = K * T * exp_rt * normal_cdf(d2)
        else:
            delta = normal_cdf(d1) - 1
            theta = theta_vol + r * K * exp_rt * normal_cdf(-d2)
            rho = -K * T * exp_rt * normal_cdf(-d2)

        gamma = pdf_d1 / (S * sigma * sqrt_t)
        vega = S * sqrt_t * pdf_d1

    return Greeks(
        delta=float(delta),
        gamma=float(gamma),
        theta=float(theta / DAYS_PER_YEAR),
        vega=float(vega / 100),
        rho=float(rho / 100),
        price=black_scholes_price(S, K, T, r, sigma, option_type),
    )


def position_pnl(S: float, K: float, T: float, r: float, sigma: float,
                 option_type: Union[OptionType, str], premium: float,
                 market_price: Optional[float] = None) -> float:
    """P&L per share of a long option: market price (or model value) minus premium paid."""
    if market_price is not None:
        return market_price - premium
    return black_scholes_price(S, K, T, r, sigma, option_type) - premium
