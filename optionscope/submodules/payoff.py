"""
Position Payoff
Break-even, expiration payoff curve and price x time P&L grid for a single long option
"""

from typing import List, Optional, Union
import numpy as np
import pandas as pd

from .config import DAYS_PER_YEAR, GRID_RANGE, RISK_FREE_RATE, Settings
from .models import OptionType, PayoffCurve, PayoffPoint
from .pricing import black_scholes_price, intrinsic_value

PAYOFF_STEPS = 100
GRID_PRICE_STEPS = 15
GRID_DAY_DIVISIONS = 8


def break_even(K: float, premium: float, option_type: Union[OptionType, str]) -> float:
    """Underlying price at expiration where a long option recovers its premium."""
    if OptionType(option_type) is OptionType.CALL:
        return K + premium
    return K - premium


def payoff_curve(K: float, premium: float, option_type: Union[OptionType, str],
                 current_price: float, price_range: Optional[float] = None,
                 settings: Optional[Settings] = None) -> PayoffCurve:
    """
    Expiration P&L per share of a long option across a price sweep.

    Parameters
    ----------
    K : float
        Strike price
    premium : float
        Premium paid per share
    option_type : OptionType or str
        'call' or 'put'
    current_price : float
        Current underlying price; the sweep is centered on it
    price_range : float, optional
        Fractional half-width of the sweep (0.3 = +/-30%); defaults to
        ``settings.payoff_range``
    settings : Settings, optional
        Loaded settings; built-in defaults when omitted

    Returns
    -------
    PayoffCurve
        101 points (100 equal steps), intrinsic value minus premium, in cents

    Examples
    --------
    >>> curve = payoff_curve(100, 5, 'call', current_price=100)
    >>> curve[0], curve[-1]
    (PayoffPoint(stock_price=70.0, pnl=-5.0, intrinsic=0.0),
     PayoffPoint(stock_price=130.0, pnl=25.0, intrinsic=30.0))
    """
    option_type = OptionType(option_type)
    if price_range is None:
        price_range = (settings or Settings()).payoff_range
    min_price = max(0.0, current_price * (1 - price_range))
    max_price = current_price * (1 + price_range)

    def evaluate(price: float) -> PayoffPoint:
        intrinsic = intrinsic_value(price, K, option_type)
        return PayoffPoint(
            stock_price=round(price, 2),
            pnl=round(intrinsic - premium, 2),
            intrinsic=round(intrinsic, 2),
        )

    return PayoffCurve(np.linspace(min_price, max_price, PAYOFF_STEPS + 1), evaluate)


def day_offsets(days_to_expiry: int, divisions: int = GRID_DAY_DIVISIONS) -> List[int]:
    """Day offsets from today to expiry in up to `divisions` steps, always ending on expiry day."""
    days_to_expiry = max(0, int(days_to_expiry))
    step = max(1, days_to_expiry // divisions)

    offsets = list(range(0, days_to_expiry + 1, step))
    if offsets[-1] != days_to_expiry:
        offsets.append(days_to_expiry)
    return offsets


def time_value_grid(K: float, premium: float, option_type: Union[OptionType, str],
                    current_price: float, days_to_expiry: int, sigma: float,
                    r: float = RISK_FREE_RATE) -> pd.DataFrame:
    """
    P&L per share of a long option as the underlying moves and time passes.

    Rows are 16 underlying prices from +25% down to -25% of the current price
    (never below $1); columns are day offsets from today (see ``day_offsets``).
    Each cell is the Black-Scholes value with the remaining time to expiry,
    minus the premium paid.

    Returns
    -------
    pd.DataFrame
        index ``stock_price`` (descending), columns ``day`` offsets
    """
    option_type = OptionType(option_type)
    min_price = max(1.0, current_price * (1 - GRID_RANGE))
    max_price = current_price * (1 + GRID_RANGE)

    prices = [round(p, 2) for p in np.linspace(max_price, min_price, GRID_PRICE_STEPS + 1)]
    days = day_offsets(days_to_expiry)

    rows = []
    for price in prices:
        row = []
        for day in days:
            T = (days_to_expiry - day) / DAYS_PER_YEAR
            value = black_scholes_price(price, K, T, r, sigma, option_type)
            row.append(round(value - premium, 2))
        rows.append(row)

    grid = pd.DataFrame(rows, index=pd.Index(prices, name='stock_price'), columns=pd.Index(days, name='day'))
    return grid
