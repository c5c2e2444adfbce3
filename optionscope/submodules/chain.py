"""
Quote Chain Binding
Turn strategy templates into concrete legs using an option chain the caller already fetched
"""

from typing import Iterable, List, Optional
import logging
import numpy as np
import pandas as pd

from .config import Settings
from .models import DateLike, OptionLeg
from .templates import DEFAULT_WIDTH, StrategyTemplate, Term

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ['strike', 'bid', 'ask']

COLUMN_MAPPING = {
    'Strike': 'strike',
    'Bid': 'bid',
    'Ask': 'ask',
    'Last': 'lastPrice',
    'Last Price': 'lastPrice',
    'last': 'lastPrice',
    'Implied Volatility': 'impliedVolatility',
    'Expiration': 'expiration',
    'Expiration Date': 'expiration',
    'Type': 'type',
}


def _is_quoted(value: Optional[float]) -> bool:
    """A quote counts only when present, not NaN and positive."""
    return value is not None and bool(pd.notna(value)) and value > 0


def _expiry_day(value: DateLike) -> pd.Timestamp:
    """Timezone-naive (UTC) midnight of an expiration date."""
    ts = pd.Timestamp(value)
    if ts.tzinfo is not None:
        ts = ts.tz_convert(None)
    return ts.normalize()


def mid_price(bid: Optional[float], ask: Optional[float], last_price: Optional[float] = None) -> float:
    """Midpoint of the quote when both sides are quoted, otherwise the last trade (or 0)."""
    if _is_quoted(bid) and _is_quoted(ask):
        return (bid + ask) / 2
    if _is_quoted(last_price):
        return float(last_price)
    return 0.0


def prepare_chain(chain: pd.DataFrame) -> pd.DataFrame:
    """
    Standardize a quote table and add a ``mid`` column.

    Parameters
    ----------
    chain : pd.DataFrame
        One row per contract with at least strike, bid and ask; optionally
        lastPrice, impliedVolatility (decimal or '35.2%'), expiration and type

    Returns
    -------
    pd.DataFrame
        Copy of the chain with standardized columns

    Raises
    ------
    ValueError
        If required columns are missing
    """
    chain = chain.rename(columns=COLUMN_MAPPING)

    missing = [col for col in REQUIRED_COLUMNS if col not in chain.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    if 'lastPrice' in chain.columns:
        last = chain['lastPrice'].where(chain['lastPrice'] > 0, 0.0)
    else:
        last = 0.0
    both_quoted = (chain['bid'].fillna(0) > 0) & (chain['ask'].fillna(0) > 0)
    chain['mid'] = np.where(both_quoted, (chain['bid'] + chain['ask']) / 2, last)

    if 'impliedVolatility' in chain.columns and chain['impliedVolatility'].dtype == 'object':
        chain['impliedVolatility'] = pd.to_numeric(
            chain['impliedVolatility'].astype(str).str.replace('%', ''),
            errors='coerce'
        ) / 100

    if 'expiration' in chain.columns:
        if pd.api.types.is_numeric_dtype(chain['expiration']):
            # Unix timestamps in seconds
            expiration = pd.to_datetime(chain['expiration'], unit='s', errors='coerce', utc=True)
        else:
            expiration = pd.to_datetime(chain['expiration'], errors='coerce', utc=True)
        # Naive UTC days so '2025-03-21T00:00:00Z' and '2025-03-21' compare equal
        chain['expiration'] = expiration.dt.tz_convert(None).dt.normalize()

    if 'type' in chain.columns:
        chain['type'] = chain['type'].astype(str).str.lower()

    return chain


def nearest_strike(target_strike: float, available_strikes: Iterable[float]) -> float:
    """
    Closest available strike to the target.

    Raises
    ------
    ValueError
        If no strikes are available
    """
    strikes = list(available_strikes)
    if not strikes:
        raise ValueError("No available strikes provided")
    return min(strikes, key=lambda strike: abs(strike - target_strike))


def bind_template(template: StrategyTemplate, chain: pd.DataFrame, center_strike: float,
                  expiration: Optional[DateLike] = None, far_expiration: Optional[DateLike] = None,
                  width: float = DEFAULT_WIDTH, settings: Optional[Settings] = None) -> List[OptionLeg]:
    """
    Bind each leg shape of a template to the nearest quoted contract.

    Premium is the quote mid price; implied volatility comes from the chain
    when present, otherwise from ``settings.default_iv``. Filtering by
    expiration happens only when the chain carries an ``expiration`` column.

    Raises
    ------
    ValueError
        If the chain has no quotes for a leg's option type / expiry, or a time
        spread is missing its far expiration

    Examples
    --------
    >>> legs = bind_template(get_template('ironCondor'), chain_df, center_strike=450,
    ...                      expiration='2025-03-21')
    >>> Strategy(legs).metrics(current_price=450)
    """
    if template.requires_multiple_expiries and far_expiration is None:
        raise ValueError(f"{template.name} requires a far expiration date")

    settings = settings or Settings()
    chain = prepare_chain(chain)
    legs = []

    for shape, target in template.strikes(center_strike, width):
        leg_expiration = far_expiration if shape.term is Term.FAR else expiration
        quotes = chain
        if 'type' in quotes.columns:
            quotes = quotes[quotes['type'] == shape.option_type.value]
        if 'expiration' in quotes.columns and leg_expiration is not None:
            quotes = quotes[quotes['expiration'] == _expiry_day(leg_expiration)]

        if quotes.empty:
            raise ValueError(f"No {shape.option_type.value} quotes for expiration {leg_expiration}")

        strike = nearest_strike(target, quotes['strike'].unique())
        if strike != target:
            logger.warning(f"{template.name}: no {shape.option_type.value} quoted at {target:.2f}, "
                           f"using nearest strike {strike:.2f}")

        quote = quotes[quotes['strike'] == strike].iloc[0]
        iv = quote.get('impliedVolatility', settings.default_iv)
        if pd.isna(iv):
            iv = settings.default_iv

        legs.append(OptionLeg(
            option_type=shape.option_type,
            action=shape.action,
            strike=float(strike),
            premium=float(quote['mid']),
            quantity=shape.quantity,
            expiration=leg_expiration,
            implied_volatility=float(iv),
        ))

    return legs
