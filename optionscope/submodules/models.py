"""
Option Data Models
Enums and immutable records shared by the pricer, the payoff generators and the strategy engine
"""

from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Sequence, Tuple, Union
from dataclasses import dataclass, asdict, field, replace as dc_replace
from datetime import date, datetime
from enum import Enum
import pandas as pd

from .config import RISK_FREE_RATE, DEFAULT_IV

DateLike = Union[date, datetime, str]


# =============================================================================
# ENUMS
# =============================================================================

class OptionType(Enum):
    """Option type enumeration"""
    CALL = 'call'
    PUT = 'put'


class Action(Enum):
    """Whether a leg is bought (long) or sold (short)"""
    BUY = 'buy'
    SELL = 'sell'

    @property
    def sign(self) -> int:
        return 1 if self is Action.BUY else -1


# =============================================================================
# POSITIONS AND MARKET
# =============================================================================

@dataclass(frozen=True)
class OptionLeg:
    """
    One option contract line within a position or strategy.

    strike: strike price
    premium: price per share paid (buy) or received (sell)
    quantity: number of contracts, each covering 100 shares
    expiration: expiry date; ISO strings are accepted
    implied_volatility: annualized, as decimal (0.30 = 30%)

    Construction never raises; call ``validate()`` before handing user input
    to the engine. Invalid legs price to NaN rather than failing.
    """
    option_type: OptionType
    action: Action
    strike: float
    premium: float
    quantity: int = 1
    expiration: Optional[DateLike] = None
    implied_volatility: float = DEFAULT_IV

    def validate(self) -> Tuple[bool, Optional[str]]:
        """
        Validate leg parameters.

        Returns
        -------
        tuple
            (is_valid, error_message)
        """
        if not isinstance(self.option_type, OptionType):
            return False, "Option type must be an OptionType"
        if not isinstance(self.action, Action):
            return False, "Action must be an Action"
        if not self.strike > 0:
            return False, "Strike must be positive"
        if not self.premium >= 0:
            return False, "Premium cannot be negative"
        if not isinstance(self.quantity, int) or self.quantity < 1:
            return False, "Quantity must be a positive integer"
        if not self.implied_volatility >= 0:
            return False, "Implied volatility cannot be negative"
        if self.expiration is not None and pd.isna(pd.to_datetime(self.expiration, errors='coerce')):
            return False, f"Unparsable expiration date: {self.expiration!r}"
        return True, None

    def replace(self, **changes) -> 'OptionLeg':
        """Return a copy of the leg with the given fields changed."""
        return dc_replace(self, **changes)

    @property
    def sign(self) -> int:
        return self.action.sign

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'OptionLeg':
        """
        Build a leg from a UI / quote-layer mapping.

        Accepts both camelCase keys (``optionType``, ``qty``, ``iv``) and the
        dataclass field names.
        """
        def pick(*keys, default=None):
            for key in keys:
                if key in data and data[key] is not None:
                    return data[key]
            return default

        return cls(
            option_type=OptionType(pick('option_type', 'optionType')),
            action=Action(pick('action', default='buy')),
            strike=float(pick('strike')),
            premium=float(pick('premium', default=0.0)),
            quantity=int(pick('quantity', 'qty', default=1)),
            expiration=pick('expiration'),
            implied_volatility=float(pick('implied_volatility', 'impliedVolatility', 'iv', default=DEFAULT_IV)),
        )


@dataclass(frozen=True)
class MarketState:
    """Market inputs for one evaluation; evaluation_date defaults to today."""
    underlying_price: float
    risk_free_rate: float = RISK_FREE_RATE
    evaluation_date: Optional[DateLike] = None

    def __post_init__(self):
        if self.evaluation_date is None:
            object.__setattr__(self, 'evaluation_date', date.today())

    @classmethod
    def from_settings(cls, underlying_price: float, settings, evaluation_date: Optional[DateLike] = None) -> 'MarketState':
        return cls(underlying_price, settings.risk_free_rate, evaluation_date)


# =============================================================================
# RESULTS
# =============================================================================

@dataclass(frozen=True)
class Greeks:
    """
    Option sensitivities.

    theta is per calendar day, vega per 1 point of IV and rho per 1 point of rate.
    """
    delta: float = 0.0
    gamma: float = 0.0
    theta: float = 0.0
    vega: float = 0.0
    rho: float = 0.0
    price: float = 0.0

    def __add__(self, other: 'Greeks') -> 'Greeks':
        if not isinstance(other, Greeks):
            return NotImplemented
        return Greeks(
            delta=self.delta + other.delta,
            gamma=self.gamma + other.gamma,
            theta=self.theta + other.theta,
            vega=self.vega + other.vega,
            rho=self.rho + other.rho,
            price=self.price + other.price,
        )

    def scale(self, factor: float) -> 'Greeks':
        return Greeks(
            delta=self.delta * factor,
            gamma=self.gamma * factor,
            theta=self.theta * factor,
            vega=self.vega * factor,
            rho=self.rho * factor,
            price=self.price * factor,
        )

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class PayoffPoint:
    stock_price: float
    pnl: float
    intrinsic: Optional[float] = None


class PayoffCurve:
    """
    Ordered P&L points across a price sweep.

    Points are computed on iteration, so a curve can be iterated any number of
    times and always yields the same sequence.

    Examples
    --------
    >>> curve = payoff_curve(100, 5, OptionType.CALL, current_price=100)
    >>> len(curve)
    101
    >>> curve.to_frame().head()
    """

    def __init__(self, prices: Sequence[float], evaluate: Callable[[float], PayoffPoint]):
        self._prices = tuple(float(p) for p in prices)
        self._evaluate = evaluate

    def __iter__(self) -> Iterator[PayoffPoint]:
        return (self._evaluate(price) for price in self._prices)

    def __len__(self) -> int:
        return len(self._prices)

    def __getitem__(self, index: int) -> PayoffPoint:
        return self._evaluate(self._prices[index])

    @property
    def prices(self) -> Tuple[float, ...]:
        return self._prices

    def to_frame(self) -> pd.DataFrame:
        df = pd.DataFrame([asdict(point) for point in self], columns=['stock_price', 'pnl', 'intrinsic'])
        if df['intrinsic'].isna().all():
            df = df.drop(columns='intrinsic')
        return df


@dataclass(frozen=True)
class StrategyMetrics:
    """Expiration risk profile of a strategy; max values may be +/-inf."""
    max_profit: float
    max_loss: float
    max_profit_price: float
    max_loss_price: float
    breakevens: Tuple[float, ...] = field(default_factory=tuple)
    net_premium: float = 0.0
    is_credit: bool = False
    is_debit: bool = False

    @property
    def has_unlimited_profit(self) -> bool:
        return self.max_profit == float('inf')

    @property
    def has_unlimited_loss(self) -> bool:
        return self.max_loss == float('-inf')

    def to_dict(self) -> Dict[str, Any]:
        res = asdict(self)
        res['breakevens'] = list(self.breakevens)
        return res
