"""
Multi-Leg Strategy Engine
Aggregate P&L, Greeks and risk metrics for combinations of bought and sold options
"""

from typing import Any, Iterable, Iterator, List, Mapping, Optional, Tuple
import logging
import numpy as np
import pandas as pd

from .config import CONTRACT_MULTIPLIER, DAYS_PER_YEAR, MIN_GREEKS_T, Settings
from .models import DateLike, Greeks, MarketState, OptionLeg, PayoffCurve, PayoffPoint, StrategyMetrics
from .pricing import black_scholes_price, calculate_greeks, intrinsic_value

logger = logging.getLogger(__name__)

# Far-from-the-money probes used to flag unbounded payoff on either side
UPSIDE_PROBE = 3.0
DOWNSIDE_PROBE = 0.1
UNBOUNDED_FACTOR = 1.5


def days_between(start: DateLike, end: DateLike) -> float:
    """
    Signed whole days from `start` to `end` (negative once `end` has passed).

    Returns NaN when either date cannot be parsed.
    """
    start_ts = pd.to_datetime(start, errors='coerce')
    end_ts = pd.to_datetime(end, errors='coerce')
    if pd.isna(start_ts) or pd.isna(end_ts):
        return float('nan')
    return float(round((end_ts - start_ts) / pd.Timedelta(days=1)))


def _zero_crossing(prev_price: float, prev_pnl: float, price: float, pnl: float) -> float:
    """Price where the straight line between two scan points crosses zero."""
    return prev_price + (price - prev_price) * (-prev_pnl) / (pnl - prev_pnl)


class Strategy:
    """
    An ordered set of option legs evaluated as one position.

    Every method is a pure function of the legs and its arguments; the
    evaluation date always comes in through a ``MarketState``.

    Parameters
    ----------
    legs : iterable of OptionLeg
        Bought and sold options, possibly with different strikes and expiries
    name : str, optional
        Display name

    Examples
    --------
    >>> straddle = Strategy([
    ...     OptionLeg(OptionType.CALL, Action.BUY, strike=100, premium=5, expiration='2025-03-21'),
    ...     OptionLeg(OptionType.PUT, Action.BUY, strike=100, premium=5, expiration='2025-03-21'),
    ... ])
    >>> m = straddle.metrics(current_price=100)
    >>> m.breakevens, m.max_loss, m.max_profit
    ((90.0, 110.0), -1000.0, inf)
    """

    def __init__(self, legs: Iterable[OptionLeg], name: Optional[str] = None):
        self.legs: Tuple[OptionLeg, ...] = tuple(legs)
        self.name = name

    @classmethod
    def from_dicts(cls, legs: Iterable[Mapping[str, Any]], name: Optional[str] = None) -> 'Strategy':
        return cls([OptionLeg.from_dict(leg) for leg in legs], name=name)

    def __iter__(self) -> Iterator[OptionLeg]:
        return iter(self.legs)

    def __len__(self) -> int:
        return len(self.legs)

    def __repr__(self) -> str:
        return f"Strategy(name={self.name!r}, legs={len(self.legs)})"

    # =========================================================================
    # PREMIUM
    # =========================================================================

    @property
    def net_premium(self) -> float:
        """Premium received minus premium paid, in dollars (positive = credit)."""
        return sum(-leg.sign * leg.premium * CONTRACT_MULTIPLIER * leg.quantity for leg in self.legs)

    @property
    def is_credit(self) -> bool:
        return self.net_premium > 0

    @property
    def is_debit(self) -> bool:
        return self.net_premium < 0

    # =========================================================================
    # P&L
    # =========================================================================

    def expiration_pnl(self, stock_price: float) -> float:
        """Dollar P&L if every leg expires with the underlying at `stock_price`."""
        total = 0.0
        for leg in self.legs:
            value = intrinsic_value(stock_price, leg.strike, leg.option_type)
            total += leg.sign * (value - leg.premium) * CONTRACT_MULTIPLIER * leg.quantity
        return total

    def _leg_value(self, leg: OptionLeg, stock_price: float, market: MarketState, days_from_now: float) -> float:
        remaining = days_between(market.evaluation_date, leg.expiration) - days_from_now
        if remaining <= 0:
            return intrinsic_value(stock_price, leg.strike, leg.option_type)

        T = remaining / DAYS_PER_YEAR
        return black_scholes_price(stock_price, leg.strike, T, market.risk_free_rate,
                                   leg.implied_volatility, leg.option_type)

    def pnl(self, stock_price: float, market: MarketState, days_from_now: float = 0,
            at_expiration: bool = False) -> float:
        """
        Dollar P&L with the underlying at `stock_price`, `days_from_now` days
        after ``market.evaluation_date``.

        Each leg keeps its own expiry: a leg that has expired by the target date
        is worth its intrinsic value while the others still carry time value.
        """
        if at_expiration:
            return self.expiration_pnl(stock_price)

        total = 0.0
        for leg in self.legs:
            value = self._leg_value(leg, stock_price, market, days_from_now)
            total += leg.sign * (value - leg.premium) * CONTRACT_MULTIPLIER * leg.quantity
        return total

    # =========================================================================
    # GREEKS
    # =========================================================================

    def greeks(self, market: MarketState, stock_price: Optional[float] = None) -> Greeks:
        """
        Net Greeks of the strategy, signed by buy/sell and scaled by contracts.

        Time to expiry is floored at ``MIN_GREEKS_T`` years so legs expiring
        today still report non-zero gamma, theta and vega.
        """
        S = market.underlying_price if stock_price is None else stock_price
        combined = Greeks()

        for leg in self.legs:
            days = days_between(market.evaluation_date, leg.expiration)
            T = float(np.maximum(MIN_GREEKS_T, days / DAYS_PER_YEAR))
            leg_greeks = calculate_greeks(S, leg.strike, T, market.risk_free_rate,
                                          leg.implied_volatility, leg.option_type)
            combined = combined + leg_greeks.scale(leg.sign * leg.quantity)

        return combined

    # =========================================================================
    # METRICS
    # =========================================================================

    def metrics(self, current_price: float, search_range: Optional[float] = None,
                step: Optional[float] = None, settings: Optional[Settings] = None) -> StrategyMetrics:
        """
        Max profit/loss, breakevens and credit/debit of the expiration payoff.

        The payoff is scanned in `step` dollar increments across
        ``current_price * (1 +/- search_range)``. Breakevens are the points where
        P&L changes sign, interpolated between the two bracketing scan prices.

        A side is reported as unbounded (+inf profit / -inf loss) when P&L at
        3x the current price exceeds 1.5x the scanned max profit, or P&L at
        0.1x the current price falls below 1.5x the scanned max loss. This is a
        sampling heuristic, not an analytic bound.
        A position that loses the same amount everywhere is therefore flagged
        with unbounded profit, since its far-upside P&L exceeds 1.5x a negative
        max profit.

        `search_range` and `step` default to ``settings.metrics_range`` and
        ``settings.metrics_step``.
        """
        settings = settings or Settings()
        search_range = settings.metrics_range if search_range is None else search_range
        step = settings.metrics_step if step is None else step

        min_price = max(0.01, current_price * (1 - search_range))
        max_price = current_price * (1 + search_range)
        n_steps = int(np.floor((max_price - min_price) / step + 1e-9))
        prices = min_price + step * np.arange(n_steps + 1)

        max_profit, max_loss = float('-inf'), float('inf')
        max_profit_price = max_loss_price = current_price
        breakevens: List[float] = []
        prev_price, prev_pnl = None, None

        for price in prices:
            price = float(price)
            pnl = self.expiration_pnl(price)

            if pnl > max_profit:
                max_profit, max_profit_price = pnl, price
            if pnl < max_loss:
                max_loss, max_loss_price = pnl, price

            if prev_pnl is not None and ((prev_pnl < 0 <= pnl) or (prev_pnl >= 0 > pnl)):
                crossing = round(_zero_crossing(prev_price, prev_pnl, price, pnl), 2)
                if crossing not in breakevens:
                    breakevens.append(crossing)

            prev_price, prev_pnl = price, pnl

        far_upside = self.expiration_pnl(current_price * UPSIDE_PROBE)
        far_downside = self.expiration_pnl(current_price * DOWNSIDE_PROBE)

        if far_upside > max_profit * UNBOUNDED_FACTOR:
            logger.debug(f"Unbounded upside: P&L {far_upside:.2f} at {current_price * UPSIDE_PROBE:.2f} "
                         f"vs scanned max {max_profit:.2f}")
            max_profit = float('inf')
        if far_downside < max_loss * UNBOUNDED_FACTOR:
            logger.debug(f"Unbounded downside: P&L {far_downside:.2f} at {current_price * DOWNSIDE_PROBE:.2f} "
                         f"vs scanned min {max_loss:.2f}")
            max_loss = float('-inf')

        net_premium = self.net_premium
        return StrategyMetrics(
            max_profit=max_profit,
            max_loss=max_loss,
            max_profit_price=max_profit_price,
            max_loss_price=max_loss_price,
            breakevens=tuple(sorted(breakevens)),
            net_premium=net_premium,
            is_credit=net_premium > 0,
            is_debit=net_premium < 0,
        )

    # =========================================================================
    # CURVES
    # =========================================================================

    def payoff_curve(self, current_price: float, price_range: Optional[float] = None,
                     settings: Optional[Settings] = None) -> PayoffCurve:
        """Expiration P&L across 101 prices spanning ``current_price * (1 +/- price_range)``."""
        if price_range is None:
            price_range = (settings or Settings()).payoff_range
        min_price = max(0.0, current_price * (1 - price_range))
        max_price = current_price * (1 + price_range)

        def evaluate(price: float) -> PayoffPoint:
            return PayoffPoint(stock_price=round(price, 2), pnl=round(self.expiration_pnl(price), 2))

        return PayoffCurve(np.linspace(min_price, max_price, 101), evaluate)

    def multi_date_curves(self, market: MarketState, days_to_expiry: int,
                          price_range: Optional[float] = None, date_count: int = 5,
                          settings: Optional[Settings] = None) -> pd.DataFrame:
        """
        P&L curves at several dates between today and expiry (a risk graph).

        Returns
        -------
        pd.DataFrame
            51 rows indexed by ``stock_price``; one column per day offset, the
            last column being the expiration payoff
        """
        if price_range is None:
            price_range = (settings or Settings()).payoff_range
        days_to_expiry = max(0, int(days_to_expiry))
        day_step = max(1, days_to_expiry // max(1, date_count - 1))
        days = [0] + list(range(day_step, days_to_expiry, day_step))
        if days[-1] != days_to_expiry:
            days.append(days_to_expiry)

        min_price = max(0.0, market.underlying_price * (1 - price_range))
        max_price = market.underlying_price * (1 + price_range)
        prices = [float(p) for p in np.linspace(min_price, max_price, 51)]

        rows = []
        for price in prices:
            rows.append([
                round(self.pnl(price, market, days_from_now=day, at_expiration=day >= days_to_expiry), 2)
                for day in days
            ])

        return pd.DataFrame(rows,
                            index=pd.Index([round(p, 2) for p in prices], name='stock_price'),
                            columns=pd.Index(days, name='day'))


def compute_metrics(legs: Iterable[OptionLeg], current_price: float,
                    search_range: Optional[float] = None,
                    settings: Optional[Settings] = None) -> StrategyMetrics:
    """Shortcut for ``Strategy(legs).metrics(current_price, search_range, settings=settings)``."""
    return Strategy(legs).metrics(current_price, search_range, settings=settings)
