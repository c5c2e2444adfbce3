"""
Strategy Templates
Catalog of named multi-leg strategies expressed as strike offsets from a center strike
"""

from typing import Dict, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass
from enum import Enum

from .config import Settings
from .models import Action, DateLike, OptionLeg, OptionType
from .strategy import Strategy

DEFAULT_WIDTH = 5.0


class Term(Enum):
    """Which expiry a leg uses"""
    SINGLE = 'single'
    NEAR = 'near'
    FAR = 'far'


@dataclass(frozen=True)
class LegShape:
    """
    A leg before it is bound to a real contract.

    strike_offset: distance from the center strike, in multiples of the width unit
    quantity: contract multiplier relative to one unit of the strategy
    """
    option_type: OptionType
    action: Action
    strike_offset: float = 0
    quantity: int = 1
    term: Term = Term.SINGLE


@dataclass(frozen=True)
class StrategyTemplate:
    key: str
    name: str
    outlook: str
    shapes: Tuple[LegShape, ...]
    description: str = ''
    when_to_use: str = ''
    example: str = ''
    risk_level: str = ''
    max_profit: str = ''
    max_loss: str = ''

    @property
    def leg_count(self) -> int:
        return len(self.shapes)

    @property
    def requires_multiple_expiries(self) -> bool:
        return any(shape.term is not Term.SINGLE for shape in self.shapes)

    def strikes(self, center_strike: float, width: float = DEFAULT_WIDTH) -> List[Tuple[LegShape, float]]:
        """Pair each shape with its target strike ``center + offset * width``."""
        return [(shape, center_strike + shape.strike_offset * width) for shape in self.shapes]

    def build_legs(self, center_strike: float, premiums: Sequence[float], expiration: DateLike,
                   far_expiration: Optional[DateLike] = None, width: float = DEFAULT_WIDTH,
                   implied_volatility: Union[float, Sequence[float], None] = None,
                   settings: Optional[Settings] = None) -> List[OptionLeg]:
        """
        Concrete legs for this template.

        Parameters
        ----------
        center_strike : float
            Strike the offsets are measured from
        premiums : sequence of float
            One premium per shape, in catalog order
        expiration : date or str
            Expiry for single-term legs and the near leg of time spreads
        far_expiration : date or str, optional
            Expiry for the far leg; required by calendar and diagonal spreads
        width : float
            Dollar value of one strike offset unit
        implied_volatility : float or sequence of float, optional
            One IV for all legs, or one per shape; defaults to ``settings.default_iv``
        settings : Settings, optional
            Loaded settings; built-in defaults when omitted

        Raises
        ------
        ValueError
            If premiums/IVs do not match the number of legs, or a far expiry is missing
        """
        if len(premiums) != self.leg_count:
            raise ValueError(f"{self.name} needs {self.leg_count} premiums, got {len(premiums)}")
        if self.requires_multiple_expiries and far_expiration is None:
            raise ValueError(f"{self.name} requires a far expiration date")

        if implied_volatility is None:
            implied_volatility = (settings or Settings()).default_iv

        if isinstance(implied_volatility, (int, float)):
            ivs = [float(implied_volatility)] * self.leg_count
        else:
            ivs = list(implied_volatility)
            if len(ivs) != self.leg_count:
                raise ValueError(f"{self.name} needs {self.leg_count} implied volatilities, got {len(ivs)}")

        legs = []
        for (shape, strike), premium, iv in zip(self.strikes(center_strike, width), premiums, ivs):
            legs.append(OptionLeg(
                option_type=shape.option_type,
                action=shape.action,
                strike=strike,
                premium=premium,
                quantity=shape.quantity,
                expiration=far_expiration if shape.term is Term.FAR else expiration,
                implied_volatility=iv,
            ))
        return legs

    def build_strategy(self, center_strike: float, premiums: Sequence[float], expiration: DateLike,
                       far_expiration: Optional[DateLike] = None, width: float = DEFAULT_WIDTH,
                       implied_volatility: Union[float, Sequence[float], None] = None,
                       settings: Optional[Settings] = None) -> Strategy:
        legs = self.build_legs(center_strike, premiums, expiration, far_expiration, width,
                               implied_volatility, settings)
        return Strategy(legs, name=self.name)


# =============================================================================
# CATALOG
# =============================================================================

CALL, PUT = OptionType.CALL, OptionType.PUT
BUY, SELL = Action.BUY, Action.SELL

_TEMPLATES = [
    StrategyTemplate(
        key='longCall', name='Long Call', outlook='bullish',
        shapes=(LegShape(CALL, BUY, 0),),
        description='Buy a call for the right to purchase shares at the strike; gains as the stock rises.',
        when_to_use='Expecting a large move up before expiration while risking less than buying shares.',
        example='Stock at $100, buy the $105 call for $2. At $115 the call is worth about $10; below $105 it expires worthless.',
        risk_level='Medium', max_profit='Unlimited', max_loss='Premium paid',
    ),
    StrategyTemplate(
        key='longPut', name='Long Put', outlook='bearish',
        shapes=(LegShape(PUT, BUY, 0),),
        description='Buy a put for the right to sell shares at the strike; gains as the stock falls.',
        when_to_use='Expecting a large move down, or hedging shares already held.',
        example='Stock at $100, buy the $95 put for $2. At $80 the put is worth about $15; above $95 it expires worthless.',
        risk_level='Medium', max_profit='Strike - Premium', max_loss='Premium paid',
    ),
    StrategyTemplate(
        key='coveredCall', name='Covered Call', outlook='neutral',
        shapes=(LegShape(CALL, SELL, 1),),
        description='Sell a call against shares already owned and collect the premium.',
        when_to_use='Holding shares and expecting them to drift sideways or rise slightly.',
        example='Own 100 shares at $100, sell the $110 call for $3. Keep $300 if the stock stays under $110.',
        risk_level='Low', max_profit='Premium + (Strike - Stock Price)', max_loss='Stock price - Premium',
    ),
    StrategyTemplate(
        key='bullCallSpread', name='Bull Call Spread', outlook='bullish',
        shapes=(LegShape(CALL, BUY, 0), LegShape(CALL, SELL, 1)),
        description='Buy a call and sell a higher strike call to cheapen the trade; profit and risk are both capped.',
        when_to_use='Moderately bullish with a price target.',
        example='Buy the $100 call for $5, sell the $110 call for $2. Net debit $3, max profit $7 above $110.',
        risk_level='Low-Medium', max_profit='Strike difference - Net debit', max_loss='Net debit',
    ),
    StrategyTemplate(
        key='bearPutSpread', name='Bear Put Spread', outlook='bearish',
        shapes=(LegShape(PUT, BUY, 0), LegShape(PUT, SELL, -1)),
        description='Buy a put and sell a lower strike put to cheapen the trade; profit and risk are both capped.',
        when_to_use='Moderately bearish with a downside target.',
        example='Buy the $100 put for $5, sell the $90 put for $2. Net debit $3, max profit $7 below $90.',
        risk_level='Low-Medium', max_profit='Strike difference - Net debit', max_loss='Net debit',
    ),
    StrategyTemplate(
        key='bullPutSpread', name='Bull Put Spread', outlook='bullish',
        shapes=(LegShape(PUT, SELL, 0), LegShape(PUT, BUY, -1)),
        description='Sell a put and buy a lower strike put as protection, collecting a net credit.',
        when_to_use='Neutral to bullish; profits if the stock holds above the short strike.',
        example='Sell the $95 put for $3, buy the $90 put for $1. Keep the $2 credit above $95, lose at most $3 below $90.',
        risk_level='Low-Medium', max_profit='Net credit received', max_loss='Strike difference - Credit',
    ),
    StrategyTemplate(
        key='bearCallSpread', name='Bear Call Spread', outlook='bearish',
        shapes=(LegShape(CALL, SELL, 0), LegShape(CALL, BUY, 1)),
        description='Sell a call and buy a higher strike call as protection, collecting a net credit.',
        when_to_use='Neutral to bearish; profits if the stock stays below the short strike.',
        example='Sell the $105 call for $3, buy the $110 call for $1. Keep the $2 credit below $105, lose at most $3 above $110.',
        risk_level='Low-Medium', max_profit='Net credit received', max_loss='Strike difference - Credit',
    ),
    StrategyTemplate(
        key='straddle', name='Long Straddle', outlook='neutral',
        shapes=(LegShape(CALL, BUY, 0), LegShape(PUT, BUY, 0)),
        description='Buy a call and a put at the same strike; pays off on a large move in either direction.',
        when_to_use='Ahead of events such as earnings when a big move is expected but the direction is unknown.',
        example='Buy the $100 call and $100 put for $5 each. Profitable above $110 or below $90 at expiration.',
        risk_level='Medium-High', max_profit='Unlimited', max_loss='Total premium paid',
    ),
    StrategyTemplate(
        key='strangle', name='Long Strangle', outlook='neutral',
        shapes=(LegShape(CALL, BUY, 1), LegShape(PUT, BUY, -1)),
        description='Buy an out-of-the-money call and put; cheaper than a straddle but needs a bigger move.',
        when_to_use='Expecting a very large move at a lower cost than a straddle.',
        example='Buy the $105 call and $95 put for $2 each. Profitable above $109 or below $91.',
        risk_level='Medium-High', max_profit='Unlimited', max_loss='Total premium paid',
    ),
    StrategyTemplate(
        key='ironCondor', name='Iron Condor', outlook='neutral',
        shapes=(
            LegShape(PUT, BUY, -2),
            LegShape(PUT, SELL, -1),
            LegShape(CALL, SELL, 1),
            LegShape(CALL, BUY, 2),
        ),
        description='A bull put spread below and a bear call spread above; collects premium while the stock stays in range.',
        when_to_use='Low volatility, range-bound markets.',
        example='Sell the $95/$90 put spread and the $105/$110 call spread for about $2. Keep it all between $95 and $105.',
        risk_level='Low-Medium', max_profit='Net credit received', max_loss='Wing width - Credit',
    ),
    StrategyTemplate(
        key='ironButterfly', name='Iron Butterfly', outlook='neutral',
        shapes=(
            LegShape(PUT, BUY, -1),
            LegShape(PUT, SELL, 0),
            LegShape(CALL, SELL, 0),
            LegShape(CALL, BUY, 1),
        ),
        description='Sell an at-the-money straddle and buy wings on both sides; best if the stock pins the strike.',
        when_to_use='Confident the stock stays very close to the current price.',
        example='Sell the $100 call and put, buy the $95 put and $105 call for about $6 credit.',
        risk_level='Medium', max_profit='Net credit received', max_loss='Wing width - Credit',
    ),
    StrategyTemplate(
        key='callButterfly', name='Call Butterfly', outlook='neutral',
        shapes=(
            LegShape(CALL, BUY, -1),
            LegShape(CALL, SELL, 0, quantity=2),
            LegShape(CALL, BUY, 1),
        ),
        description='Buy one call below and one above a target, sell two at the target; a cheap bet on a precise price.',
        when_to_use='A specific price target with very limited risk.',
        example='Buy the $100 call, sell two $105 calls, buy the $110 call for about $1. Worth $4 at exactly $105.',
        risk_level='Low', max_profit='Wing width - Net debit', max_loss='Net debit',
    ),
    StrategyTemplate(
        key='putButterfly', name='Put Butterfly', outlook='neutral',
        shapes=(
            LegShape(PUT, BUY, 1),
            LegShape(PUT, SELL, 0, quantity=2),
            LegShape(PUT, BUY, -1),
        ),
        description='The put version of the butterfly, positioned for a move to a specific lower price.',
        when_to_use='A specific downside price target with very limited risk.',
        example='Buy the $100 put, sell two $95 puts, buy the $90 put for about $1. Worth $4 at exactly $95.',
        risk_level='Low', max_profit='Wing width - Net debit', max_loss='Net debit',
    ),
    StrategyTemplate(
        key='calendarSpread', name='Calendar Spread', outlook='neutral',
        shapes=(
            LegShape(CALL, SELL, 0, term=Term.NEAR),
            LegShape(CALL, BUY, 0, term=Term.FAR),
        ),
        description='Sell a near-term option and buy a longer-dated one at the same strike; earns from faster near-term decay.',
        when_to_use='Expecting the stock to stay near the strike in the short term, or near-term IV is elevated.',
        example='Sell next week\'s $100 call for $2, buy next month\'s $100 call for $4. Net debit $2.',
        risk_level='Medium', max_profit='Depends on IV and time', max_loss='Net debit',
    ),
    StrategyTemplate(
        key='diagonalSpread', name='Diagonal Spread', outlook='bullish',
        shapes=(
            LegShape(CALL, SELL, 1, term=Term.NEAR),
            LegShape(CALL, BUY, 0, term=Term.FAR),
        ),
        description='Sell a near-term out-of-the-money option and buy a longer-dated at-the-money one; time decay with a directional tilt.',
        when_to_use='Moderately bullish over time while financing the long option with near-term premium.',
        example='Sell next week\'s $105 call for $1, buy next month\'s $100 call for $5. Net debit $4.',
        risk_level='Medium', max_profit='Depends on IV and time', max_loss='Net debit',
    ),
]

STRATEGY_TEMPLATES: Dict[str, StrategyTemplate] = {template.key: template for template in _TEMPLATES}


def get_template(key: str) -> StrategyTemplate:
    """Look up a template by key (e.g. 'ironCondor')."""
    try:
        return STRATEGY_TEMPLATES[key]
    except KeyError:
        raise ValueError(f"Unknown strategy template '{key}'. Options: {list(STRATEGY_TEMPLATES)}") from None


def list_templates(outlook: Optional[str] = None) -> List[StrategyTemplate]:
    """All templates in catalog order, optionally filtered by 'bullish', 'bearish' or 'neutral'."""
    if outlook is None:
        return list(STRATEGY_TEMPLATES.values())
    return [t for t in STRATEGY_TEMPLATES.values() if t.outlook == outlook.lower()]
