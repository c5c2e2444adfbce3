"""
Submodules Package
==================

Core pricing and strategy analytics modules for the optionscope package.

This package contains:
- Standard normal distribution helpers
- Black-Scholes pricing and Greeks
- Single-position payoff curves and P&L grids
- Multi-leg strategy P&L, Greeks and risk metrics
- Strategy template catalog
- Option chain binding helpers
- Settings and logging setup
"""

from .config import Settings, LoggingConfig, load_settings, RISK_FREE_RATE
from .log import configure_logging
from .models import (OptionType, Action, OptionLeg, MarketState, Greeks,
                     PayoffPoint, PayoffCurve, StrategyMetrics)
from .normal import normal_cdf, normal_pdf
from .pricing import black_scholes_price, calculate_greeks, intrinsic_value, position_pnl
from .payoff import break_even, payoff_curve, time_value_grid, day_offsets
from .strategy import Strategy, compute_metrics, days_between
from .templates import (Term, LegShape, StrategyTemplate, STRATEGY_TEMPLATES,
                        get_template, list_templates)
from .chain import mid_price, prepare_chain, nearest_strike, bind_template

__all__ = [
    'Settings',
    'LoggingConfig',
    'load_settings',
    'RISK_FREE_RATE',
    'configure_logging',
    'OptionType',
    'Action',
    'OptionLeg',
    'MarketState',
    'Greeks',
    'PayoffPoint',
    'PayoffCurve',
    'StrategyMetrics',
    'normal_cdf',
    'normal_pdf',
    'black_scholes_price',
    'calculate_greeks',
    'intrinsic_value',
    'position_pnl',
    'break_even',
    'payoff_curve',
    'time_value_grid',
    'day_offsets',
    'Strategy',
    'compute_metrics',
    'days_between',
    'Term',
    'LegShape',
    'StrategyTemplate',
    'STRATEGY_TEMPLATES',
    'get_template',
    'list_templates',
    'mid_price',
    'prepare_chain',
    'nearest_strike',
    'bind_template',
]
