"""
Optionscope - Option Pricing and Strategy Analytics
===================================================

A Python package for modeling equity option positions and multi-leg strategies:
Black-Scholes valuation, Greeks, payoff curves and strategy risk metrics.

Modules:
--------
- submodules.normal: Standard normal CDF/PDF approximations
- submodules.pricing: Black-Scholes price and Greeks
- submodules.payoff: Single-position payoff curves and P&L grids
- submodules.strategy: Multi-leg strategy P&L, Greeks and metrics
- submodules.templates: Named strategy templates
- submodules.chain: Binding templates to quoted option chains
- submodules.config: Defaults and settings file loading

Example Usage:
--------------
>>> from optionscope import get_template
>>>
>>> condor = get_template('ironCondor').build_strategy(
...     center_strike=100, premiums=[0.5, 1.5, 1.5, 0.5], expiration='2025-03-21')
>>> metrics = condor.metrics(current_price=100)
>>> metrics.net_premium, metrics.max_loss
(200.0, -300.0)
"""

__version__ = "0.1.0"

from .submodules import *  # noqa: F401,F403
from .submodules import __all__
