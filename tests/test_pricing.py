"""Tests for Black-Scholes pricing and Greeks."""
import math

import pytest

from optionscope import (OptionType, black_scholes_price, calculate_greeks,
                         intrinsic_value, position_pnl)


class TestPrice:
    """Tests for black_scholes_price."""

    def test_known_call_value(self):
        assert black_scholes_price(100, 100, 1.0, 0.05, 0.20, 'call') == pytest.approx(10.4506, abs=1e-4)

    def test_known_put_value(self):
        assert black_scholes_price(100, 100, 1.0, 0.05, 0.20, 'put') == pytest.approx(5.5735, abs=1e-4)

    def test_put_call_parity(self):
        """C - P = S - K*exp(-rT)"""
        for S in [80.0, 100.0, 120.0]:
            for K in [90.0, 110.0]:
                for T in [0.1, 1.0]:
                    for r in [0.01, 0.05]:
                        for sigma in [0.1, 0.4]:
                            call = black_scholes_price(S, K, T, r, sigma, OptionType.CALL)
                            put = black_scholes_price(S, K, T, r, sigma, OptionType.PUT)
                            assert abs((call - put) - (S - K * math.exp(-r * T))) < 1e-6

    def test_expired_option_is_intrinsic(self):
        assert black_scholes_price(110, 100, 0, 0.05, 0.2, 'call') == 10.0
        assert black_scholes_price(110, 100, 0, 0.05, 0.2, 'put') == 0.0
        assert black_scholes_price(90, 100, 0, 0.05, 0.2, 'put') == 10.0
        assert black_scholes_price(90, 100, -0.5, 0.05, 0.2, 'call') == 0.0

    def test_zero_volatility_is_intrinsic(self):
        assert black_scholes_price(110, 100, 0.5, 0.05, 0.0, 'call') == 10.0
        assert black_scholes_price(110, 100, 0.5, 0.05, 0.0, 'put') == 0.0

    def test_converges_to_intrinsic_near_expiry(self):
        value = black_scholes_price(120, 100, 1e-8, 0.05, 0.3, 'call')
        assert value == pytest.approx(20.0, abs=1e-4)

    def test_accepts_enum_or_string(self):
        assert black_scholes_price(100, 95, 0.5, 0.05, 0.3, OptionType.PUT) == \
            black_scholes_price(100, 95, 0.5, 0.05, 0.3, 'put')

    def test_idempotent(self):
        first = black_scholes_price(101.3, 97.5, 0.37, 0.042, 0.29, 'call')
        second = black_scholes_price(101.3, 97.5, 0.37, 0.042, 0.29, 'call')
        assert first == second

    def test_negative_strike_gives_nan(self):
        """Malformed inputs propagate NaN instead of raising."""
        assert math.isnan(black_scholes_price(100, -100, 0.5, 0.05, 0.2, 'call'))

    def test_negative_price_gives_nan(self):
        assert math.isnan(black_scholes_price(-100, 100, 0.5, 0.05, 0.2, 'put'))


class TestIntrinsicValue:

    def test_call(self):
        assert intrinsic_value(105, 100, 'call') == 5.0
        assert intrinsic_value(95, 100, 'call') == 0.0

    def test_put(self):
        assert intrinsic_value(95, 100, 'put') == 5.0
        assert intrinsic_value(105, 100, 'put') == 0.0

    def test_nan_propagates(self):
        assert math.isnan(intrinsic_value(float('nan'), 100, 'call'))


class TestGreeks:
    """Tests for calculate_greeks."""

    def test_atm_call_values(self):
        g = calculate_greeks(100, 100, 1.0, 0.05, 0.20, 'call')
        assert g.delta == pytest.approx(0.636831, abs=1e-4)
        assert g.gamma == pytest.approx(0.018762, abs=1e-5)
        assert g.vega == pytest.approx(0.375240, abs=1e-4)
        assert g.theta == pytest.approx(-6.41403 / 365, abs=1e-5)
        assert g.rho == pytest.approx(0.532327, abs=1e-4)
        assert g.price == pytest.approx(10.4506, abs=1e-4)

    def test_put_delta_is_call_delta_minus_one(self):
        call = calculate_greeks(105, 100, 0.5, 0.05, 0.25, 'call')
        put = calculate_greeks(105, 100, 0.5, 0.05, 0.25, 'put')
        assert put.delta == pytest.approx(call.delta - 1, abs=1e-12)
        assert put.gamma == call.gamma
        assert put.vega == call.vega

    def test_vega_is_per_volatility_point(self):
        S, K, T, r, sigma = 100, 105, 0.5, 0.05, 0.3
        bumped = (black_scholes_price(S, K, T, r, sigma + 0.01, 'call')
                  - black_scholes_price(S, K, T, r, sigma - 0.01, 'call')) / 2
        assert calculate_greeks(S, K, T, r, sigma, 'call').vega == pytest.approx(bumped, abs=1e-3)

    def test_theta_is_per_calendar_day(self):
        S, K, T, r, sigma = 100, 100, 0.5, 0.05, 0.3
        one_day = (black_scholes_price(S, K, T - 1 / 365, r, sigma, 'put')
                   - black_scholes_price(S, K, T, r, sigma, 'put'))
        assert calculate_greeks(S, K, T, r, sigma, 'put').theta == pytest.approx(one_day, abs=1e-3)

    def test_rho_is_per_rate_point(self):
        S, K, T, r, sigma = 100, 100, 1.0, 0.05, 0.2
        bumped = (black_scholes_price(S, K, T, r + 0.01, sigma, 'put')
                  - black_scholes_price(S, K, T, r - 0.01, sigma, 'put')) / 2
        assert calculate_greeks(S, K, T, r, sigma, 'put').rho == pytest.approx(bumped, abs=1e-3)

    def test_deep_itm_call_delta_near_one(self):
        assert calculate_greeks(150, 100, 0.25, 0.05, 0.2, 'call').delta > 0.99

    def test_deep_otm_call_delta_near_zero(self):
        assert calculate_greeks(50, 100, 0.25, 0.05, 0.2, 'call').delta < 0.01

    def test_gamma_peaks_near_the_money(self):
        atm = calculate_greeks(100, 100, 0.25, 0.05, 0.2, 'call').gamma
        assert atm > calculate_greeks(80, 100, 0.25, 0.05, 0.2, 'call').gamma
        assert atm > calculate_greeks(120, 100, 0.25, 0.05, 0.2, 'call').gamma

    def test_long_option_theta_negative(self):
        assert calculate_greeks(100, 100, 0.25, 0.05, 0.2, 'call').theta < 0

    def test_expired_call_greeks(self):
        g = calculate_greeks(110, 100, 0, 0.05, 0.2, 'call')
        assert g.delta == 1.0
        assert (g.gamma, g.theta, g.vega, g.rho) == (0.0, 0.0, 0.0, 0.0)
        assert g.price == 10.0

    def test_expired_otm_call_delta_zero(self):
        assert calculate_greeks(100, 100, 0, 0.05, 0.2, 'call').delta == 0.0

    def test_expired_put_greeks(self):
        assert calculate_greeks(90, 100, 0, 0.05, 0.2, 'put').delta == -1.0
        assert calculate_greeks(110, 100, 0, 0.05, 0.2, 'put').delta == 0.0

    def test_zero_volatility_greeks(self):
        g = calculate_greeks(90, 100, 0.5, 0.05, 0.0, 'put')
        assert g.delta == -1.0
        assert g.vega == 0.0
        assert g.price == 10.0

    def test_idempotent(self):
        assert calculate_greeks(97, 100, 0.2, 0.05, 0.35, 'put') == \
            calculate_greeks(97, 100, 0.2, 0.05, 0.35, 'put')

    def test_to_dict(self):
        keys = set(calculate_greeks(100, 100, 0.5, 0.05, 0.2, 'call').to_dict())
        assert keys == {'delta', 'gamma', 'theta', 'vega', 'rho', 'price'}


class TestPositionPnL:

    def test_with_market_price(self):
        assert position_pnl(100, 100, 0.5, 0.05, 0.2, 'call', premium=4.0, market_price=6.5) == 2.5

    def test_with_model_price(self):
        expected = black_scholes_price(100, 100, 0.5, 0.05, 0.2, 'call') - 4.0
        assert position_pnl(100, 100, 0.5, 0.05, 0.2, 'call', premium=4.0) == expected
