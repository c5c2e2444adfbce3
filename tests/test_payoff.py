"""Tests for single-option payoff generators."""
import pytest

from optionscope import OptionType, break_even, day_offsets, payoff_curve, time_value_grid


class TestBreakEven:

    def test_call(self):
        assert break_even(100, 5, 'call') == 105

    def test_put(self):
        assert break_even(100, 5, OptionType.PUT) == 95


class TestPayoffCurve:
    """Tests for payoff_curve."""

    @pytest.fixture
    def call_curve(self):
        return payoff_curve(100, 5, 'call', current_price=100)

    def test_has_101_points(self, call_curve):
        assert len(call_curve) == 101
        assert len(list(call_curve)) == 101

    def test_endpoints(self, call_curve):
        first, last = call_curve[0], call_curve[-1]
        assert (first.stock_price, first.pnl, first.intrinsic) == (70.0, -5.0, 0.0)
        assert (last.stock_price, last.pnl, last.intrinsic) == (130.0, 25.0, 30.0)

    def test_at_the_money_loses_premium(self, call_curve):
        assert call_curve[50].stock_price == 100.0
        assert call_curve[50].pnl == -5.0

    def test_restartable(self, call_curve):
        """Iterating twice yields the same points."""
        assert list(call_curve) == list(call_curve)

    def test_put_curve(self):
        curve = payoff_curve(100, 5, 'put', current_price=100)
        assert curve[0].pnl == 25.0
        assert curve[-1].pnl == -5.0

    def test_prices_never_negative(self):
        curve = payoff_curve(10, 1, 'call', current_price=10, price_range=1.5)
        assert curve[0].stock_price == 0.0
        assert all(point.stock_price >= 0 for point in curve)

    def test_to_frame(self, call_curve):
        df = call_curve.to_frame()
        assert list(df.columns) == ['stock_price', 'pnl', 'intrinsic']
        assert df.shape == (101, 3)
        assert df['pnl'].max() == 25.0


class TestDayOffsets:

    def test_even_division(self):
        assert day_offsets(30) == [0, 3, 6, 9, 12, 15, 18, 21, 24, 27, 30]

    def test_appends_expiry_day(self):
        assert day_offsets(17) == [0, 2, 4, 6, 8, 10, 12, 14, 16, 17]

    def test_short_expiry_uses_daily_steps(self):
        assert day_offsets(5) == [0, 1, 2, 3, 4, 5]

    def test_expiry_today(self):
        assert day_offsets(0) == [0]

    def test_past_expiry_clamped(self):
        assert day_offsets(-3) == [0]


class TestTimeValueGrid:
    """Tests for time_value_grid."""

    @pytest.fixture
    def grid(self):
        return time_value_grid(100, 5, 'call', current_price=100, days_to_expiry=30, sigma=0.3)

    def test_shape(self, grid):
        assert grid.shape == (16, 11)
        assert list(grid.columns) == day_offsets(30)

    def test_price_axis_descending(self, grid):
        assert grid.index[0] == 125.0
        assert grid.index[-1] == 75.0
        assert grid.index.is_monotonic_decreasing

    def test_expiry_column_is_intrinsic_minus_premium(self, grid):
        assert grid.loc[125.0, 30] == 20.0
        assert grid.loc[75.0, 30] == -5.0

    def test_time_value_before_expiry(self, grid):
        assert grid.loc[125.0, 0] > grid.loc[125.0, 30]
        assert grid.loc[75.0, 0] > -5.0

    def test_price_floor(self):
        grid = time_value_grid(1, 0.1, 'put', current_price=1, days_to_expiry=10, sigma=0.5)
        assert grid.index[-1] == 1.0
