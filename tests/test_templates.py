"""Tests for the strategy template catalog."""
import pytest

from optionscope import (STRATEGY_TEMPLATES, Action, OptionType, Strategy, Term,
                         get_template, list_templates)

EXPIRY = '2025-03-21'
FAR_EXPIRY = '2025-04-18'


class TestCatalog:

    def test_fourteen_templates(self):
        assert len(STRATEGY_TEMPLATES) == 14

    def test_keys(self):
        assert set(STRATEGY_TEMPLATES) == {
            'longCall', 'longPut', 'coveredCall', 'bullCallSpread', 'bearPutSpread',
            'bullPutSpread', 'bearCallSpread', 'straddle', 'strangle', 'ironCondor',
            'ironButterfly', 'callButterfly', 'putButterfly', 'calendarSpread', 'diagonalSpread',
        }

    def test_every_template_has_metadata(self):
        for template in list_templates():
            assert template.name
            assert template.outlook in ('bullish', 'bearish', 'neutral')
            assert template.description
            assert template.risk_level
            assert template.leg_count == len(template.shapes)

    def test_filter_by_outlook(self):
        bullish = [t.key for t in list_templates('bullish')]
        assert bullish == ['longCall', 'bullCallSpread', 'bullPutSpread', 'diagonalSpread']
        bearish = [t.key for t in list_templates('Bearish')]
        assert bearish == ['longPut', 'bearPutSpread', 'bearCallSpread']

    def test_unknown_template(self):
        with pytest.raises(ValueError, match="Unknown strategy template"):
            get_template('jadeLizard')


class TestStrikes:

    def test_iron_condor_strikes(self):
        strikes = [strike for _, strike in get_template('ironCondor').strikes(100)]
        assert strikes == [90, 95, 105, 110]

    def test_custom_width(self):
        strikes = [strike for _, strike in get_template('ironCondor').strikes(100, width=2.5)]
        assert strikes == [95, 97.5, 102.5, 105]

    def test_butterfly_body_quantity(self):
        shapes = get_template('callButterfly').shapes
        assert [s.quantity for s in shapes] == [1, 2, 1]
        assert shapes[1].action is Action.SELL

    def test_put_butterfly_strikes(self):
        strikes = [strike for _, strike in get_template('putButterfly').strikes(100)]
        assert strikes == [105, 100, 95]


class TestBuildLegs:
    """Tests for StrategyTemplate.build_legs / build_strategy."""

    def test_build_iron_condor(self):
        strategy = get_template('ironCondor').build_strategy(100, [0.5, 1.5, 1.5, 0.5], EXPIRY)
        assert isinstance(strategy, Strategy)
        assert strategy.name == 'Iron Condor'
        m = strategy.metrics(current_price=100)
        assert m.net_premium == pytest.approx(200)
        assert m.max_profit == pytest.approx(200)
        assert m.max_loss == pytest.approx(-300)
        assert m.breakevens == (93.0, 107.0)

    def test_build_bull_call_spread(self):
        m = get_template('bullCallSpread').build_strategy(100, [5, 2], EXPIRY).metrics(100)
        assert m.max_profit == pytest.approx(200)
        assert m.max_profit_price == 105
        assert m.max_loss == pytest.approx(-300)
        assert m.breakevens == (103.0,)

    def test_premium_count_mismatch(self):
        with pytest.raises(ValueError, match="needs 2 premiums, got 1"):
            get_template('straddle').build_legs(100, [5], EXPIRY)

    def test_iv_per_leg(self):
        legs = get_template('strangle').build_legs(100, [2, 2], EXPIRY, implied_volatility=[0.25, 0.35])
        assert [leg.implied_volatility for leg in legs] == [0.25, 0.35]

    def test_iv_count_mismatch(self):
        with pytest.raises(ValueError, match="implied volatilities"):
            get_template('strangle').build_legs(100, [2, 2], EXPIRY, implied_volatility=[0.25])

    def test_calendar_requires_far_expiration(self):
        template = get_template('calendarSpread')
        assert template.requires_multiple_expiries
        with pytest.raises(ValueError, match="far expiration"):
            template.build_legs(100, [2, 4], EXPIRY)

    def test_calendar_leg_expiries(self):
        legs = get_template('calendarSpread').build_legs(100, [2, 4], EXPIRY, far_expiration=FAR_EXPIRY)
        assert [leg.expiration for leg in legs] == [EXPIRY, FAR_EXPIRY]
        assert [leg.action for leg in legs] == [Action.SELL, Action.BUY]

    def test_diagonal_strikes(self):
        template = get_template('diagonalSpread')
        assert [s.term for s in template.shapes] == [Term.NEAR, Term.FAR]
        legs = template.build_legs(100, [1, 5], EXPIRY, far_expiration=FAR_EXPIRY)
        assert [leg.strike for leg in legs] == [105, 100]
        assert all(leg.option_type is OptionType.CALL for leg in legs)

    def test_single_expiry_templates_ignore_far_expiration(self):
        legs = get_template('straddle').build_legs(100, [5, 5], EXPIRY, far_expiration=FAR_EXPIRY)
        assert all(leg.expiration == EXPIRY for leg in legs)
