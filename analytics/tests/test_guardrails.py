"""
Tests for guardrails - input contracts, calculation guard and portfolio validation.
"""

import logging
import math

import pytest

from analytics.calculations.diversification import calculate_diversification_score, herfindahl_index
from analytics.calculations.risk import RiskLevel, assess_risk_level
from analytics.calculations.advanced_metrics import calculate_advanced_metrics
from analytics.calculations.performers import identify_performers
from analytics.guardrails import (
    AnalyticsInputError,
    CalculationResult,
    safe_calculation,
    try_calculation,
    validate_input,
    validate_portfolio_data
)
from analytics.numeric import is_number, price_change_24h, round_half_up


def make_asset(**overrides):
    asset = {
        'id': 'bitcoin',
        'name': 'Bitcoin',
        'symbol': 'BTC',
        'current_price': 50000,
        'price_change_percentage_24h': 5.0,
        'market_cap': 1000000000000,
        'volume_24h': 50000000000,
        'image': 'https://example.com/btc.png',
        'last_updated': '2024-01-01T00:00:00Z',
        'holding_quantity': 1.0
    }
    asset.update(overrides)
    return asset


class TestValidatePortfolioData:
    """Tests for validate_portfolio_data."""

    def test_valid_portfolio(self):
        """Well-formed 2-asset portfolio is valid."""
        assets = [make_asset(), make_asset(id='ethereum', symbol='ETH', current_price=3000)]

        result = validate_portfolio_data(assets)

        assert result == {'is_valid': True, 'errors': []}

    def test_non_array_input(self):
        """Non-list input is rejected."""
        for value in [None, 'BTC', 42, {'id': 'bitcoin'}]:
            result = validate_portfolio_data(value)

            assert result['is_valid'] is False
            assert result['errors'] == ['Assets must be an array']

    def test_empty_portfolio(self):
        """Empty portfolio is rejected."""
        assert validate_portfolio_data([]) == {
            'is_valid': False,
            'errors': ['Portfolio cannot be empty']
        }

    def test_negative_price(self):
        """Negative current price is an error."""
        result = validate_portfolio_data([make_asset(current_price=-100)])

        assert result['is_valid'] is False
        assert result['errors'] == ['Asset 1: Invalid current price']

    def test_errors_accumulate(self):
        """Every problem of every asset is reported, 1-indexed."""
        assets = [
            make_asset(),
            make_asset(id='', symbol=None, current_price='50000',
                       holding_quantity=-1, price_change_percentage_24h='5%')
        ]

        result = validate_portfolio_data(assets)

        assert result['is_valid'] is False
        assert result['errors'] == [
            'Asset 2: Missing ID',
            'Asset 2: Missing symbol',
            'Asset 2: Invalid current price',
            'Asset 2: Invalid holding quantity',
            'Asset 2: Invalid price change percentage'
        ]

    def test_null_price_change_allowed(self):
        """None 24h change is acceptable, absent too."""
        missing = make_asset(id='solana', symbol='SOL')
        del missing['price_change_percentage_24h']

        result = validate_portfolio_data([make_asset(price_change_percentage_24h=None), missing])

        assert result['is_valid'] is True

    def test_zero_values_allowed(self):
        """Zero price and zero quantity are non-negative."""
        result = validate_portfolio_data([make_asset(current_price=0, holding_quantity=0)])

        assert result['is_valid'] is True

    def test_booleans_are_not_numbers(self):
        """True is not a price."""
        result = validate_portfolio_data([make_asset(current_price=True, holding_quantity=False)])

        assert result['errors'] == [
            'Asset 1: Invalid current price',
            'Asset 1: Invalid holding quantity'
        ]

    def test_nan_price_invalid(self):
        """NaN is not a non-negative number."""
        result = validate_portfolio_data([make_asset(current_price=math.nan)])

        assert result['errors'] == ['Asset 1: Invalid current price']

    def test_non_mapping_entry(self):
        """An entry that is not a dictionary fails every required check."""
        result = validate_portfolio_data([make_asset(), None])

        assert result['errors'] == [
            'Asset 2: Missing ID',
            'Asset 2: Missing symbol',
            'Asset 2: Invalid current price',
            'Asset 2: Invalid holding quantity'
        ]

    def test_only_non_mapping_entry(self):
        """A lone None entry is reported field by field, not as 'Validation failed'."""
        result = validate_portfolio_data([None])

        assert result['is_valid'] is False
        assert 'Validation failed' not in result['errors']
        assert len(result['errors']) == 4


class TestValidateInput:
    """Tests for validate_input helper."""

    def test_passes(self):
        validate_input(5, 'count', lambda v: v > 0)

    def test_default_message(self):
        with pytest.raises(AnalyticsInputError, match="Invalid count: -1"):
            validate_input(-1, 'count', lambda v: v > 0)

    def test_custom_message(self):
        with pytest.raises(AnalyticsInputError, match="Count must be positive"):
            validate_input(-1, 'count', lambda v: v > 0, 'Count must be positive')

    def test_is_value_error(self):
        assert issubclass(AnalyticsInputError, ValueError)


class TestSafeCalculation:
    """Tests for the calculation guard."""

    def test_returns_result(self):
        @safe_calculation(0, 'double')
        def double(x):
            return x * 2

        assert double(4) == 8

    def test_exception_returns_fallback(self, caplog):
        @safe_calculation(-1, 'explode')
        def explode():
            raise RuntimeError("boom")

        with caplog.at_level(logging.ERROR, logger='analytics.guardrails'):
            assert explode() == -1

        assert "Analytics calculation error in explode: boom" in caplog.text

    def test_nan_result_returns_fallback(self, caplog):
        @safe_calculation(0, 'not_a_number')
        def not_a_number():
            return float('nan')

        with caplog.at_level(logging.WARNING, logger='analytics.guardrails'):
            assert not_a_number() == 0

        assert "Analytics calculation warning in not_a_number: Invalid number result" in caplog.text

    def test_infinite_result_returns_fallback(self):
        @safe_calculation(0, 'infinite')
        def infinite():
            return math.inf

        assert infinite() == 0

    def test_fallback_copied(self):
        @safe_calculation({'errors': []}, 'broken')
        def broken():
            raise ValueError("bad")

        first = broken()
        first['errors'].append('mutated')

        assert broken() == {'errors': []}

    def test_exposes_body_and_fallback(self):
        @safe_calculation(0, 'half')
        def half(x):
            return x / 2

        assert half.fallback == 0
        assert half.__wrapped__(3) == 1.5
        assert half.__name__ == 'half'


class TestTryCalculation:
    """Tests for the tagged-result variant."""

    def test_ok(self):
        result = try_calculation(calculate_diversification_score, [
            {'percentage': 50}, {'percentage': 50}
        ])

        assert result == CalculationResult(ok=True, value=50.0, error=None)

    def test_error_carries_reason_and_fallback(self):
        result = try_calculation(calculate_diversification_score, [
            {'percentage': 150}, {'percentage': 50}
        ])

        assert result.ok is False
        assert result.value == 0.0
        assert "Invalid percentage: 150" in result.error

    def test_undecorated_function(self):
        """Plain functions fall back to None."""
        result = try_calculation(herfindahl_index, None)

        assert result.ok is False
        assert result.value is None
        assert result.error == 'Allocation must be an array'

    def test_risk_fallback(self):
        result = try_calculation(assess_risk_level, 'abc', [])

        assert result.ok is False
        assert result.value == RiskLevel.LOW


class TestNoThrowGuarantee:
    """Every public calculation returns its fallback on malformed input."""

    @pytest.mark.parametrize('bad', [None, 42, 'text', {'a': 1}, object()])
    def test_malformed_inputs(self, bad):
        assert calculate_diversification_score(bad) == 0
        assert assess_risk_level(bad, bad) == RiskLevel.LOW
        assert calculate_advanced_metrics(bad) == {'volatility': 0, 'sharpe_ratio': 0, 'max_drawdown': 0}
        assert identify_performers(bad, bad) == {'best_performer': None, 'worst_performer': None}
        assert validate_portfolio_data(bad) == {'is_valid': False, 'errors': ['Assets must be an array']}


class TestNumericHelpers:
    """Tests for shared numeric helpers."""

    def test_is_number(self):
        assert is_number(1)
        assert is_number(1.5)
        assert not is_number(True)
        assert not is_number('1')
        assert not is_number(None)

    def test_price_change_defaults(self):
        assert price_change_24h({}) == 0
        assert price_change_24h({'price_change_percentage_24h': None}) == 0
        assert price_change_24h({'price_change_percentage_24h': math.nan}) == 0
        assert price_change_24h({'price_change_percentage_24h': -3.2}) == -3.2

    def test_round_half_up(self):
        assert round_half_up(0.125) == 0.13
        assert round_half_up(-0.125) == -0.12
        assert round_half_up(2.5, places=0) == 3.0
        assert round_half_up(4.18993) == 4.19

    def test_price_change_non_numeric(self):
        """Strings and booleans count as 0, like None."""
        assert price_change_24h({'price_change_percentage_24h': '2.5'}) == 0
        assert price_change_24h({'price_change_percentage_24h': True}) == 0
        assert price_change_24h({'price_change_percentage_24h': [1]}) == 0
