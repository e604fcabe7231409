"""Unit tests for core data models."""

from dataclasses import FrozenInstanceError
from datetime import datetime, timezone

import pytest

from leverage_optimizer.models import (
    CONTRACT_MULTIPLIER,
    AllocationParameters,
    AllocationResult,
    OptionContract,
    Quote,
)
from leverage_optimizer.models.allocation import (
    CONTRACT_COST_EXCEEDS_EQUITY,
    REASON_MESSAGES,
)
from leverage_optimizer.utils.error_handling import ConfigurationError


@pytest.fixture
def sample_contract():
    return OptionContract(
        id='AAPL20251115C170',
        strike=170.0,
        expiry='2025-11-15',
        premium_per_share=8.5,
        delta_per_share=0.65,
        kind='call',
    )


class TestOptionContract:
    """Test suite for OptionContract."""

    def test_per_contract_values(self, sample_contract):
        assert CONTRACT_MULTIPLIER == 100
        assert sample_contract.premium_per_contract == pytest.approx(850.0)
        assert sample_contract.delta_per_contract == pytest.approx(65.0)

    def test_default_kind_is_call(self):
        contract = OptionContract('X', 100.0, '2025-11-15', 1.0, 0.5)
        assert contract.kind == 'call'

    def test_immutable(self, sample_contract):
        with pytest.raises(FrozenInstanceError):
            sample_contract.strike = 175.0

    def test_equality_and_hash(self, sample_contract):
        twin = OptionContract('AAPL20251115C170', 170.0, '2025-11-15', 8.5, 0.65, 'call')

        assert twin == sample_contract
        assert len({twin, sample_contract}) == 1

    def test_repr(self, sample_contract):
        text = repr(sample_contract)

        assert 'AAPL20251115C170' in text
        assert '170C' in text
        assert '0.650' in text


class TestQuote:
    """Test suite for Quote."""

    def test_default_timestamp_is_utc_now(self):
        before = datetime.now(timezone.utc)
        quote = Quote(symbol='AAPL', price=175.5)

        assert quote.as_of >= before
        assert quote.as_of.tzinfo is not None

    def test_repr(self):
        quote = Quote('AAPL', 175.5, datetime(2025, 10, 1, 15, 30, tzinfo=timezone.utc))

        assert repr(quote) == 'Quote(AAPL $175.50 @ 2025-10-01T15:30:00+00:00)'


class TestAllocationParameters:
    """Test suite for AllocationParameters."""

    def test_defaults(self):
        params = AllocationParameters()

        assert params.total_equity == 10000.0
        assert params.target_leverage == 1.75
        assert params.selected_expiry == ''
        assert params.delta_min == 0.3
        assert params.delta_max == 0.9

    def test_from_dict(self):
        params = AllocationParameters.from_dict({
            'total_equity': 25000,
            'target_leverage': '2.0',
            'selected_expiry': '2025-12-15',
            'delta_min': 0.4,
            'delta_max': 0.8,
        })

        assert params.total_equity == 25000.0
        assert params.target_leverage == 2.0
        assert params.selected_expiry == '2025-12-15'
        assert params.delta_min == 0.4
        assert params.delta_max == 0.8

    def test_from_dict_defaults_and_null_expiry(self):
        params = AllocationParameters.from_dict({'selected_expiry': None})

        assert params == AllocationParameters()

    def test_from_dict_bad_number(self):
        with pytest.raises(ConfigurationError):
            AllocationParameters.from_dict({'total_equity': 'lots'})

    def test_validate_accepts_defaults(self):
        AllocationParameters().validate()

    @pytest.mark.parametrize("kwargs,message", [
        ({'total_equity': 0.0}, 'Total equity'),
        ({'total_equity': float('nan')}, 'Total equity'),
        ({'target_leverage': 0.0}, 'Leverage'),
        ({'delta_min': -0.1}, 'Delta bounds'),
        ({'delta_min': 0.6, 'delta_max': 0.5}, 'Delta bounds'),
        ({'delta_max': 1.01}, 'Delta bounds'),
        ({'delta_max': float('inf')}, 'Delta bounds'),
    ])
    def test_validate_rejects(self, kwargs, message):
        with pytest.raises(ConfigurationError, match=message):
            AllocationParameters(**kwargs).validate()

    def test_with_expiry(self):
        params = AllocationParameters(total_equity=5000.0)
        updated = params.with_expiry('2026-01-15')

        assert updated.selected_expiry == '2026-01-15'
        assert updated.total_equity == 5000.0
        assert params.selected_expiry == ''


class TestAllocationResult:
    """Test suite for AllocationResult."""

    def test_costs(self, sample_contract):
        result = AllocationResult(
            contract=sample_contract,
            contracts_count=3,
            shares_count=7450 / 175.5,
            total_cost=10000.0,
            achieved_leverage=1.84,
            leverage_gap=0.09,
            delta_exposure=237.45,
            valid=True,
        )

        assert result.contract_cost == pytest.approx(2550.0)
        assert result.share_cost == pytest.approx(7450.0)
        assert result.is_whole_contracts
        assert result.message == ''

    def test_invalid_factory(self, sample_contract):
        result = AllocationResult.invalid(
            sample_contract, CONTRACT_COST_EXCEEDS_EQUITY, contracts_count=12, total_cost=10200.0,
        )

        assert result.valid is False
        assert result.reason == CONTRACT_COST_EXCEEDS_EQUITY
        assert result.contracts_count == 12
        assert result.shares_count == 0.0
        assert result.message == 'Contract cost exceeds available equity'
        assert 'INVALID' in repr(result)

    def test_every_reason_has_a_message(self):
        assert len(REASON_MESSAGES) == 7
        assert all(REASON_MESSAGES.values())

    def test_fractional_contracts(self, sample_contract):
        result = AllocationResult(
            contract=sample_contract, contracts_count=0.7104, shares_count=53.54,
            total_cost=10000.0, achieved_leverage=1.75, leverage_gap=0.0,
            delta_exposure=99.71, valid=True,
        )

        assert not result.is_whole_contracts
