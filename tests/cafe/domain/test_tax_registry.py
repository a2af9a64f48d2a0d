"""Tests for the TaxRate record and the registry in front of it."""

import pytest
from cafe.errors import InvalidInput
from cafe.tax.events import TaxRateChanged
from cafe.tax.tax import DEFAULT_RATE, TAX_RATE_ID, TaxRate, TaxRegistry
from protean.utils.globals import current_domain


@pytest.fixture()
def registry():
    return TaxRegistry(current_domain.repository_for(TaxRate))


class TestTaxRate:
    def test_change_rate(self):
        record = TaxRate(id=TAX_RATE_ID)
        record.change_rate(7.5)

        assert record.rate == 7.5
        event = record._events[0]
        assert isinstance(event, TaxRateChanged)
        assert event.previous_rate == 0.0
        assert event.new_rate == 7.5

    def test_negative_rate_rejected(self):
        record = TaxRate(id=TAX_RATE_ID, rate=2.0)
        with pytest.raises(InvalidInput):
            record.change_rate(-1)
        assert record.rate == 2.0

    @pytest.mark.parametrize("rate", [float("inf"), float("nan")])
    def test_non_finite_rate_rejected(self, rate):
        record = TaxRate(id=TAX_RATE_ID, rate=2.0)
        with pytest.raises(InvalidInput) as exc:
            record.change_rate(rate)
        assert exc.value.kind == "invalid_input"
        assert record.rate == 2.0
        assert not record._events


class TestTaxRegistry:
    def test_unset_rate_defaults_to_zero(self, registry):
        assert registry.current_rate() == DEFAULT_RATE == 0.0

    def test_set_then_read(self, registry):
        registry.set_rate(2.0)
        assert registry.current_rate() == 2.0

    def test_set_replaces_previous_rate(self, registry):
        registry.set_rate(2.0)
        registry.set_rate(8.25)

        assert registry.current_rate() == 8.25
        assert len(current_domain.repository_for(TaxRate)._dao.query.all().items) == 1

    def test_zero_rate_allowed(self, registry):
        registry.set_rate(5.0)
        registry.set_rate(0)
        assert registry.current_rate() == 0.0

    def test_negative_rate_keeps_previous(self, registry):
        registry.set_rate(5.0)
        with pytest.raises(InvalidInput):
            registry.set_rate(-1.0)
        assert registry.current_rate() == 5.0
