"""Domain events for the TaxRate record."""

from protean.fields import DateTime, Float

from cafe.domain import cafe


@cafe.event(part_of="TaxRate")
class TaxRateChanged:
    """The current tax rate was replaced. Existing orders keep their snapshot."""

    __version__ = 1

    previous_rate = Float(required=True)
    new_rate = Float(required=True)
    changed_at = DateTime(required=True)
