"""TaxRate record (CQRS) and the registry that reads and replaces it.

There is exactly one current rate. It is stored under a fixed identity so that
setting a rate overwrites the previous one instead of accumulating history.
Orders copy the rate when they are placed or updated, so a later change never
reprices an existing order.
"""

import math
from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float

from cafe.domain import cafe, logger
from cafe.errors import InvalidInput
from cafe.tax.events import TaxRateChanged

TAX_RATE_ID = "current"
DEFAULT_RATE = 0.0


@cafe.aggregate
class TaxRate:
    rate = Float(default=DEFAULT_RATE, min_value=0.0)
    updated_at = DateTime()

    def change_rate(self, new_rate):
        if new_rate is None or not math.isfinite(new_rate):
            raise InvalidInput("Tax rate must be a finite number", details={"rate": str(new_rate)})
        if new_rate < 0:
            raise InvalidInput("Tax rate cannot be negative", details={"rate": new_rate})

        previous_rate = self.rate
        now = datetime.now(UTC)
        self.rate = float(new_rate)
        self.updated_at = now

        self.raise_(
            TaxRateChanged(
                previous_rate=previous_rate,
                new_rate=self.rate,
                changed_at=now,
            )
        )


class TaxRegistry:
    """Single source of the tax rate applied at checkout.

    Wraps the TaxRate repository. ``current_rate`` never fails: when no rate has
    been set it reports ``DEFAULT_RATE``.
    """

    def __init__(self, repository):
        self.repository = repository

    def _record(self):
        try:
            return self.repository.get(TAX_RATE_ID)
        except ObjectNotFoundError:
            return None

    def current_rate(self) -> float:
        record = self._record()
        if record is None or record.rate is None:
            return DEFAULT_RATE
        return record.rate

    def set_rate(self, rate) -> float:
        record = self._record()
        if record is None:
            record = TaxRate(id=TAX_RATE_ID, rate=DEFAULT_RATE)

        record.change_rate(rate)
        self.repository.add(record)

        logger.info("tax_rate_changed", rate=record.rate)
        return record.rate
