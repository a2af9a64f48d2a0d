"""Tax administration: command and handler."""

from protean import handle
from protean.fields import Float
from protean.utils.globals import current_domain

from cafe.domain import cafe
from cafe.tax.tax import TaxRate, TaxRegistry


@cafe.command(part_of="TaxRate")
class SetTaxRate:
    rate = Float(required=True)


@cafe.command_handler(part_of=TaxRate)
class ManageTaxRateHandler:
    @handle(SetTaxRate)
    def set_tax_rate(self, command):
        registry = TaxRegistry(current_domain.repository_for(TaxRate))
        return registry.set_rate(command.rate)


def tax_registry() -> TaxRegistry:
    """Registry bound to the active domain's TaxRate repository."""
    return TaxRegistry(current_domain.repository_for(TaxRate))


def get_tax_rate() -> float:
    return tax_registry().current_rate()


def set_tax_rate(rate) -> float:
    return current_domain.process(SetTaxRate(rate=rate), asynchronous=False)
