"""Turning a requested basket into priced order lines.

Callers send ``[{"item_id": ..., "amount": ...}, ...]``. Each request is
resolved against the catalog and snapshotted into an ``OrderLine`` carrying the
item's current name and price. Placing and updating an order both go through
``OrderLineBuilder.build``, so an update is always a full replacement.
"""

import json
from dataclasses import dataclass, field

from cafe.errors import InvalidInput
from cafe.order.order import OrderLine


@dataclass
class BuiltLines:
    lines: list[OrderLine] = field(default_factory=list)
    subtotal: float = 0.0


def parse_requested_lines(raw) -> list[dict]:
    """Accept a JSON string or a list of mappings and return a list of mappings."""
    if raw is None:
        raise InvalidInput("An order needs at least one line", details={"lines": []})
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise InvalidInput("Order lines must be valid JSON", details={"lines": str(exc)}) from None
    if not isinstance(raw, list):
        raise InvalidInput("Order lines must be a list", details={"lines": type(raw).__name__})
    return raw


class OrderLineBuilder:
    def __init__(self, item_repository):
        self.item_repository = item_repository

    def build(self, requested) -> BuiltLines:
        requested = parse_requested_lines(requested)
        if not requested:
            raise InvalidInput("An order needs at least one line", details={"lines": []})

        built = BuiltLines()
        for position, entry in enumerate(requested):
            if not isinstance(entry, dict):
                raise InvalidInput("Each order line must be an object", details={"line": position})

            item_id = entry.get("item_id")
            if not item_id:
                raise InvalidInput("Item id is required", details={"line": position})

            amount = entry.get("amount")
            if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
                raise InvalidInput(
                    "Quantity must be a positive whole number",
                    details={"line": position, "item_id": str(item_id), "amount": amount},
                )

            item = self.item_repository.find_item(item_id)
            built.lines.append(
                OrderLine(
                    item_id=str(item.id),
                    item_name=item.name,
                    amount=amount,
                    price=item.price,
                )
            )
            built.subtotal += item.price * amount

        return built
