"""Domain events for the Item aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from cafe.domain import cafe


@cafe.event(part_of="Item")
class ItemAdded:
    """A new item was put on the menu."""

    __version__ = 1

    item_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)
    amount = Integer(required=True)
    added_at = DateTime(required=True)


@cafe.event(part_of="Item")
class ItemUpdated:
    """An item's name, description, price or stock was replaced."""

    __version__ = 1

    item_id = Identifier(required=True)
    name = String(required=True)
    previous_price = Float(required=True)
    new_price = Float(required=True)
    previous_amount = Integer(required=True)
    new_amount = Integer(required=True)
    updated_at = DateTime(required=True)


@cafe.event(part_of="Item")
class StockDecremented:
    """Stock was committed to a fulfilled order."""

    __version__ = 1

    item_id = Identifier(required=True)
    order_id = Identifier()
    quantity = Integer(required=True)
    previous_amount = Integer(required=True)
    new_amount = Integer(required=True)
    decremented_at = DateTime(required=True)
