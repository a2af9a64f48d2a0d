"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from cafe.domain import cafe


@cafe.event(part_of="Order")
class OrderPlaced:
    """A customer placed a new order. It starts out Pending."""

    __version__ = 1

    order_id = Identifier(required=True)
    name = String(required=True)
    lines = Text(required=True)  # JSON: list of {item_id, item_name, amount, price}
    subtotal = Float(required=True)
    tip = Float(required=True)
    taxrate = Float(required=True)
    total_price = Float(required=True)
    placed_at = DateTime(required=True)


@cafe.event(part_of="Order")
class OrderUpdated:
    """A Pending order's lines and name were replaced."""

    __version__ = 1

    order_id = Identifier(required=True)
    name = String(required=True)
    lines = Text(required=True)
    subtotal = Float(required=True)
    taxrate = Float(required=True)
    total_price = Float(required=True)
    updated_at = DateTime(required=True)


@cafe.event(part_of="Order")
class OrderFulfilled:
    """Staff fulfilled the order. Stock for every line has been committed."""

    __version__ = 1

    order_id = Identifier(required=True)
    fulfilled_by = String(required=True)
    line_count = Integer(required=True)
    fulfilled_at = DateTime(required=True)


@cafe.event(part_of="Order")
class OrderPickedUp:
    """The customer collected the order. Terminal."""

    __version__ = 1

    order_id = Identifier(required=True)
    picked_up_by = String(required=True)
    picked_up_at = DateTime(required=True)
