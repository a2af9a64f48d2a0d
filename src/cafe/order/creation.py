"""Order creation: command and handler."""

import json

from protean import handle
from protean.fields import Float, String, Text
from protean.utils.globals import current_domain

from cafe.domain import cafe, logger
from cafe.item.item import Item
from cafe.order.lines import OrderLineBuilder
from cafe.order.order import Order
from cafe.tax.management import tax_registry


@cafe.command(part_of="Order")
class PlaceOrder:
    name = String(required=True, max_length=100)  # Placing customer's username
    lines = Text(required=True)  # JSON: list of {item_id, amount}
    tip = Float(default=0.0)


@cafe.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        built = OrderLineBuilder(current_domain.repository_for(Item)).build(command.lines)
        rate = tax_registry().current_rate()

        order = Order.place(name=command.name, built=built, tip=command.tip, rate=rate)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            username=order.name,
            lines=len(order.lines),
            total_price=order.total_price,
        )
        return str(order.id)


def place_order(caller, lines, tip=0.0) -> Order:
    """Place an order in ``caller``'s name and return it."""
    order_id = current_domain.process(
        PlaceOrder(
            name=caller.username,
            lines=json.dumps(lines) if not isinstance(lines, str) else lines,
            tip=tip if tip is not None else 0.0,
        ),
        asynchronous=False,
    )
    return current_domain.repository_for(Order).find_order(order_id)
