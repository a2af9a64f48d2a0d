"""Order modification: command and handler.

An update replaces the order's name and lines wholesale and re-snapshots the
current tax rate. The stored tip carries over. Only Pending orders can be
updated; the order key is held for the whole unit of work.
"""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from cafe.domain import cafe, logger
from cafe.item.item import Item
from cafe.locks import cafe_locks, order_key
from cafe.order.lines import OrderLineBuilder
from cafe.order.order import Order
from cafe.tax.management import tax_registry


@cafe.command(part_of="Order")
class UpdateOrder:
    order_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    lines = Text(required=True)  # JSON: list of {item_id, amount}


@cafe.command_handler(part_of=Order)
class UpdateOrderHandler:
    @handle(UpdateOrder)
    def update_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find_order(command.order_id)

        built = OrderLineBuilder(current_domain.repository_for(Item)).build(command.lines)
        order.revise(name=command.name, built=built, rate=tax_registry().current_rate())
        repo.add(order)

        logger.info(
            "order_updated",
            order_id=str(order.id),
            username=order.name,
            lines=len(order.lines),
            total_price=order.total_price,
        )
        return str(order.id)


def update_order(order_id, lines, name) -> Order:
    with cafe_locks.hold([order_key(order_id)]):
        current_domain.process(
            UpdateOrder(
                order_id=order_id,
                name=name,
                lines=json.dumps(lines) if not isinstance(lines, str) else lines,
            ),
            asynchronous=False,
        )
    return current_domain.repository_for(Order).find_order(order_id)
