"""Order lifecycle: status change command and handler.

A status change is validated against the order's current state and the
caller before anything is mutated. Fulfillment additionally commits stock:
every item on the order is checked first and only then decremented, all
inside one unit of work.

``change_order_status`` is the entry point. It holds the order key, then the
keys of every item on the order, until the unit of work has committed, so two
fulfillments sharing an item cannot both pass the availability check.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from cafe.domain import cafe, logger
from cafe.item.item import Item
from cafe.locks import cafe_locks, item_key, order_key
from cafe.order.inventory import commit_inventory
from cafe.order.order import Order, OrderStatus
from cafe.roles import Caller
from cafe.utils.logging import log_context


@cafe.command(part_of="Order")
class ChangeOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    username = String(required=True, max_length=100)
    role = String(required=True, max_length=20)


@cafe.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(ChangeOrderStatus)
    def change_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find_order(command.order_id)
        target = OrderStatus.parse(command.status)
        caller = Caller.of(command.username, command.role)

        order.check_transition(target, caller)

        if target == OrderStatus.FULFILLED:
            commit_inventory(order, current_domain.repository_for(Item))
            order.fulfill(caller)
        else:
            order.pick_up(caller)
        repo.add(order)

        logger.info(
            "order_fulfilled" if target == OrderStatus.FULFILLED else "order_picked_up",
            order_id=str(order.id),
            status=order.status,
            username=caller.username,
            role=caller.role.value,
        )
        return str(order.id)


def change_order_status(order_id, status, caller) -> Order:
    repo = current_domain.repository_for(Order)

    with log_context(order_id=str(order_id), username=caller.username), cafe_locks.hold([order_key(order_id)]):
        order = repo.find_order(order_id)
        item_keys = [item_key(item_id) for item_id in order.item_ids()]

        with cafe_locks.hold(item_keys):
            current_domain.process(
                ChangeOrderStatus(
                    order_id=order_id,
                    status=status.value if isinstance(status, OrderStatus) else str(status),
                    username=caller.username,
                    role=caller.role.value,
                ),
                asynchronous=False,
            )

    return repo.find_order(order_id)
