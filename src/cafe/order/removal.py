"""Order deletion: command and handler. Deletion is permanent."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from cafe.domain import cafe, logger
from cafe.locks import cafe_locks, order_key
from cafe.order.order import Order


@cafe.command(part_of="Order")
class DeleteOrder:
    order_id = Identifier(required=True)


@cafe.command_handler(part_of=Order)
class DeleteOrderHandler:
    @handle(DeleteOrder)
    def delete_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find_order(command.order_id)
        repo.delete_order(order)

        logger.info("order_deleted", order_id=str(order.id), username=order.name, status=order.status)
        return str(order.id)


def delete_order(order_id) -> None:
    with cafe_locks.hold([order_key(order_id)]):
        current_domain.process(DeleteOrder(order_id=order_id), asynchronous=False)
