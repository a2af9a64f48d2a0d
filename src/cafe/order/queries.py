"""Read side for orders. Orders are read straight from their repository."""

from protean.utils.globals import current_domain

from cafe.order.order import Order


def get_order(order_id) -> Order:
    return current_domain.repository_for(Order).find_order(order_id)


def list_orders() -> list[Order]:
    return current_domain.repository_for(Order).list_orders()


def list_orders_by_name(name: str) -> list[Order]:
    return current_domain.repository_for(Order).list_by_name(name)
