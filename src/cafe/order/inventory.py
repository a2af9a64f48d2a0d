"""Committing stock for a fulfilled order.

Fulfillment runs two passes over the order's lines while holding the item
locks. The availability pass collects every shortfall before anything is
touched; only if there are none does the decrement pass run. Quantities for an
item that appears on several lines are summed first, so repeated lines cannot
overdraw stock between them.
"""

from collections import Counter

from cafe.domain import logger
from cafe.errors import InsufficientInventory
from cafe.item.item import StockShortfall


def required_quantities(order) -> dict[str, int]:
    """Total units needed per item id, in first-seen order."""
    needed: Counter = Counter()
    for line in order.lines:
        needed[str(line.item_id)] += line.amount
    return dict(needed)


def check_availability(order, item_repository) -> list[StockShortfall]:
    """Return the items that cannot cover the order. Raises ItemNotFound for deleted items."""
    shortfalls = []
    for item_id, quantity in required_quantities(order).items():
        item = item_repository.find_item(item_id)
        if not item.can_cover(quantity):
            shortfalls.append(
                StockShortfall(
                    item_id=item_id,
                    item_name=item.name,
                    requested=quantity,
                    on_hand=item.amount,
                )
            )
    return shortfalls


def commit_inventory(order, item_repository) -> None:
    shortfalls = check_availability(order, item_repository)
    if shortfalls:
        logger.info(
            "insufficient_inventory",
            order_id=str(order.id),
            items=[s.item_name for s in shortfalls],
        )
        raise InsufficientInventory(shortfalls)

    for item_id, quantity in required_quantities(order).items():
        item = item_repository.decrement(item_id, quantity, order_id=order.id)
        logger.info(
            "stock_decremented",
            order_id=str(order.id),
            item_id=item_id,
            quantity=quantity,
            remaining=item.amount,
        )
