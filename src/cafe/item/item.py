"""Item aggregate (CQRS) and the catalog store built on its repository.

An Item is a priced, stock-tracked menu entry. Orders never hold a live
reference to an Item beyond its id: the name and price a customer was
charged are copied into the order's lines when the order is built.

Stock Model:
    amount: units on hand. Never negative. Decrements are pre-checked and
            refused with InsufficientInventory rather than clamped.
"""

import math
from dataclasses import dataclass
from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Integer, String, Text

from cafe.domain import cafe
from cafe.errors import InsufficientInventory, InvalidInput, ItemNotFound
from cafe.item.events import ItemAdded, ItemUpdated, StockDecremented


@dataclass(frozen=True)
class StockShortfall:
    """An item that cannot cover what an order asks of it."""

    item_id: str
    item_name: str
    requested: int
    on_hand: int


def _validate_listing(name, price, amount):
    errors = {}
    if not name or not str(name).strip():
        errors["name"] = "Item name is required"
    if price is None or not math.isfinite(price):
        errors["price"] = "Item price must be a finite number"
    elif price < 0:
        errors["price"] = "Item price cannot be negative"
    if amount is None or amount < 0:
        errors["amount"] = "Item amount cannot be negative"
    if errors:
        raise InvalidInput("; ".join(errors.values()), details=errors)


@cafe.aggregate
class Item:
    name = String(required=True, max_length=100)
    description = Text()
    amount = Integer(default=0, min_value=0)
    price = Float(default=0.0, min_value=0.0)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, name, price, amount=0, description=None):
        _validate_listing(name, price, amount)

        now = datetime.now(UTC)
        item = cls(
            name=name.strip(),
            description=description,
            amount=amount,
            price=price,
            created_at=now,
            updated_at=now,
        )
        item.raise_(
            ItemAdded(
                item_id=str(item.id),
                name=item.name,
                price=item.price,
                amount=item.amount,
                added_at=now,
            )
        )
        return item

    def update_details(self, name, price, amount, description=None):
        """Replace the item's listing. Historical order lines are unaffected."""
        _validate_listing(name, price, amount)

        previous_price = self.price
        previous_amount = self.amount
        now = datetime.now(UTC)

        self.name = name.strip()
        self.description = description
        self.price = price
        self.amount = amount
        self.updated_at = now

        self.raise_(
            ItemUpdated(
                item_id=str(self.id),
                name=self.name,
                previous_price=previous_price,
                new_price=self.price,
                previous_amount=previous_amount,
                new_amount=self.amount,
                updated_at=now,
            )
        )

    def can_cover(self, quantity) -> bool:
        return (self.amount or 0) >= quantity

    def decrement_stock(self, quantity, order_id=None):
        """Remove ``quantity`` units from stock, refusing to go below zero."""
        if quantity <= 0:
            raise InvalidInput("Quantity must be positive", details={"quantity": quantity})
        if not self.can_cover(quantity):
            raise InsufficientInventory(
                [StockShortfall(item_id=str(self.id), item_name=self.name, requested=quantity, on_hand=self.amount)]
            )

        previous_amount = self.amount
        now = datetime.now(UTC)
        self.amount = previous_amount - quantity
        self.updated_at = now

        self.raise_(
            StockDecremented(
                item_id=str(self.id),
                order_id=str(order_id) if order_id else None,
                quantity=quantity,
                previous_amount=previous_amount,
                new_amount=self.amount,
                decremented_at=now,
            )
        )


@cafe.repository(part_of=Item)
class ItemRepository:
    """Catalog store: lookups and stock mutation for Items."""

    def find_item(self, item_id) -> Item:
        try:
            return self.get(item_id)
        except ObjectNotFoundError:
            raise ItemNotFound(item_id) from None

    def find_by_name(self, name: str) -> Item | None:
        matches = self._dao.query.filter(name=name).all().items
        return matches[0] if matches else None

    def list_items(self) -> list[Item]:
        return self._dao.query.order_by("name").all().items

    def decrement(self, item_id, quantity, order_id=None) -> Item:
        item = self.find_item(item_id)
        item.decrement_stock(quantity, order_id=order_id)
        self.add(item)
        return item

    def delete_item(self, item: Item) -> None:
        self._dao.delete(item)
