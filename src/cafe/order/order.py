"""Order aggregate (CQRS): the core of the cafe domain.

An Order is a priced, immutable record of what a customer asked for. Each
line carries a snapshot of the item's name and price taken when the order was
built, so catalog edits after the fact never reprice it. The tax rate in force
at checkout is snapshotted the same way.

State Machine:
    PENDING → FULFILLED → PICKED_UP

    Fulfillment is staff-only and commits stock for every line exactly once.
    Pickup is only for the customer who placed the order. PICKED_UP is
    terminal. Nothing moves an order back to PENDING.

Pricing:
    total_price = subtotal + subtotal * (taxrate / 100) + tip
"""

import json
import math
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from cafe.domain import cafe
from cafe.errors import (
    AlreadyCompleted,
    Forbidden,
    InvalidInput,
    InvalidTransition,
    OrderNotFound,
    OwnershipMismatch,
)
from cafe.order.events import OrderFulfilled, OrderPickedUp, OrderPlaced, OrderUpdated
from cafe.roles import STAFF_ROLES


class OrderStatus(Enum):
    PENDING = "Pending"
    FULFILLED = "Fulfilled"
    PICKED_UP = "Picked_Up"

    @classmethod
    def parse(cls, value) -> "OrderStatus":
        """Accept an OrderStatus, its value ("Picked_Up") or its name ("PICKED_UP")."""
        if isinstance(value, cls):
            return value
        if value is None or not str(value).strip():
            raise InvalidInput("Order status is required", details={"status": value})

        text = str(value).strip()
        for status in cls:
            if text.upper() in (status.name, status.value.upper()):
                return status
        raise InvalidInput(f"Unknown order status: {value}", details={"status": text})


def compute_total(subtotal, rate, tip) -> float:
    return subtotal + subtotal * (rate / 100) + tip


@cafe.entity(part_of="Order")
class OrderLine:
    item_id = Identifier(required=True)
    item_name = String(required=True, max_length=100)
    amount = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)

    @property
    def line_total(self) -> float:
        return self.price * self.amount

    def to_dict(self) -> dict:
        return {
            "item_id": str(self.item_id),
            "item_name": self.item_name,
            "amount": self.amount,
            "price": self.price,
        }


@cafe.aggregate
class Order:
    name = String(required=True, max_length=100)
    lines = HasMany(OrderLine)
    tip = Float(default=0.0, min_value=0.0)
    taxrate = Float(default=0.0, min_value=0.0)
    total_price = Float(default=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, name, built, tip, rate):
        """Assemble a Pending order from built lines, a tip and the current tax rate."""
        if not name or not str(name).strip():
            raise InvalidInput("Order name is required", details={"name": name})
        tip = 0.0 if tip is None else tip
        if not math.isfinite(tip):
            raise InvalidInput("Tip must be a finite number", details={"tip": str(tip)})
        if tip < 0:
            raise InvalidInput("Tip cannot be negative", details={"tip": tip})

        now = datetime.now(UTC)
        order = cls(
            name=name,
            tip=tip,
            taxrate=rate,
            total_price=compute_total(built.subtotal, rate, tip),
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        for line in built.lines:
            order.add_lines(line)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                name=order.name,
                lines=order.lines_json(),
                subtotal=built.subtotal,
                tip=order.tip,
                taxrate=order.taxrate,
                total_price=order.total_price,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Revision
    # -------------------------------------------------------------------
    def revise(self, name, built, rate):
        """Replace name and lines wholesale. Only a Pending order can be revised.

        The stored tip is kept and the tax rate is re-snapshotted.
        """
        if OrderStatus(self.status) != OrderStatus.PENDING:
            raise InvalidTransition(
                f"Only pending orders can be updated (order is {self.status})",
                details={"order_id": str(self.id), "status": self.status},
            )
        if not name or not str(name).strip():
            raise InvalidInput("Order name is required", details={"name": name})

        for line in list(self.lines):
            self.remove_lines(line)
        for line in built.lines:
            self.add_lines(line)

        now = datetime.now(UTC)
        self.name = name
        self.taxrate = rate
        self.total_price = compute_total(built.subtotal, rate, self.tip or 0.0)
        self.updated_at = now

        self.raise_(
            OrderUpdated(
                order_id=str(self.id),
                name=self.name,
                lines=self.lines_json(),
                subtotal=built.subtotal,
                taxrate=self.taxrate,
                total_price=self.total_price,
                updated_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def check_transition(self, target, caller) -> None:
        """Raise unless ``caller`` may move this order to ``target`` right now."""
        current = OrderStatus(self.status)
        details = {"order_id": str(self.id), "status": current.value, "target": target.value}

        if current == OrderStatus.PICKED_UP:
            raise AlreadyCompleted("Order has already been picked up", details=details)

        if target == OrderStatus.FULFILLED:
            if caller.role not in STAFF_ROLES:
                raise Forbidden("Only staff can fulfill orders", details={**details, "role": caller.role.value})
            if current == OrderStatus.FULFILLED:
                raise AlreadyCompleted("Order has already been fulfilled", details=details)
            return

        if target == OrderStatus.PICKED_UP:
            if caller.username != self.name:
                raise OwnershipMismatch(
                    "Only the customer who placed the order can pick it up",
                    details={**details, "username": caller.username},
                )
            if current != OrderStatus.FULFILLED:
                raise InvalidTransition("Order must be fulfilled before pickup", details=details)
            return

        raise InvalidTransition(f"Cannot move order to {target.value}", details=details)

    def fulfill(self, caller):
        """Mark the order Fulfilled. Stock must already have been committed."""
        self.check_transition(OrderStatus.FULFILLED, caller)

        now = datetime.now(UTC)
        self.status = OrderStatus.FULFILLED.value
        self.updated_at = now

        self.raise_(
            OrderFulfilled(
                order_id=str(self.id),
                fulfilled_by=caller.username,
                line_count=len(self.lines),
                fulfilled_at=now,
            )
        )

    def pick_up(self, caller):
        self.check_transition(OrderStatus.PICKED_UP, caller)

        now = datetime.now(UTC)
        self.status = OrderStatus.PICKED_UP.value
        self.updated_at = now

        self.raise_(
            OrderPickedUp(
                order_id=str(self.id),
                picked_up_by=caller.username,
                picked_up_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------
    @property
    def subtotal(self) -> float:
        return sum(line.line_total for line in self.lines)

    def item_ids(self) -> list[str]:
        return sorted({str(line.item_id) for line in self.lines})

    def lines_json(self) -> str:
        return json.dumps([line.to_dict() for line in self.lines])


@cafe.repository(part_of=Order)
class OrderRepository:
    """Order store: lookups and hard deletion."""

    def find_order(self, order_id) -> Order:
        try:
            return self.get(order_id)
        except ObjectNotFoundError:
            raise OrderNotFound(order_id) from None

    def list_orders(self) -> list[Order]:
        return self._dao.query.order_by("created_at").all().items

    def list_by_name(self, name: str) -> list[Order]:
        return self._dao.query.filter(name=name).order_by("created_at").all().items

    def delete_order(self, order: Order) -> None:
        self._dao.delete(order)
