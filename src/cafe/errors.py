"""Error taxonomy for the cafe domain.

Every failure that reaches a caller is a ``CafeError`` carrying a stable
``kind``, a user-presentable message and a ``details`` mapping. The API layer
renders these as ``{"kind", "message", "details"}`` with the class's
``status_code``.

Hierarchy:
- CafeError
  - NotFound (ItemNotFound, OrderNotFound)
  - InvalidInput (DuplicateItemName)
  - Forbidden
  - OwnershipMismatch
  - InvalidTransition
  - AlreadyCompleted
  - InsufficientInventory
  - Conflict
"""

from typing import Any


class CafeError(Exception):
    """Base exception for all cafe domain errors."""

    kind = "error"
    status_code = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message, "details": self.details}


class NotFound(CafeError):
    kind = "not_found"
    status_code = 404


class ItemNotFound(NotFound):
    """Raised when a catalog item id does not resolve."""

    def __init__(self, item_id: str) -> None:
        self.item_id = item_id
        super().__init__(f"Item not found with id: {item_id}", details={"item_id": str(item_id)})


class OrderNotFound(NotFound):
    """Raised when an order id does not resolve."""

    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__(f"Order not found with id: {order_id}", details={"order_id": str(order_id)})


class InvalidInput(CafeError):
    kind = "invalid_input"
    status_code = 400


class DuplicateItemName(InvalidInput):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"An item named '{name}' already exists", details={"name": name})


class Forbidden(CafeError):
    """Caller's role does not permit the requested operation."""

    kind = "forbidden"
    status_code = 403


class OwnershipMismatch(CafeError):
    """Caller is not the customer who placed the order."""

    kind = "ownership_mismatch"
    status_code = 403


class InvalidTransition(CafeError):
    kind = "invalid_transition"
    status_code = 400


class AlreadyCompleted(CafeError):
    """The order has already reached the state the caller is moving it out of."""

    kind = "already_completed"
    status_code = 400


class InsufficientInventory(CafeError):
    """One or more items cannot cover the quantity an order needs."""

    kind = "insufficient_inventory"
    status_code = 400

    def __init__(self, shortfalls) -> None:
        self.shortfalls = list(shortfalls)
        names = ", ".join(s.item_name for s in self.shortfalls)
        super().__init__(
            f"Not enough inventory for item: {names}",
            details={
                "items": [
                    {
                        "item_id": str(s.item_id),
                        "item_name": s.item_name,
                        "requested": s.requested,
                        "on_hand": s.on_hand,
                    }
                    for s in self.shortfalls
                ]
            },
        )


class Conflict(CafeError):
    """Concurrent work on the same order or items did not clear in time."""

    kind = "conflict"
    status_code = 409

    def __init__(self, keys, attempts: int) -> None:
        self.keys = list(keys)
        self.attempts = attempts
        super().__init__(
            "The order is being processed by another request, please retry",
            details={"resources": self.keys, "attempts": attempts},
        )
