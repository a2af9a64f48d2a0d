"""Pydantic request/response schemas for the cafe API.

These are external contracts, separate from the internal Protean commands.
Value checks (negative prices, zero quantities) are left to the domain so
that every rejection carries the same error shape.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------
class ItemRequest(BaseModel):
    name: str
    description: str | None = None
    price: float
    amount: int = 0

    model_config = {
        "json_schema_extra": {
            "examples": [{"name": "Latte", "description": "Espresso with steamed milk", "price": 3.0, "amount": 10}]
        }
    }


class ItemResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    price: float
    amount: int

    @classmethod
    def from_item(cls, item) -> "ItemResponse":
        return cls(
            id=str(item.id),
            name=item.name,
            description=item.description,
            price=item.price,
            amount=item.amount,
        )


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderLineRequest(BaseModel):
    item_id: str | None = None
    amount: int


class CreateOrderRequest(BaseModel):
    lines: list[OrderLineRequest] = Field(default_factory=list)
    tip: float = 0.0

    model_config = {
        "json_schema_extra": {
            "examples": [{"lines": [{"item_id": "<latte-id>", "amount": 2}], "tip": 1.0}]
        }
    }


class UpdateOrderRequest(BaseModel):
    name: str
    lines: list[OrderLineRequest] = Field(default_factory=list)


class ChangeStatusRequest(BaseModel):
    status: str


class OrderLineResponse(BaseModel):
    item_id: str
    item_name: str
    amount: int
    price: float


class OrderResponse(BaseModel):
    id: str
    name: str
    lines: list[OrderLineResponse]
    tip: float
    taxrate: float
    total_price: float
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        return cls(
            id=str(order.id),
            name=order.name,
            lines=[OrderLineResponse(**line.to_dict()) for line in order.lines],
            tip=order.tip,
            taxrate=order.taxrate,
            total_price=order.total_price,
            status=order.status,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


# ---------------------------------------------------------------------------
# Tax
# ---------------------------------------------------------------------------
class TaxRateRequest(BaseModel):
    rate: float


class TaxRateResponse(BaseModel):
    rate: float


# ---------------------------------------------------------------------------
# Common
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"
