"""FastAPI endpoints for the cafe domain."""

from fastapi import APIRouter, Depends

from cafe.api.dependencies import get_caller, require_admin, require_staff
from cafe.api.schemas import (
    ChangeStatusRequest,
    CreateOrderRequest,
    ItemRequest,
    ItemResponse,
    OrderResponse,
    StatusResponse,
    TaxRateRequest,
    TaxRateResponse,
    UpdateOrderRequest,
)
from cafe.item.management import add_item, get_item, list_items, remove_item, update_item
from cafe.order.creation import place_order
from cafe.order.lifecycle import change_order_status
from cafe.order.modification import update_order
from cafe.order.queries import get_order, list_orders, list_orders_by_name
from cafe.order.removal import delete_order
from cafe.roles import Caller
from cafe.tax.management import get_tax_rate, set_tax_rate

items_router = APIRouter(prefix="/items", tags=["items"])
orders_router = APIRouter(prefix="/orders", tags=["orders"])
tax_router = APIRouter(prefix="/tax", tags=["tax"])


def _lines(body_lines) -> list[dict]:
    return [line.model_dump() for line in body_lines]


# --- Item endpoints ---


@items_router.get("", response_model=list[ItemResponse])
async def list_menu(caller: Caller = Depends(get_caller)) -> list[ItemResponse]:  # noqa: ARG001
    return [ItemResponse.from_item(item) for item in list_items()]


@items_router.get("/{item_id}", response_model=ItemResponse)
async def read_item(item_id: str, caller: Caller = Depends(get_caller)) -> ItemResponse:  # noqa: ARG001
    return ItemResponse.from_item(get_item(item_id))


@items_router.post("", status_code=201, response_model=ItemResponse)
async def create_item(body: ItemRequest, caller: Caller = Depends(require_staff)) -> ItemResponse:  # noqa: ARG001
    item = add_item(name=body.name, price=body.price, amount=body.amount, description=body.description)
    return ItemResponse.from_item(item)


@items_router.put("/{item_id}", response_model=ItemResponse)
async def replace_item(item_id: str, body: ItemRequest, caller: Caller = Depends(require_staff)) -> ItemResponse:  # noqa: ARG001
    item = update_item(
        item_id,
        name=body.name,
        price=body.price,
        amount=body.amount,
        description=body.description,
    )
    return ItemResponse.from_item(item)


@items_router.delete("/{item_id}", response_model=StatusResponse)
async def delete_item(item_id: str, caller: Caller = Depends(require_staff)) -> StatusResponse:  # noqa: ARG001
    remove_item(item_id)
    return StatusResponse()


# --- Order endpoints ---


@orders_router.get("", response_model=list[OrderResponse])
async def read_orders(caller: Caller = Depends(get_caller)) -> list[OrderResponse]:  # noqa: ARG001
    return [OrderResponse.from_order(order) for order in list_orders()]


@orders_router.get("/user/{username}", response_model=list[OrderResponse])
async def read_orders_for_user(username: str, caller: Caller = Depends(get_caller)) -> list[OrderResponse]:  # noqa: ARG001
    return [OrderResponse.from_order(order) for order in list_orders_by_name(username)]


@orders_router.get("/{order_id}", response_model=OrderResponse)
async def read_order(order_id: str, caller: Caller = Depends(get_caller)) -> OrderResponse:  # noqa: ARG001
    return OrderResponse.from_order(get_order(order_id))


@orders_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(body: CreateOrderRequest, caller: Caller = Depends(get_caller)) -> OrderResponse:
    order = place_order(caller, _lines(body.lines), tip=body.tip)
    return OrderResponse.from_order(order)


@orders_router.put("/{order_id}", response_model=OrderResponse)
async def revise_order(
    order_id: str,
    body: UpdateOrderRequest,
    caller: Caller = Depends(require_staff),  # noqa: ARG001
) -> OrderResponse:
    order = update_order(order_id, _lines(body.lines), name=body.name)
    return OrderResponse.from_order(order)


@orders_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    body: ChangeStatusRequest,
    caller: Caller = Depends(get_caller),
) -> OrderResponse:
    order = change_order_status(order_id, body.status, caller)
    return OrderResponse.from_order(order)


@orders_router.delete("/{order_id}", response_model=StatusResponse)
async def remove_order(order_id: str, caller: Caller = Depends(require_staff)) -> StatusResponse:  # noqa: ARG001
    delete_order(order_id)
    return StatusResponse()


# --- Tax endpoints ---


@tax_router.get("", response_model=TaxRateResponse)
async def read_tax_rate(caller: Caller = Depends(get_caller)) -> TaxRateResponse:  # noqa: ARG001
    return TaxRateResponse(rate=get_tax_rate())


@tax_router.put("", response_model=TaxRateResponse)
async def replace_tax_rate(body: TaxRateRequest, caller: Caller = Depends(require_admin)) -> TaxRateResponse:  # noqa: ARG001
    return TaxRateResponse(rate=set_tax_rate(body.rate))
