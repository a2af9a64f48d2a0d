"""Shared BDD fixtures and step definitions for the cafe domain."""

import pytest
from cafe.errors import CafeError
from cafe.item.management import add_item, get_item, list_items, update_item
from cafe.order.creation import place_order
from cafe.order.lifecycle import change_order_status
from cafe.order.order import OrderStatus
from cafe.order.queries import get_order
from cafe.roles import Caller
from pytest_bdd import given, parsers, then


def _item_named(name):
    return next(item for item in list_items() if item.name == name)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for the error raised by a When step."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the menu has "{name}" at {price:f} with {amount:d} in stock'))
def menu_item(name, price, amount):
    add_item(name=name, price=price, amount=amount)


@given(
    parsers.cfparse('"{username}" has ordered {first_qty:d} "{first}" and {second_qty:d} "{second}"'),
    target_fixture="order_id",
)
def placed_order(username, first_qty, first, second_qty, second):
    order = place_order(
        Caller.of(username, "ROLE_CUSTOMER"),
        [
            {"item_id": str(_item_named(first).id), "amount": first_qty},
            {"item_id": str(_item_named(second).id), "amount": second_qty},
        ],
    )
    return str(order.id)


@given(parsers.cfparse('"{username}" with role "{role}" has fulfilled the order'))
def fulfilled_order(order_id, username, role):
    change_order_status(order_id, OrderStatus.FULFILLED, Caller.of(username, role))


@given(parsers.cfparse('"{username}" has picked up the order'))
def picked_up_order(order_id, username):
    change_order_status(order_id, OrderStatus.PICKED_UP, Caller.of(username, "ROLE_CUSTOMER"))


@given(parsers.cfparse('"{name}" has been restocked to {amount:d}'))
def restocked(name, amount):
    item = _item_named(name)
    update_item(item.id, name=item.name, price=item.price, amount=amount, description=item.description)


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order_id, status):
    assert get_order(order_id).status == status


@then(parsers.cfparse("the order total is {total:f}"))
def order_total_is(order_id, total):
    assert get_order(order_id).total_price == pytest.approx(total)


@then(parsers.cfparse("the order has {count:d} line"))
def order_line_count(order_id, count):
    assert len(get_order(order_id).lines) == count


@then(parsers.cfparse('"{name}" has {amount:d} in stock'))
def stock_is(name, amount):
    assert get_item(_item_named(name).id).amount == amount


@then(parsers.cfparse('the request fails with "{kind}"'))
def request_fails_with(error, kind):
    assert error["exc"] is not None, "Expected the request to fail but it succeeded"
    assert isinstance(error["exc"], CafeError)
    assert error["exc"].kind == kind
