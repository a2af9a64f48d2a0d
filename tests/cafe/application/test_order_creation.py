"""Application tests for placing orders."""

import json

import pytest
from cafe.errors import InvalidInput, ItemNotFound
from cafe.item.management import get_item
from cafe.order.creation import PlaceOrder, place_order
from cafe.order.order import Order, OrderStatus
from cafe.order.queries import get_order, list_orders, list_orders_by_name
from cafe.tax.management import set_tax_rate
from protean.utils.globals import current_domain


def _basket(latte, espresso):
    return [{"item_id": str(latte.id), "amount": 2}, {"item_id": str(espresso.id), "amount": 1}]


class TestPlaceOrderHandler:
    def test_place_order(self, latte, espresso):
        command = PlaceOrder(name="customer", lines=json.dumps(_basket(latte, espresso)), tip=0.0)
        order_id = current_domain.process(command, asynchronous=False)

        order = current_domain.repository_for(Order).get(order_id)
        assert order.name == "customer"
        assert order.status == OrderStatus.PENDING.value
        assert order.total_price == pytest.approx(10.0)
        assert len(order.lines) == 2

    def test_name_comes_from_caller(self, customer, latte, espresso):
        order = place_order(customer, _basket(latte, espresso))
        assert order.name == "customer"

    def test_applies_current_tax_rate_and_tip(self, customer, latte, espresso):
        set_tax_rate(2.0)

        order = place_order(customer, _basket(latte, espresso), tip=1.0)

        assert order.taxrate == 2.0
        assert order.total_price == pytest.approx(10.0 + 0.2 + 1.0)

    def test_later_rate_change_does_not_reprice(self, customer, latte, espresso):
        set_tax_rate(2.0)
        order = place_order(customer, _basket(latte, espresso))

        set_tax_rate(10.0)

        assert get_order(order.id).taxrate == 2.0
        assert get_order(order.id).total_price == pytest.approx(10.2)

    def test_placing_does_not_touch_stock(self, customer, latte, espresso):
        place_order(customer, _basket(latte, espresso))

        assert get_item(latte.id).amount == 10
        assert get_item(espresso.id).amount == 10

    def test_unknown_item_creates_nothing(self, customer, latte):
        with pytest.raises(ItemNotFound):
            place_order(customer, [{"item_id": str(latte.id), "amount": 1}, {"item_id": "missing", "amount": 1}])
        assert list_orders() == []

    def test_zero_quantity_rejected(self, customer, latte):
        with pytest.raises(InvalidInput):
            place_order(customer, [{"item_id": str(latte.id), "amount": 0}])
        assert list_orders() == []

    def test_empty_basket_rejected(self, customer):
        with pytest.raises(InvalidInput):
            place_order(customer, [])

    def test_negative_tip_rejected(self, customer, latte):
        with pytest.raises(InvalidInput):
            place_order(customer, [{"item_id": str(latte.id), "amount": 1}], tip=-2.0)

    def test_infinite_tip_rejected(self, customer, latte):
        with pytest.raises(InvalidInput):
            place_order(customer, [{"item_id": str(latte.id), "amount": 1}], tip=float("inf"))
        assert list_orders() == []


class TestOrderQueries:
    def test_list_orders(self, customer, staff, latte):
        place_order(customer, [{"item_id": str(latte.id), "amount": 1}])
        place_order(staff, [{"item_id": str(latte.id), "amount": 2}])

        assert len(list_orders()) == 2

    def test_list_orders_by_name(self, customer, staff, latte):
        place_order(customer, [{"item_id": str(latte.id), "amount": 1}])
        place_order(staff, [{"item_id": str(latte.id), "amount": 2}])

        mine = list_orders_by_name("customer")
        assert len(mine) == 1
        assert mine[0].name == "customer"
        assert list_orders_by_name("nobody") == []
