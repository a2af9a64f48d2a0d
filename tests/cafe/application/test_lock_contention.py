"""Application tests for requests that cannot obtain their locks."""

import pytest
from cafe.errors import Conflict
from cafe.item.management import get_item, update_item
from cafe.locks import cafe_locks, item_key, order_key
from cafe.order.creation import place_order
from cafe.order.lifecycle import change_order_status
from cafe.order.modification import update_order
from cafe.order.order import OrderStatus
from cafe.order.queries import get_order


@pytest.fixture(autouse=True)
def _fast_locks(monkeypatch):
    monkeypatch.setattr("cafe.locks.LOCK_TIMEOUT", 0.01)
    monkeypatch.setattr("cafe.locks.LOCK_ATTEMPTS", 2)
    monkeypatch.setattr("cafe.locks.LOCK_BACKOFF", 0.0)


@pytest.fixture()
def order(customer, latte, espresso):
    return place_order(
        customer,
        [{"item_id": str(latte.id), "amount": 2}, {"item_id": str(espresso.id), "amount": 1}],
    )


class TestContention:
    def test_fulfillment_blocked_by_held_item(self, order, staff, latte, espresso):
        with cafe_locks.hold([item_key(espresso.id)]):
            with pytest.raises(Conflict) as exc:
                change_order_status(order.id, OrderStatus.FULFILLED, staff)

        assert exc.value.status_code == 409
        assert get_order(order.id).status == OrderStatus.PENDING.value
        assert get_item(latte.id).amount == 10
        assert get_item(espresso.id).amount == 10

    def test_fulfillment_blocked_by_held_order(self, order, staff):
        with cafe_locks.hold([order_key(order.id)]):
            with pytest.raises(Conflict):
                change_order_status(order.id, OrderStatus.FULFILLED, staff)

    def test_update_blocked_by_held_order(self, order, latte):
        with cafe_locks.hold([order_key(order.id)]):
            with pytest.raises(Conflict):
                update_order(order.id, [{"item_id": str(latte.id), "amount": 1}], name="customer")
        assert len(get_order(order.id).lines) == 2

    def test_stock_update_blocked_by_held_item(self, latte):
        with cafe_locks.hold([item_key(latte.id)]):
            with pytest.raises(Conflict):
                update_item(latte.id, name="Latte", price=3.0, amount=50)
        assert get_item(latte.id).amount == 10

    def test_locks_released_after_conflict(self, order, staff, espresso):
        with cafe_locks.hold([item_key(espresso.id)]):
            with pytest.raises(Conflict):
                change_order_status(order.id, OrderStatus.FULFILLED, staff)

        fulfilled = change_order_status(order.id, OrderStatus.FULFILLED, staff)
        assert fulfilled.status == OrderStatus.FULFILLED.value
        assert not cafe_locks.is_locked(order_key(order.id))
