import os

import pytest


@pytest.fixture(scope="session")
def _cafe_domain(request):
    """Initialize the cafe domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from cafe.domain import cafe

    cafe.init()
    return cafe


@pytest.fixture(scope="session", autouse=True)
def setup_db(_cafe_domain):
    from cafe.utils.db import drop_db, setup_db

    setup_db(_cafe_domain)

    yield

    drop_db(_cafe_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_cafe_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _cafe_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


# ---------------------------------------------------------------------------
# Shared catalog and caller fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def customer():
    from cafe.roles import Caller, Role

    return Caller(username="customer", role=Role.CUSTOMER)


@pytest.fixture()
def staff():
    from cafe.roles import Caller, Role

    return Caller(username="barista", role=Role.STAFF)


@pytest.fixture()
def admin():
    from cafe.roles import Caller, Role

    return Caller(username="manager", role=Role.ADMIN)


@pytest.fixture()
def latte():
    from cafe.item.management import add_item

    return add_item(name="Latte", price=3.00, amount=10, description="Espresso with steamed milk")


@pytest.fixture()
def espresso():
    from cafe.item.management import add_item

    return add_item(name="Espresso", price=4.00, amount=10)
