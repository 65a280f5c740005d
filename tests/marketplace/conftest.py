import os

import pytest


@pytest.fixture(scope="session")
def _marketplace_domain(request):
    """Initialize the marketplace domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from marketplace.domain import marketplace

    marketplace.init()
    return marketplace


@pytest.fixture(scope="session", autouse=True)
def setup_db(_marketplace_domain):
    from marketplace.utils.db import drop_db, setup_db

    setup_db(_marketplace_domain)

    yield

    drop_db(_marketplace_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_marketplace_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _marketplace_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture()
def seller():
    from marketplace.shared.identity import Identity

    return Identity(user_id="seller-001", name="Patil Agro", email="patil@example.com", role="seller")


@pytest.fixture()
def other_seller():
    from marketplace.shared.identity import Identity

    return Identity(user_id="seller-002", name="Krishi Kendra", email="kendra@example.com", role="seller")


@pytest.fixture()
def buyer():
    from marketplace.shared.identity import Identity

    return Identity(user_id="buyer-001", name="Asha", email="asha@example.com", role="buyer")


@pytest.fixture()
def list_product(seller):
    """Factory listing a product as `seller` (or another identity) and returning it."""
    from marketplace.product.listing import add_product

    def _list(identity=None, **overrides):
        defaults = {
            "name": "Urea 45kg",
            "category": "fertilizers",
            "price": 25.99,
            "quantity": 50,
        }
        defaults.update(overrides)
        return add_product(identity or seller, **defaults)

    return _list
