import os
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the configuration overlay before the domain module is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def _storefront_domain(request):
    """Initialize the storefront domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from storefront.domain import storefront

    storefront.init()
    return storefront


@pytest.fixture(scope="session", autouse=True)
def setup_db(_storefront_domain):
    from storefront.utils.db import drop_db, setup_db

    setup_db(_storefront_domain)

    yield

    drop_db(_storefront_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_storefront_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _storefront_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


# ---------------------------------------------------------------------------
# Builders shared across test layers
# ---------------------------------------------------------------------------
@pytest.fixture()
def address():
    return {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "street": "12 Analytical Way",
        "city": "London",
        "state": "Greater London",
        "zip_code": "N1 9GU",
        "country": "UK",
        "phone": "+44 20 7946 0000",
    }


@pytest.fixture()
def make_product():
    from protean.utils.globals import current_domain

    from storefront.catalogue.product import Product

    def _make(name="Habanero Hot Sauce", price=10.00, stock_count=5, **kwargs):
        product = Product.create(name=name, price=price, stock_count=stock_count, **kwargs)
        current_domain.repository_for(Product).add(product)
        return product

    return _make


@pytest.fixture()
def make_coupon():
    from protean.utils.globals import current_domain

    from storefront.coupon.coupon import Coupon

    def _make(code="WELCOME10", discount_type="percentage", discount_value=10, **kwargs):
        now = datetime.now(UTC)
        kwargs.setdefault("valid_from", now - timedelta(days=1))
        kwargs.setdefault("valid_until", now + timedelta(days=30))
        coupon = Coupon.create(code=code, discount_type=discount_type, discount_value=discount_value, **kwargs)
        current_domain.repository_for(Coupon).add(coupon)
        return coupon

    return _make


@pytest.fixture()
def pipeline():
    from storefront.order.placement import OrderPipeline

    return OrderPipeline()
