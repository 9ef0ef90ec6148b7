"""Shared BDD fixtures and step definitions for order placement."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then, when

from storefront.catalogue.product import Product
from storefront.coupon.store import get_by_code
from storefront.order.order import Order
from storefront.shared.errors import InsufficientStock, InvalidState, NotFound


@pytest.fixture()
def products():
    """Products created in Given steps, by name."""
    return {}


@pytest.fixture()
def placement():
    """The order under test and any error raised while acting on it."""
    return {"order": None, "error": None}


def _order(pipeline, products, address, user_id, quantity, name, coupon_code=None):
    return pipeline.place_order(
        user_id,
        [{"product_id": products[name].id, "quantity": quantity}],
        address,
        address,
        coupon_code=coupon_code,
    )


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced at {price:f} with {stock:d} in stock'))
def _(products, make_product, name, price, stock):
    products[name] = make_product(name=name, price=price, stock_count=stock)


@given(parsers.cfparse('a percentage coupon "{code}" worth {value:d} with a minimum of {minimum:f}'))
def _(make_coupon, code, value, minimum):
    make_coupon(code=code, discount_type="percentage", discount_value=value, minimum_amount=minimum)


@given(parsers.cfparse('a fixed coupon "{code}" worth {value:d} with a minimum of {minimum:f}'))
def _(make_coupon, code, value, minimum):
    make_coupon(code=code, discount_type="fixed", discount_value=value, minimum_amount=minimum)


@given(parsers.cfparse('user "{user_id}" has ordered {quantity:d} of "{name}"'))
def _(pipeline, products, address, placement, user_id, quantity, name):
    placement["order"] = _order(pipeline, products, address, user_id, quantity, name)


@given(parsers.cfparse('the order has been moved to "{status}"'))
def _(pipeline, placement, status):
    placement["order"] = pipeline.update_order(placement["order"].id, status=status)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('user "{user_id}" orders {quantity:d} of "{name}"'))
def _(pipeline, products, address, placement, user_id, quantity, name):
    try:
        placement["order"] = _order(pipeline, products, address, user_id, quantity, name)
    except InsufficientStock as exc:
        placement["error"] = exc


@when(parsers.cfparse('user "{user_id}" applies coupon "{code}" to an order of {quantity:d} "{name}"'))
def _(pipeline, products, address, placement, user_id, code, quantity, name):
    placement["order"] = _order(pipeline, products, address, user_id, quantity, name, coupon_code=code)


@when(parsers.cfparse('user "{user_id}" cancels the order'))
def _(pipeline, placement, user_id):
    try:
        placement["order"] = pipeline.cancel_order(user_id, placement["order"].id)
    except (InvalidState, NotFound) as exc:
        placement["error"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the order is placed")
def _(placement):
    assert placement["error"] is None
    assert current_domain.repository_for(Order).get(placement["order"].id) is not None


@then(parsers.cfparse("the order subtotal is {amount:f}"))
def _(placement, amount):
    assert placement["order"].pricing.subtotal == amount


@then(parsers.cfparse("the order shipping is {amount:f}"))
def _(placement, amount):
    assert placement["order"].pricing.shipping == amount


@then(parsers.cfparse("the order tax is {amount:f}"))
def _(placement, amount):
    assert placement["order"].pricing.tax == amount


@then(parsers.cfparse("the order discount is {amount:f}"))
def _(placement, amount):
    assert placement["order"].pricing.discount == amount


@then(parsers.cfparse("the order total is {amount:f}"))
def _(placement, amount):
    assert placement["order"].pricing.total == amount


@then("the order has no coupon applied")
def _(placement):
    assert placement["order"].coupon_code is None
    assert placement["order"].pricing.discount == 0.0


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def _(products, name, stock):
    assert current_domain.repository_for(Product).get(products[name].id).stock_count == stock


@then("the order is rejected for insufficient stock")
def _(placement):
    assert isinstance(placement["error"], InsufficientStock)


@then("no order was recorded")
def _():
    assert current_domain.repository_for(Order)._dao.query.all().total == 0


@then(parsers.cfparse('coupon "{code}" has been used {count:d} time'))
@then(parsers.cfparse('coupon "{code}" has been used {count:d} times'))
def _(code, count):
    assert get_by_code(code).used_count == count


@then(parsers.cfparse('the order status is "{status}"'))
def _(placement, status):
    assert current_domain.repository_for(Order).get(placement["order"].id).status == status


@then("the cancellation is refused")
def _(placement):
    assert isinstance(placement["error"], InvalidState)


@then("the order is not found")
def _(placement):
    assert isinstance(placement["error"], NotFound)
