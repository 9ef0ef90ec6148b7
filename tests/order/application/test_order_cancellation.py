"""Application tests for cancelling orders and putting stock back."""

import pytest
from protean import current_domain

from storefront.catalogue.product import Product
from storefront.coupon.coupon import Coupon
from storefront.order.order import Order, OrderStatus
from storefront.order.placement import OrderPipeline
from storefront.settings import PipelineSettings
from storefront.shared.errors import InvalidState, NotFound


@pytest.fixture
def placed(pipeline, make_product, make_coupon, address):
    product = make_product(price=25.00, stock_count=5)
    make_coupon(code="WELCOME10")
    order = pipeline.place_order(
        "user-001", [{"product_id": product.id, "quantity": 3}], address, address, coupon_code="WELCOME10"
    )
    return order, product


def _stock_of(product):
    return current_domain.repository_for(Product).get(product.id).stock_count


def _used_count(code):
    repo = current_domain.repository_for(Coupon)
    return repo._dao.query.filter(code=code).all().items[0].used_count


class TestCancelOrder:
    def test_cancel_restores_stock(self, pipeline, placed):
        order, product = placed
        assert _stock_of(product) == 2

        cancelled = pipeline.cancel_order("user-001", order.id)

        assert cancelled.status == OrderStatus.CANCELLED.value
        assert cancelled.cancelled_at is not None
        assert _stock_of(product) == 5
        assert current_domain.repository_for(Order).get(order.id).status == OrderStatus.CANCELLED.value

    def test_restock_makes_sold_out_product_available(self, pipeline, make_product, address):
        product = make_product(stock_count=1)
        order = pipeline.place_order("user-001", [{"product_id": product.id, "quantity": 1}], address, address)

        pipeline.cancel_order("user-001", order.id)

        assert current_domain.repository_for(Product).get(product.id).in_stock is True

    def test_coupon_usage_is_kept_by_default(self, pipeline, placed):
        order, _ = placed
        pipeline.cancel_order("user-001", order.id)
        assert _used_count("WELCOME10") == 1

    def test_coupon_usage_released_when_configured(self, placed):
        order, _ = placed
        pipeline = OrderPipeline(PipelineSettings(restore_coupon_on_cancel=True))

        pipeline.cancel_order("user-001", order.id)

        assert _used_count("WELCOME10") == 0

    def test_cancelling_twice_restores_stock_once(self, pipeline, placed):
        order, product = placed
        pipeline.cancel_order("user-001", order.id)

        with pytest.raises(InvalidState):
            pipeline.cancel_order("user-001", order.id)

        assert _stock_of(product) == 5

    def test_cannot_cancel_delivered_order(self, pipeline, placed):
        order, product = placed
        pipeline.update_order(order.id, status="Delivered")

        with pytest.raises(InvalidState):
            pipeline.cancel_order("user-001", order.id)
        assert _stock_of(product) == 2

    def test_other_users_cannot_cancel(self, pipeline, placed):
        order, product = placed

        with pytest.raises(NotFound):
            pipeline.cancel_order("user-002", order.id)
        assert _stock_of(product) == 2

    def test_unknown_order(self, pipeline):
        with pytest.raises(NotFound):
            pipeline.cancel_order("user-001", "missing")
