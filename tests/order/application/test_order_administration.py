"""Application tests for admin order updates."""

from datetime import date

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from storefront.catalogue.product import Product
from storefront.order.order import OrderStatus
from storefront.shared.errors import InvalidState, NotFound


@pytest.fixture
def order(pipeline, make_product, address):
    product = make_product(stock_count=5)
    return pipeline.place_order("user-001", [{"product_id": product.id, "quantity": 2}], address, address)


class TestUpdateOrder:
    def test_change_status(self, pipeline, order):
        updated = pipeline.update_order(order.id, status="Shipped")
        assert updated.status == OrderStatus.SHIPPED.value

    def test_shipping_details(self, pipeline, order):
        updated = pipeline.update_order(
            order.id, tracking_number="1Z999AA1", estimated_delivery=date(2026, 11, 2), notes="Fragile"
        )

        assert updated.status == OrderStatus.PENDING.value
        assert updated.tracking_number == "1Z999AA1"
        assert updated.estimated_delivery == date(2026, 11, 2)
        assert updated.notes == "Fragile"

    def test_status_and_details_together(self, pipeline, order):
        updated = pipeline.update_order(order.id, status="Shipped", tracking_number="1Z999AA1")
        assert (updated.status, updated.tracking_number) == ("Shipped", "1Z999AA1")

    def test_terminal_status_is_final(self, pipeline, order):
        pipeline.update_order(order.id, status="Delivered")

        with pytest.raises(InvalidState):
            pipeline.update_order(order.id, status="Processing")

    def test_unknown_status(self, pipeline, order):
        with pytest.raises(ValidationError):
            pipeline.update_order(order.id, status="Teleported")

    def test_admin_cancellation_does_not_touch_stock(self, pipeline, order):
        product_id = order.lines[0].product_id
        pipeline.update_order(order.id, status="Cancelled")

        assert current_domain.repository_for(Product).get(product_id).stock_count == 3

    def test_unknown_order(self, pipeline):
        with pytest.raises(NotFound):
            pipeline.update_order("missing", status="Shipped")
