"""Tests for the Order aggregate: placement, cancellation and the status machine."""

from datetime import date

import pytest
from protean.exceptions import ValidationError

from storefront.address.address import AddressSnapshot
from storefront.order.events import OrderCancelled, OrderDetailsUpdated, OrderPlaced, OrderStatusChanged
from storefront.order.order import Order, OrderStatus, PaymentMethod, PaymentStatus
from storefront.order.placement import PricedLine
from storefront.pricing.engine import PriceBreakdown
from storefront.shared.errors import InvalidState

ADDRESS = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "street": "12 Analytical Way",
    "city": "London",
    "state": "Greater London",
    "zip_code": "N1 9GU",
    "country": "UK",
    "phone": "+44 20 7946 0000",
}


def _make_order(**overrides):
    defaults = {
        "order_id": "ord-001",
        "order_number": "FH-123456-ABCD",
        "user_id": "user-001",
        "lines": [
            PricedLine(product_id="prod-001", product_name="Habanero Hot Sauce", quantity=2, unit_price=10.00),
            PricedLine(
                product_id="prod-002",
                product_name="Chili Tee",
                quantity=1,
                unit_price=30.00,
                selected_color="Red",
                selected_size="M",
            ),
        ],
        "pricing": PriceBreakdown(subtotal=50.0, shipping=0.0, tax=4.0, discount=0.0, total=54.0),
        "shipping_address": AddressSnapshot(**ADDRESS),
        "billing_address": AddressSnapshot(**ADDRESS),
    }
    defaults.update(overrides)
    return Order.place(**defaults)


def _order_in(status: OrderStatus):
    order = _make_order()
    if status != OrderStatus.PENDING:
        order.status = status.value
    order._events.clear()
    return order


class TestOrderPlacement:
    def test_defaults(self):
        order = _make_order()
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.PENDING.value
        assert order.payment_method == PaymentMethod.CASH_ON_DELIVERY.value

    def test_lines_are_numbered_in_request_order(self):
        order = _make_order()
        assert [(i.line_number, str(i.product_id)) for i in order.lines] == [(1, "prod-001"), (2, "prod-002")]

    def test_item_snapshot(self):
        item = _make_order().lines[1]
        assert item.product_name == "Chili Tee"
        assert item.unit_price == 30.00
        assert item.selected_color == "Red"
        assert item.selected_size == "M"
        assert item.line_total == 30.00

    def test_addresses_are_embedded(self):
        order = _make_order()
        assert order.shipping_address.city == "London"
        assert order.billing_address.full_name == "Ada Lovelace"

    def test_raises_order_placed(self):
        order = _make_order()
        event = order._events[-1]

        assert isinstance(event, OrderPlaced)
        assert event.order_number == "FH-123456-ABCD"
        assert event.item_count == 2
        assert event.total == 54.0

    def test_pricing_is_required(self):
        with pytest.raises(ValidationError):
            _make_order(pricing=None)


class TestOrderCancellation:
    @pytest.mark.parametrize(
        "status", [OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.SHIPPED]
    )
    def test_cancel_from_open_status(self, status):
        order = _order_in(status)
        order.cancel()

        assert order.status == OrderStatus.CANCELLED.value
        assert order.cancelled_at is not None
        event = order._events[-1]
        assert isinstance(event, OrderCancelled)
        assert event.previous_status == status.value

    @pytest.mark.parametrize("status", [OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.REFUNDED])
    def test_cannot_cancel_terminal_order(self, status):
        order = _order_in(status)
        with pytest.raises(InvalidState):
            order.cancel()
        assert order.status == status.value
        assert order._events == []


class TestOrderStatusChanges:
    def test_forward_transition(self):
        order = _order_in(OrderStatus.PENDING)

        assert order.change_status("Shipped") is True
        assert order.status == "Shipped"
        event = order._events[-1]
        assert isinstance(event, OrderStatusChanged)
        assert (event.previous_status, event.new_status) == ("Pending", "Shipped")

    def test_backward_transition_between_open_statuses(self):
        order = _order_in(OrderStatus.PROCESSING)
        assert order.change_status("Confirmed") is True

    def test_same_status_is_a_no_op(self):
        order = _order_in(OrderStatus.CONFIRMED)

        assert order.change_status("Confirmed") is False
        assert order._events == []

    def test_same_terminal_status_is_a_no_op(self):
        assert _order_in(OrderStatus.DELIVERED).change_status("Delivered") is False

    def test_cannot_leave_terminal_status(self):
        order = _order_in(OrderStatus.DELIVERED)
        with pytest.raises(InvalidState):
            order.change_status("Pending")

    def test_unknown_status(self):
        with pytest.raises(ValidationError) as exc:
            _order_in(OrderStatus.PENDING).change_status("Lost")
        assert "status" in exc.value.messages

    def test_status_change_to_cancelled_stamps_time(self):
        order = _order_in(OrderStatus.PENDING)
        order.change_status("Cancelled")
        assert order.cancelled_at is not None
        assert order.is_terminal


class TestOrderDetails:
    def test_update_details(self):
        order = _order_in(OrderStatus.SHIPPED)
        order.update_details(tracking_number="1Z999", estimated_delivery=date(2026, 7, 1), notes="Leave at door")

        assert order.tracking_number == "1Z999"
        assert order.estimated_delivery == date(2026, 7, 1)
        assert order.notes == "Leave at door"
        assert isinstance(order._events[-1], OrderDetailsUpdated)

    def test_nothing_to_update(self):
        order = _order_in(OrderStatus.PENDING)
        order.update_details()
        assert order._events == []

    def test_details_can_change_on_terminal_orders(self):
        order = _order_in(OrderStatus.DELIVERED)
        order.update_details(notes="Signed for by neighbour")
        assert order.notes == "Signed for by neighbour"
