"""Order aggregate: the durable record of a placed order.

Status machine:
    Pending → Confirmed → Processing → Shipped → Delivered
    Cancelled and Refunded are side branches.

Delivered, Cancelled and Refunded are terminal. Administrators may move an
order between any two non-terminal statuses; nothing leaves a terminal one.
"""

from datetime import date
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Date, DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from storefront.address.address import AddressSnapshot
from storefront.domain import storefront
from storefront.pricing.engine import PriceBreakdown
from storefront.shared.clock import utcnow
from storefront.shared.errors import InvalidState


class OrderStatus(Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"


class PaymentStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"
    FAILED = "Failed"
    REFUNDED = "Refunded"


class PaymentMethod(Enum):
    CASH_ON_DELIVERY = "Cash_On_Delivery"


TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.REFUNDED})


@storefront.entity(part_of="Order")
class OrderItem:
    """A line of an order with the product name and unit price frozen at order time."""

    product_id: Identifier(required=True)
    product_name: String(required=True, max_length=255)
    quantity: Integer(required=True, min_value=1)
    unit_price: Float(required=True, min_value=0.0)
    selected_color: String(max_length=50)
    selected_size: String(max_length=50)
    line_number: Integer(required=True, min_value=1)

    @property
    def line_total(self) -> float:
        return round(self.unit_price * self.quantity, 2)


@storefront.aggregate
class Order:
    order_number: String(required=True, max_length=30, unique=True)
    user_id: Identifier(required=True)
    items: HasMany(OrderItem)
    pricing: ValueObject(PriceBreakdown, required=True)
    status: String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status: String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_method: String(choices=PaymentMethod, default=PaymentMethod.CASH_ON_DELIVERY.value)
    coupon_code: String(max_length=50)
    shipping_address: ValueObject(AddressSnapshot, required=True)
    billing_address: ValueObject(AddressSnapshot, required=True)
    shipping_address_id: Identifier()
    billing_address_id: Identifier()
    tracking_number: String(max_length=100)
    estimated_delivery: Date()
    notes: Text()
    created_at: DateTime()
    updated_at: DateTime()
    cancelled_at: DateTime()

    @classmethod
    def place(
        cls,
        order_id,
        order_number,
        user_id,
        lines,
        pricing,
        shipping_address,
        billing_address,
        shipping_address_id=None,
        billing_address_id=None,
        coupon_code=None,
        notes=None,
    ):
        """Build a Pending, cash-on-delivery order from priced lines.

        ``lines`` are objects exposing product_id, product_name, quantity,
        unit_price, selected_color and selected_size; their order becomes
        the line numbering.
        """
        from storefront.order.events import OrderPlaced

        now = utcnow()
        order = cls(
            id=order_id,
            order_number=order_number,
            user_id=user_id,
            pricing=pricing,
            coupon_code=coupon_code,
            shipping_address=shipping_address,
            billing_address=billing_address,
            shipping_address_id=shipping_address_id,
            billing_address_id=billing_address_id,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        for number, line in enumerate(lines, start=1):
            order.add_items(
                OrderItem(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    selected_color=line.selected_color,
                    selected_size=line.selected_size,
                    line_number=number,
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=order.id,
                order_number=order_number,
                user_id=user_id,
                item_count=len(order.items),
                subtotal=pricing.subtotal,
                shipping=pricing.shipping,
                tax=pricing.tax,
                discount=pricing.discount,
                total=pricing.total,
                coupon_code=coupon_code,
                placed_at=now,
            )
        )
        return order

    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    @property
    def is_terminal(self) -> bool:
        return self.current_status in TERMINAL_STATUSES

    @property
    def lines(self) -> list[OrderItem]:
        return sorted(self.items, key=lambda item: item.line_number)

    def cancel(self):
        from storefront.order.events import OrderCancelled

        if self.is_terminal:
            raise InvalidState({"status": [f"Cannot cancel an order that is {self.status}"]})

        previous = self.status
        now = utcnow()
        self.status = OrderStatus.CANCELLED.value
        self.cancelled_at = now
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=self.id,
                order_number=self.order_number,
                user_id=self.user_id,
                previous_status=previous,
                cancelled_at=now,
            )
        )

    def change_status(self, new_status: str) -> bool:
        """Move to ``new_status``; returns False when it is already the current one."""
        from storefront.order.events import OrderStatusChanged

        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status: {new_status}"]}) from None

        if target == self.current_status:
            return False
        if self.is_terminal:
            raise InvalidState({"status": [f"Order is {self.status} and can no longer change status"]})

        previous = self.status
        now = utcnow()
        self.status = target.value
        self.updated_at = now
        if target == OrderStatus.CANCELLED:
            self.cancelled_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=self.id,
                order_number=self.order_number,
                previous_status=previous,
                new_status=target.value,
                changed_at=now,
            )
        )
        return True

    def update_details(self, tracking_number=None, estimated_delivery: date | None = None, notes=None):
        from storefront.order.events import OrderDetailsUpdated

        if tracking_number is None and estimated_delivery is None and notes is None:
            return

        if tracking_number is not None:
            self.tracking_number = tracking_number
        if estimated_delivery is not None:
            self.estimated_delivery = estimated_delivery
        if notes is not None:
            self.notes = notes
        self.updated_at = utcnow()

        self.raise_(
            OrderDetailsUpdated(
                order_id=self.id,
                tracking_number=self.tracking_number,
                estimated_delivery=self.estimated_delivery.isoformat() if self.estimated_delivery else None,
                notes=self.notes,
            )
        )
