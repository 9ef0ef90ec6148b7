"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """An order was persisted with its items, stock reserved and coupon consumed."""

    __version__ = 1

    order_id: Identifier(required=True)
    order_number: String(required=True)
    user_id: Identifier(required=True)
    item_count: Integer(required=True)
    subtotal: Float(required=True)
    shipping: Float(required=True)
    tax: Float(required=True)
    discount: Float(required=True)
    total: Float(required=True)
    coupon_code: String()
    placed_at: DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id: Identifier(required=True)
    order_number: String(required=True)
    user_id: Identifier(required=True)
    previous_status: String(required=True)
    cancelled_at: DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id: Identifier(required=True)
    order_number: String(required=True)
    previous_status: String(required=True)
    new_status: String(required=True)
    changed_at: DateTime(required=True)


@storefront.event(part_of="Order")
class OrderDetailsUpdated:
    """Tracking number, estimated delivery or notes changed."""

    __version__ = 1

    order_id: Identifier(required=True)
    tracking_number: String()
    estimated_delivery: String()
    notes: String()
