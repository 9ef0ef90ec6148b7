"""Domain events for the Coupon aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Coupon")
class CouponCreated:
    __version__ = 1

    coupon_id: Identifier(required=True)
    code: String(required=True)
    discount_type: String(required=True)
    discount_value: Float(required=True)
    valid_from: DateTime(required=True)
    valid_until: DateTime(required=True)


@storefront.event(part_of="Coupon")
class CouponUpdated:
    __version__ = 1

    coupon_id: Identifier(required=True)
    code: String(required=True)


@storefront.event(part_of="Coupon")
class CouponRedeemed:
    """An order applied the coupon and consumed one use."""

    __version__ = 1

    coupon_id: Identifier(required=True)
    code: String(required=True)
    used_count: Integer(required=True)


@storefront.event(part_of="Coupon")
class CouponRedemptionReleased:
    """A use was handed back because the order that consumed it did not go through."""

    __version__ = 1

    coupon_id: Identifier(required=True)
    code: String(required=True)
    used_count: Integer(required=True)
