"""Coupon aggregate: discount rules, validity window and usage accounting."""

from datetime import datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from storefront.domain import storefront
from storefront.shared.clock import ensure_utc, utcnow
from storefront.shared.errors import Conflict


class CouponType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class CouponRejection(Enum):
    """Why a coupon does not apply to an order."""

    NOT_FOUND = "not_found"
    INACTIVE = "inactive"
    NOT_STARTED = "not_started"
    EXPIRED = "expired"
    BELOW_MINIMUM = "below_minimum"
    USAGE_EXHAUSTED = "usage_exhausted"


def normalize_code(code: str) -> str:
    return code.strip().upper()


@storefront.aggregate
class Coupon:
    """A discount code.

    Codes are unique and stored uppercase, so lookups are case-insensitive.
    ``maximum_discount`` caps percentage coupons only; ``usage_limit`` of
    ``None`` means unlimited uses.
    """

    code: String(required=True, max_length=50, unique=True)
    description: Text()
    discount_type: String(required=True, choices=CouponType)
    discount_value: Float(required=True, min_value=0.0)
    minimum_amount: Float(min_value=0.0)
    maximum_discount: Float(min_value=0.0)
    usage_limit: Integer(min_value=1)
    used_count: Integer(default=0, min_value=0)
    valid_from: DateTime(required=True)
    valid_until: DateTime(required=True)
    is_active: Boolean(default=True)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def validity_window_must_be_ordered(self):
        if self.valid_from and self.valid_until and ensure_utc(self.valid_until) <= ensure_utc(self.valid_from):
            raise ValidationError({"valid_until": ["Coupon must end after it starts"]})

    @invariant.post
    def percentage_cannot_exceed_hundred(self):
        if self.discount_type == CouponType.PERCENTAGE.value and self.discount_value > 100:
            raise ValidationError({"discount_value": ["Percentage discount cannot exceed 100"]})

    @invariant.post
    def usage_cannot_exceed_limit(self):
        if self.usage_limit is not None and self.used_count > self.usage_limit:
            raise ValidationError({"used_count": ["Coupon usage cannot exceed its limit"]})

    @classmethod
    def create(
        cls,
        code,
        discount_type,
        discount_value,
        valid_from,
        valid_until,
        description=None,
        minimum_amount=None,
        maximum_discount=None,
        usage_limit=None,
        is_active=True,
    ):
        from storefront.coupon.events import CouponCreated

        now = utcnow()
        coupon = cls(
            code=normalize_code(code),
            description=description,
            discount_type=discount_type,
            discount_value=discount_value,
            minimum_amount=minimum_amount,
            maximum_discount=maximum_discount,
            usage_limit=usage_limit,
            valid_from=ensure_utc(valid_from),
            valid_until=ensure_utc(valid_until),
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )
        coupon.raise_(
            CouponCreated(
                coupon_id=coupon.id,
                code=coupon.code,
                discount_type=coupon.discount_type,
                discount_value=coupon.discount_value,
                valid_from=coupon.valid_from,
                valid_until=coupon.valid_until,
            )
        )
        return coupon

    @property
    def is_percentage(self) -> bool:
        return self.discount_type == CouponType.PERCENTAGE.value

    @property
    def uses_left(self) -> int | None:
        if self.usage_limit is None:
            return None
        return max(0, self.usage_limit - self.used_count)

    def rejection_for(self, order_amount, now: datetime | None = None) -> CouponRejection | None:
        """Return why this coupon does not apply, or ``None`` when it does.

        Checks run in a fixed order: active flag, start of window, end of
        window, minimum amount, usage cap.
        """
        now = ensure_utc(now) or utcnow()

        if not self.is_active:
            return CouponRejection.INACTIVE
        if now < ensure_utc(self.valid_from):
            return CouponRejection.NOT_STARTED
        if now > ensure_utc(self.valid_until):
            return CouponRejection.EXPIRED
        if self.minimum_amount is not None and float(order_amount) < self.minimum_amount:
            return CouponRejection.BELOW_MINIMUM
        if self.usage_limit is not None and self.used_count >= self.usage_limit:
            return CouponRejection.USAGE_EXHAUSTED
        return None

    def revise(self, **changes):
        """Apply admin edits. ``code`` is normalized like on creation."""
        from storefront.coupon.events import CouponUpdated

        if "code" in changes and changes["code"] is not None:
            changes["code"] = normalize_code(changes["code"])
        for key in ("valid_from", "valid_until"):
            if changes.get(key) is not None:
                changes[key] = ensure_utc(changes[key])

        with atomic_change(self):
            for field, value in changes.items():
                if value is not None:
                    setattr(self, field, value)
            self.updated_at = utcnow()

        self.raise_(CouponUpdated(coupon_id=self.id, code=self.code))

    def record_usage(self):
        from storefront.coupon.events import CouponRedeemed

        if self.usage_limit is not None and self.used_count >= self.usage_limit:
            raise Conflict({"coupon_code": [f"Coupon {self.code} has no uses left"]})

        self.used_count += 1
        self.updated_at = utcnow()
        self.raise_(CouponRedeemed(coupon_id=self.id, code=self.code, used_count=self.used_count))

    def release_usage(self):
        from storefront.coupon.events import CouponRedemptionReleased

        if self.used_count == 0:
            return
        self.used_count -= 1
        self.updated_at = utcnow()
        self.raise_(CouponRedemptionReleased(coupon_id=self.id, code=self.code, used_count=self.used_count))
