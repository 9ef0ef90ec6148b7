"""Coupon applicability checks.

A coupon that does not apply is a normal outcome, not an error: callers get
``None`` (or a rejection reason) and carry on without a discount.
"""

from dataclasses import dataclass
from datetime import datetime

from storefront.coupon.coupon import Coupon, CouponRejection
from storefront.coupon.store import find_by_code


@dataclass(frozen=True)
class CouponCheck:
    code: str
    coupon: Coupon | None
    rejection: CouponRejection | None

    @property
    def applicable(self) -> bool:
        return self.coupon is not None and self.rejection is None


class CouponValidator:
    def check(self, code: str, order_amount, now: datetime | None = None) -> CouponCheck:
        coupon = find_by_code(code)
        if coupon is None:
            return CouponCheck(code=code, coupon=None, rejection=CouponRejection.NOT_FOUND)
        return CouponCheck(code=code, coupon=coupon, rejection=coupon.rejection_for(order_amount, now))

    def validate(self, code: str, order_amount, now: datetime | None = None) -> Coupon | None:
        """Return the coupon when it applies to ``order_amount``, else ``None``."""
        result = self.check(code, order_amount, now)
        return result.coupon if result.applicable else None
