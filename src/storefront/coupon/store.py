"""Coupon lookups and usage accounting."""

from protean.utils.globals import current_domain

from storefront.coupon.coupon import Coupon, normalize_code
from storefront.shared.errors import NotFound
from storefront.shared.locks import KeyedLocks, locks
from storefront.shared.versioned import mutate_under_lock
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def coupon_lock_key(code: str) -> str:
    return f"coupon:{normalize_code(code)}"


def find_by_code(code: str) -> Coupon | None:
    if not code or not code.strip():
        return None
    repo = current_domain.repository_for(Coupon)
    found = repo._dao.query.filter(code=normalize_code(code)).all().items
    return found[0] if found else None


def get_by_code(code: str) -> Coupon:
    coupon = find_by_code(code)
    if coupon is None:
        raise NotFound({"code": [f"Coupon {code} not found"]})
    return coupon


def list_coupons(active_only: bool = False) -> list[Coupon]:
    query = current_domain.repository_for(Coupon)._dao.query
    if active_only:
        query = query.filter(is_active=True)
    return query.order_by("-created_at").all().items


class CouponUsage:
    """Increments and releases ``used_count`` one use at a time."""

    def __init__(self, lock_registry: KeyedLocks | None = None, attempts: int = 3):
        self.locks = lock_registry or locks
        self.attempts = max(1, attempts)

    def record(self, code: str) -> Coupon:
        coupon = mutate_under_lock(
            self.locks, coupon_lock_key(code), lambda: get_by_code(code), Coupon.record_usage, self.attempts
        )
        logger.info("coupon_redeemed", coupon_code=coupon.code, used_count=coupon.used_count)
        return coupon

    def release(self, code: str) -> Coupon:
        coupon = mutate_under_lock(
            self.locks, coupon_lock_key(code), lambda: get_by_code(code), Coupon.release_usage, self.attempts
        )
        logger.info("coupon_redemption_released", coupon_code=coupon.code, used_count=coupon.used_count)
        return coupon
