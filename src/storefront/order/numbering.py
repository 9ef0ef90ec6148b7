"""Human-readable order numbers: ``<PREFIX>-<6 digits>-<4 hex>``.

The digits are the last six of the current epoch milliseconds and the
suffix is random, e.g. ``FH-482913-9C1F``.
"""

import secrets
import time

from protean.utils.globals import current_domain

from storefront.shared.errors import Conflict
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def generate_order_number(prefix: str = "FH", now_ms: int | None = None) -> str:
    millis = now_ms if now_ms is not None else time.time_ns() // 1_000_000
    return f"{prefix}-{str(millis)[-6:]:0>6}-{secrets.token_hex(2).upper()}"


def order_number_taken(order_number: str) -> bool:
    from storefront.order.order import Order

    repo = current_domain.repository_for(Order)
    return bool(repo._dao.query.filter(order_number=order_number).all().items)


def allocate_order_number(prefix: str = "FH", attempts: int = 5, generate=generate_order_number) -> str:
    """Return a number not yet used by any order, trying at most ``attempts`` candidates.

    Callers hold the order-number lock until the order is saved so two
    placements cannot both claim the same free candidate.
    """
    for attempt in range(1, attempts + 1):
        candidate = generate(prefix)
        if not order_number_taken(candidate):
            return candidate
        logger.warning("order_number_collision", order_number=candidate, attempt=attempt)

    raise Conflict({"order_number": [f"Could not allocate a unique order number after {attempts} attempts"]})
