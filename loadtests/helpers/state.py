"""Per-user and shared state for Locust load test scenarios.

Each Locust user tracks the orders and cart lines it created. The seeded
catalogue and coupons are shared by every user so their orders contend
for the same stock.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """Tracks state for a single simulated shopper."""

    user_id: str | None = None
    cart_item_ids: list[str] = field(default_factory=list)
    wishlist_item_ids: list[str] = field(default_factory=list)
    order_ids: list[str] = field(default_factory=list)


@dataclass
class SeededCatalogue:
    """Products and coupons created once at test start."""

    product_ids: list[str] = field(default_factory=list)
    scarce_product_id: str | None = None
    scarce_stock: int = 0
    coupon_codes: list[str] = field(default_factory=list)
    single_use_coupon: str | None = None


seeded = SeededCatalogue()
