"""Order lookups, admin listing and the sales summary."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from math import ceil

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.order.order import Order, OrderStatus
from storefront.shared.clock import ensure_utc
from storefront.shared.errors import NotFound
from storefront.shared.money import ZERO, as_float, round2, to_decimal

BATCH_SIZE = 100


class OrderSort(Enum):
    CREATED_AT = "created_at"
    TOTAL = "total"


@dataclass
class OrderFilters:
    status: str | None = None
    payment_status: str | None = None
    user_id: str | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    search: str | None = None  # substring of the order number, case-insensitive


@dataclass
class OrderPage:
    items: list[Order] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    @property
    def pages(self) -> int:
        return ceil(self.total / self.limit) if self.limit else 0


def fetch_all(query) -> list:
    """Drain a Protean query page by page; queries cap their result size otherwise."""
    results, offset = [], 0
    query = query.order_by("id")
    while True:
        batch = query.limit(BATCH_SIZE).offset(offset).all().items
        results.extend(batch)
        if len(batch) < BATCH_SIZE:
            return results
        offset += BATCH_SIZE


def _not_found(key, value):
    return NotFound({key: [f"Order {value} not found"]})


def get_order(order_id, user_id=None) -> Order:
    """Fetch an order; with ``user_id`` only that user's orders are visible."""
    try:
        order = current_domain.repository_for(Order).get(str(order_id))
    except ObjectNotFoundError:
        raise _not_found("order_id", order_id) from None

    if user_id is not None and str(order.user_id) != str(user_id):
        raise _not_found("order_id", order_id)
    return order


def get_order_by_number(order_number: str, user_id=None) -> Order:
    query = current_domain.repository_for(Order)._dao.query.filter(order_number=order_number.strip().upper())
    found = query.all().items
    if not found or (user_id is not None and str(found[0].user_id) != str(user_id)):
        raise _not_found("order_number", order_number)
    return found[0]


def _matches(order: Order, filters: OrderFilters) -> bool:
    created = ensure_utc(order.created_at)
    if filters.date_from and created < ensure_utc(filters.date_from):
        return False
    if filters.date_to and created > ensure_utc(filters.date_to):
        return False
    if filters.search and filters.search.strip().upper() not in order.order_number:
        return False
    return True


def list_orders(
    filters: OrderFilters | None = None,
    page: int = 1,
    limit: int = 10,
    sort_by: OrderSort | str = OrderSort.CREATED_AT,
    descending: bool = True,
) -> OrderPage:
    filters = filters or OrderFilters()
    sort_by = OrderSort(sort_by)
    page, limit = max(1, page), max(1, limit)

    exact = {
        name: value
        for name, value in (
            ("status", filters.status),
            ("payment_status", filters.payment_status),
            ("user_id", filters.user_id),
        )
        if value
    }
    query = current_domain.repository_for(Order)._dao.query
    if exact:
        query = query.filter(**exact)

    orders = [order for order in fetch_all(query) if _matches(order, filters)]
    if sort_by == OrderSort.TOTAL:
        orders.sort(key=lambda o: o.pricing.total, reverse=descending)
    else:
        orders.sort(key=lambda o: ensure_utc(o.created_at), reverse=descending)

    start = (page - 1) * limit
    return OrderPage(items=orders[start : start + limit], total=len(orders), page=page, limit=limit)


def orders_for_user(user_id, page: int = 1, limit: int = 10) -> OrderPage:
    return list_orders(OrderFilters(user_id=str(user_id)), page=page, limit=limit)


def order_summary() -> dict:
    """Counts and revenue across every order.

    Revenue sums all non-cancelled orders; the average divides it by the
    number of orders that contributed.
    """
    orders = fetch_all(current_domain.repository_for(Order)._dao.query)
    counts = {status: 0 for status in OrderStatus}
    revenue, revenue_orders = ZERO, 0
    for order in orders:
        status = OrderStatus(order.status)
        counts[status] += 1
        if status not in (OrderStatus.CANCELLED, OrderStatus.REFUNDED):
            revenue += to_decimal(order.pricing.total)
            revenue_orders += 1

    return {
        "total_orders": len(orders),
        "total_revenue": as_float(revenue),
        "pending_orders": counts[OrderStatus.PENDING],
        "completed_orders": counts[OrderStatus.DELIVERED],
        "cancelled_orders": counts[OrderStatus.CANCELLED],
        "average_order_value": as_float(round2(revenue / revenue_orders)) if revenue_orders else 0.0,
        "by_status": {status.value: count for status, count in counts.items()},
    }
