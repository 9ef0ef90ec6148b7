"""Order placement pipeline.

Placing an order touches four stores: addresses, product stock, coupon usage
and the order itself. They are written as one saga:

1. validate every line against the catalogue and freeze its price (no writes)
2. price the order, consulting the coupon validator when a code is given
3. record the shipping and billing address snapshots
4. withdraw stock for every product
5. consume one use of the applied coupon
6. allocate an order number and save the order

Steps 3 to 6 register compensations; if any of them fails the completed ones
are undone newest first and the original error propagates. The order is
saved last, so an ``OrderPlaced`` event is only ever raised for an order
whose stock and coupon writes all went through.

The product locks (and the coupon lock, when a code is given) are held for
the whole placement, so the stock check in step 1 still holds when step 4
writes.

Placement and cancellation write several aggregates under those locks and
roll back through the saga before the caller sees the error, so they run
here rather than in a single-aggregate command handler. Admin updates touch
only the order and go through ``UpdateOrder``.
"""

from collections import OrderedDict
from collections.abc import Iterable
from dataclasses import dataclass
from uuid import uuid4

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.address.address import AddressSnapshot, AddressType
from storefront.address.register import discard_address, record_address
from storefront.catalogue.stock import StockLedger, load_product, product_lock_key
from storefront.coupon.store import CouponUsage, coupon_lock_key
from storefront.coupon.validator import CouponValidator
from storefront.order.numbering import allocate_order_number, generate_order_number
from storefront.order.order import Order
from storefront.order.queries import get_order
from storefront.order.saga import Compensations
from storefront.pricing.engine import PriceBreakdown, compute_breakdown
from storefront.settings import PipelineSettings, load_settings
from storefront.shared.errors import InsufficientStock
from storefront.shared.locks import KeyedLocks, locks
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_NUMBER_LOCK = "order-number"


def order_lock_key(order_id) -> str:
    return f"order:{order_id}"


@dataclass(frozen=True)
class OrderLine:
    """A requested line: which product, how many and which variant options."""

    product_id: str
    quantity: int
    selected_color: str | None = None
    selected_size: str | None = None


@dataclass(frozen=True)
class PricedLine:
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    selected_color: str | None = None
    selected_size: str | None = None


@dataclass(frozen=True)
class Quote:
    lines: list[PricedLine]
    pricing: PriceBreakdown
    coupon_code: str | None


def _coerce_line(item) -> OrderLine:
    if isinstance(item, OrderLine):
        return item
    if isinstance(item, dict):
        return OrderLine(
            product_id=str(item["product_id"]),
            quantity=int(item["quantity"]),
            selected_color=item.get("selected_color"),
            selected_size=item.get("selected_size"),
        )
    raise ValidationError({"items": [f"Unsupported order line: {item!r}"]})


def _coerce_address(value) -> AddressSnapshot:
    if isinstance(value, AddressSnapshot):
        return value
    return AddressSnapshot(**value)


def quantities_by_product(lines: Iterable[OrderLine]) -> "OrderedDict[str, int]":
    """Total quantity per product, in first-seen order."""
    totals: OrderedDict[str, int] = OrderedDict()
    for line in lines:
        totals[line.product_id] = totals.get(line.product_id, 0) + line.quantity
    return totals


class OrderPipeline:
    def __init__(
        self,
        settings: PipelineSettings | None = None,
        lock_registry: KeyedLocks | None = None,
        number_generator=generate_order_number,
    ):
        self.settings = settings or load_settings()
        self.locks = lock_registry or locks
        self.number_generator = number_generator
        self.stock = StockLedger(self.locks, attempts=self.settings.stock_write_attempts)
        self.coupon_usage = CouponUsage(self.locks, attempts=self.settings.stock_write_attempts)
        self.coupons = CouponValidator()

    # -------------------------------------------------------------------
    # Validation and pricing (no writes)
    # -------------------------------------------------------------------
    def _normalize(self, items) -> list[OrderLine]:
        lines = [_coerce_line(item) for item in items or []]
        if not lines:
            raise ValidationError({"items": ["Order must contain at least one item"]})
        for line in lines:
            if line.quantity < 1:
                raise ValidationError({"quantity": [f"Quantity for {line.product_id} must be at least 1"]})
        return lines

    def _price_lines(self, lines: list[OrderLine]) -> list[PricedLine]:
        products = {}
        for product_id, wanted in quantities_by_product(lines).items():
            product = load_product(product_id)
            if not product.can_supply(wanted):
                raise InsufficientStock(product_id, wanted, product.stock_count, name=product.name)
            products[product_id] = product

        return [
            PricedLine(
                product_id=line.product_id,
                product_name=products[line.product_id].name,
                quantity=line.quantity,
                unit_price=products[line.product_id].price,
                selected_color=line.selected_color,
                selected_size=line.selected_size,
            )
            for line in lines
        ]

    def _quote(self, lines: list[OrderLine], coupon_code: str | None) -> Quote:
        priced = self._price_lines(lines)
        subtotal = compute_breakdown(priced, policy=self.settings.pricing).subtotal

        coupon = None
        if coupon_code:
            check = self.coupons.check(coupon_code, subtotal)
            if check.applicable:
                coupon = check.coupon
            else:
                logger.warning(
                    "coupon_not_applied",
                    coupon_code=coupon_code,
                    reason=check.rejection.value,
                    subtotal=subtotal,
                )

        pricing = compute_breakdown(priced, coupon, self.settings.pricing)
        return Quote(lines=priced, pricing=pricing, coupon_code=coupon.code if coupon else None)

    def quote(self, items, coupon_code: str | None = None) -> Quote:
        """Price ``items`` exactly as placement would, without writing anything."""
        lines = self._normalize(items)
        keys = [product_lock_key(pid) for pid in quantities_by_product(lines)]
        with self.locks.hold(*keys):
            return self._quote(lines, coupon_code)

    # -------------------------------------------------------------------
    # Placement
    # -------------------------------------------------------------------
    def place_order(self, user_id, items, shipping_address, billing_address, notes=None, coupon_code=None) -> Order:
        lines = self._normalize(items)
        shipping_address = _coerce_address(shipping_address)
        billing_address = _coerce_address(billing_address)
        totals = quantities_by_product(lines)

        keys = [product_lock_key(pid) for pid in totals]
        if coupon_code:
            keys.append(coupon_lock_key(coupon_code))

        with self.locks.hold(*keys):
            quote = self._quote(lines, coupon_code)

            order_id = str(uuid4())
            saga = Compensations("place_order", order_id=order_id, user_id=str(user_id))
            try:
                shipping = record_address(shipping_address, user_id, AddressType.SHIPPING, order_id=order_id)
                saga.register(f"discard address {shipping.id}", lambda: discard_address(shipping.id))
                billing = record_address(billing_address, user_id, AddressType.BILLING, order_id=order_id)
                saga.register(f"discard address {billing.id}", lambda: discard_address(billing.id))

                for product_id, quantity in totals.items():
                    self.stock.decrement(product_id, quantity)
                    saga.register(
                        f"restore {quantity} of {product_id}",
                        lambda pid=product_id, qty=quantity: self.stock.increment(pid, qty),
                    )

                if quote.coupon_code:
                    self.coupon_usage.record(quote.coupon_code)
                    saga.register(
                        f"release coupon {quote.coupon_code}", lambda: self.coupon_usage.release(quote.coupon_code)
                    )

                order = self._save_order(order_id, user_id, quote, shipping, billing, notes)
            except Exception:
                failed = saga.rollback()
                logger.warning(
                    "order_placement_rolled_back",
                    order_id=order_id,
                    user_id=str(user_id),
                    failed_compensations=failed,
                )
                raise

        logger.info(
            "order_placed",
            order_id=order.id,
            order_number=order.order_number,
            user_id=str(user_id),
            total=order.pricing.total,
            coupon_code=order.coupon_code,
        )
        return order

    def _save_order(self, order_id, user_id, quote: Quote, shipping, billing, notes) -> Order:
        with self.locks.hold(ORDER_NUMBER_LOCK):
            order_number = allocate_order_number(
                self.settings.order_number_prefix,
                self.settings.order_number_attempts,
                generate=self.number_generator,
            )
            order = Order.place(
                order_id=order_id,
                order_number=order_number,
                user_id=user_id,
                lines=quote.lines,
                pricing=quote.pricing,
                shipping_address=shipping.to_snapshot(),
                billing_address=billing.to_snapshot(),
                shipping_address_id=shipping.id,
                billing_address_id=billing.id,
                coupon_code=quote.coupon_code,
                notes=notes,
            )
            current_domain.repository_for(Order).add(order)
        return order

    # -------------------------------------------------------------------
    # Cancellation
    # -------------------------------------------------------------------
    def cancel_order(self, user_id, order_id) -> Order:
        """Cancel an order on behalf of its owner and put its stock back on the shelf."""
        order = get_order(order_id, user_id=user_id)
        keys = [order_lock_key(order.id)] + [product_lock_key(item.product_id) for item in order.items]
        if order.coupon_code and self.settings.restore_coupon_on_cancel:
            keys.append(coupon_lock_key(order.coupon_code))

        with self.locks.hold(*keys):
            # Reload under the lock so two cancellations cannot both restore stock
            order = get_order(order_id, user_id=user_id)
            order.cancel()

            saga = Compensations("cancel_order", order_id=str(order.id), user_id=str(user_id))
            try:
                for product_id, quantity in quantities_by_product(order.lines).items():
                    self.stock.increment(product_id, quantity)
                    saga.register(
                        f"withdraw {quantity} of {product_id}",
                        lambda pid=product_id, qty=quantity: self.stock.decrement(pid, qty),
                    )

                if order.coupon_code and self.settings.restore_coupon_on_cancel:
                    self.coupon_usage.release(order.coupon_code)
                    saga.register(
                        f"record coupon {order.coupon_code}", lambda: self.coupon_usage.record(order.coupon_code)
                    )

                current_domain.repository_for(Order).add(order)
            except Exception:
                saga.rollback()
                raise

        logger.info("order_cancelled", order_id=order.id, order_number=order.order_number, user_id=str(user_id))
        return order

    # -------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------
    def update_order(self, order_id, status=None, tracking_number=None, estimated_delivery=None, notes=None) -> Order:
        """Admin update of status and shipping details. Never touches stock or coupons."""
        from storefront.order.administration import UpdateOrder

        with self.locks.hold(order_lock_key(order_id)):
            current_domain.process(
                UpdateOrder(
                    order_id=str(order_id),
                    status=status,
                    tracking_number=tracking_number,
                    estimated_delivery=estimated_delivery,
                    notes=notes,
                ),
                asynchronous=False,
            )
        return get_order(order_id)
