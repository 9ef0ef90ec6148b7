"""Cart views with a live price preview, and checkout through the order pipeline."""

from dataclasses import dataclass, field

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.cart.management import ClearCart, find_cart
from storefront.catalogue.stock import load_product
from storefront.order.placement import OrderLine, OrderPipeline
from storefront.pricing.engine import PriceBreakdown, compute_breakdown
from storefront.settings import PricingPolicy
from storefront.shared.errors import NotFound
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CartLine:
    item_id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    in_stock: bool
    selected_color: str | None = None
    selected_size: str | None = None

    @property
    def line_total(self) -> float:
        return round(self.unit_price * self.quantity, 2)


@dataclass
class CartView:
    user_id: str
    lines: list[CartLine] = field(default_factory=list)
    pricing: PriceBreakdown = field(default_factory=PriceBreakdown)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)


def view_cart(user_id, policy: PricingPolicy | None = None) -> CartView:
    """Cart contents priced at today's catalogue prices, without any coupon."""
    cart = find_cart(user_id)
    if cart is None or not cart.items:
        return CartView(user_id=str(user_id))

    lines = []
    for item in sorted(cart.items, key=lambda i: i.added_at, reverse=True):
        try:
            product = load_product(item.product_id)
        except NotFound:
            logger.warning("cart_item_product_missing", user_id=str(user_id), product_id=str(item.product_id))
            continue
        lines.append(
            CartLine(
                item_id=str(item.id),
                product_id=str(product.id),
                product_name=product.name,
                quantity=item.quantity,
                unit_price=product.price,
                in_stock=product.in_stock,
                selected_color=item.selected_color,
                selected_size=item.selected_size,
            )
        )

    return CartView(user_id=str(user_id), lines=lines, pricing=compute_breakdown(lines, policy=policy))


def cart_item_count(user_id) -> int:
    cart = find_cart(user_id)
    return cart.item_count if cart else 0


def checkout_cart(pipeline: OrderPipeline, user_id, shipping_address, billing_address, notes=None, coupon_code=None):
    """Place an order for everything in the cart; the cart is emptied only if placement succeeds."""
    cart = find_cart(user_id)
    if cart is None or not cart.items:
        raise ValidationError({"cart": ["Cart is empty"]})

    lines = [
        OrderLine(
            product_id=str(item.product_id),
            quantity=item.quantity,
            selected_color=item.selected_color,
            selected_size=item.selected_size,
        )
        for item in sorted(cart.items, key=lambda i: i.added_at)
    ]
    order = pipeline.place_order(
        user_id,
        lines,
        shipping_address,
        billing_address,
        notes=notes,
        coupon_code=coupon_code,
    )
    current_domain.process(ClearCart(user_id=str(user_id)), asynchronous=False)
    logger.info("cart_checked_out", user_id=str(user_id), order_id=order.id, order_number=order.order_number)
    return order
