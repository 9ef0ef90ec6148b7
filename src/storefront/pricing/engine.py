"""Pricing engine: subtotal, tiered shipping, flat tax, coupon discount and total.

Everything here is a pure function of its inputs. Order placement and cart
previews call the same code, so a preview always matches the order it
turns into.
"""

from collections.abc import Iterable
from decimal import Decimal

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float

from storefront.coupon.coupon import Coupon
from storefront.domain import storefront
from storefront.settings import PricingPolicy
from storefront.shared.money import ZERO, as_float, round2, to_decimal


@storefront.value_object
class PriceBreakdown:
    """Money summary of an order; ``total = subtotal + shipping + tax - discount``."""

    subtotal: Float(default=0.0, min_value=0.0)
    shipping: Float(default=0.0, min_value=0.0)
    tax: Float(default=0.0, min_value=0.0)
    discount: Float(default=0.0, min_value=0.0)
    total: Float(default=0.0, min_value=0.0)

    @invariant.post
    def total_must_add_up(self):
        expected = round2(
            to_decimal(self.subtotal) + to_decimal(self.shipping) + to_decimal(self.tax) - to_decimal(self.discount)
        )
        if round2(self.total) != expected:
            raise ValidationError({"total": [f"Total {self.total} does not equal components ({expected})"]})


def calculate_subtotal(lines: Iterable) -> Decimal:
    """Sum ``unit_price * quantity`` over objects exposing both attributes."""
    return round2(sum((to_decimal(line.unit_price) * line.quantity for line in lines), ZERO))


def calculate_shipping(subtotal, policy: PricingPolicy | None = None) -> Decimal:
    policy = policy or PricingPolicy()
    subtotal = to_decimal(subtotal)
    if subtotal >= policy.free_shipping_threshold:
        return ZERO
    if subtotal >= policy.standard_shipping_threshold:
        return round2(policy.standard_shipping_fee)
    return round2(policy.express_shipping_fee)


def calculate_tax(taxable_amount, policy: PricingPolicy | None = None) -> Decimal:
    policy = policy or PricingPolicy()
    return round2(to_decimal(taxable_amount) * policy.tax_rate)


def calculate_discount(subtotal, coupon: Coupon | None) -> Decimal:
    """Discount a coupon grants on ``subtotal``, before any clamping against the charge."""
    if coupon is None:
        return ZERO

    if coupon.is_percentage:
        discount = round2(to_decimal(subtotal) * to_decimal(coupon.discount_value) / Decimal(100))
        if coupon.maximum_discount is not None:
            discount = min(discount, round2(coupon.maximum_discount))
        return discount

    return round2(coupon.discount_value)


def compute_breakdown(lines: Iterable, coupon: Coupon | None = None, policy: PricingPolicy | None = None):
    policy = policy or PricingPolicy()

    subtotal = calculate_subtotal(lines)
    shipping = calculate_shipping(subtotal, policy)
    tax = calculate_tax(subtotal + shipping, policy)
    charge = subtotal + shipping + tax

    discount = calculate_discount(subtotal, coupon)
    if policy.clamp_total_at_zero:
        discount = min(discount, charge)

    return PriceBreakdown(
        subtotal=as_float(subtotal),
        shipping=as_float(shipping),
        tax=as_float(tax),
        discount=as_float(discount),
        total=as_float(charge - discount),
    )
