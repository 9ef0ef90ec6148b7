"""Tests for the pricing engine: shipping tiers, tax, coupon discounts and totals."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest
from protean.exceptions import ValidationError

from storefront.coupon.coupon import Coupon
from storefront.pricing.engine import (
    PriceBreakdown,
    calculate_discount,
    calculate_shipping,
    calculate_subtotal,
    calculate_tax,
    compute_breakdown,
)
from storefront.settings import PricingPolicy


def line(unit_price, quantity=1):
    return SimpleNamespace(unit_price=unit_price, quantity=quantity)


def coupon(discount_type="percentage", discount_value=10, **kwargs):
    now = datetime.now(UTC)
    return Coupon.create(
        code="TEST",
        discount_type=discount_type,
        discount_value=discount_value,
        valid_from=now - timedelta(days=1),
        valid_until=now + timedelta(days=1),
        **kwargs,
    )


class TestSubtotal:
    def test_sums_price_times_quantity(self):
        assert calculate_subtotal([line(10.00, 2), line(4.99, 3)]) == Decimal("34.97")

    def test_avoids_float_drift(self):
        assert calculate_subtotal([line(0.1, 3)]) == Decimal("0.30")

    def test_empty_lines(self):
        assert calculate_subtotal([]) == Decimal("0.00")


class TestShipping:
    @pytest.mark.parametrize(
        "subtotal, expected",
        [
            ("50.00", "0.00"),
            ("120.00", "0.00"),
            ("49.99", "5.99"),
            ("25.00", "5.99"),
            ("24.99", "9.99"),
            ("0.00", "9.99"),
        ],
    )
    def test_tiers(self, subtotal, expected):
        assert calculate_shipping(Decimal(subtotal)) == Decimal(expected)

    def test_policy_overrides_thresholds(self):
        policy = PricingPolicy(free_shipping_threshold=Decimal("100"), standard_shipping_fee=Decimal("4.50"))
        assert calculate_shipping(Decimal("60"), policy) == Decimal("4.50")


class TestTax:
    def test_default_rate_is_eight_percent(self):
        assert calculate_tax(Decimal("50.00")) == Decimal("4.00")

    def test_rounds_half_up(self):
        assert calculate_tax(Decimal("1.5625")) == Decimal("0.13")

    def test_custom_rate(self):
        assert calculate_tax(Decimal("100"), PricingPolicy(tax_rate=Decimal("0.2"))) == Decimal("20.00")


class TestDiscount:
    def test_no_coupon_means_no_discount(self):
        assert calculate_discount(Decimal("80"), None) == Decimal("0.00")

    def test_percentage(self):
        assert calculate_discount(Decimal("25.00"), coupon(discount_value=10)) == Decimal("2.50")

    def test_percentage_capped_by_maximum_discount(self):
        capped = coupon(discount_value=50, maximum_discount=30)
        assert calculate_discount(Decimal("200.00"), capped) == Decimal("30.00")

    def test_fixed(self):
        assert calculate_discount(Decimal("120.00"), coupon("fixed", 20)) == Decimal("20.00")

    def test_maximum_discount_ignored_for_fixed(self):
        assert calculate_discount(Decimal("120.00"), coupon("fixed", 20, maximum_discount=5)) == Decimal("20.00")


class TestBreakdown:
    def test_order_without_coupon_reaching_free_shipping(self):
        breakdown = compute_breakdown([line(10.00, 5)])

        assert breakdown.subtotal == 50.00
        assert breakdown.shipping == 0.00
        assert breakdown.tax == 4.00
        assert breakdown.discount == 0.00
        assert breakdown.total == 54.00

    def test_percentage_coupon_at_standard_shipping(self):
        breakdown = compute_breakdown([line(25.00)], coupon(discount_value=10, minimum_amount=25))

        assert breakdown.subtotal == 25.00
        assert breakdown.shipping == 5.99
        assert breakdown.tax == 2.48
        assert breakdown.discount == 2.50
        assert breakdown.total == 30.97

    def test_tax_is_levied_before_discount(self):
        with_coupon = compute_breakdown([line(60.00)], coupon("fixed", 10))
        without = compute_breakdown([line(60.00)])

        assert with_coupon.tax == without.tax == 4.80
        assert with_coupon.total == round(without.total - 10, 2)

    def test_fixed_discount_larger_than_charge_is_clamped(self):
        breakdown = compute_breakdown([line(10.00)], coupon("fixed", 50))

        assert breakdown.shipping == 9.99
        assert breakdown.tax == 1.60
        assert breakdown.discount == 21.59
        assert breakdown.total == 0.00

    def test_unclamped_policy_rejects_negative_total(self):
        policy = PricingPolicy(clamp_total_at_zero=False)
        with pytest.raises(ValidationError):
            compute_breakdown([line(10.00)], coupon("fixed", 50), policy)

    def test_is_deterministic(self):
        lines = [line(19.99, 2), line(3.35, 7)]
        first = compute_breakdown(lines, coupon(discount_value=15))
        second = compute_breakdown(lines, coupon(discount_value=15))

        assert first.to_dict() == second.to_dict()


class TestPriceBreakdownValueObject:
    def test_total_must_equal_components(self):
        with pytest.raises(ValidationError) as exc:
            PriceBreakdown(subtotal=10.0, shipping=0.0, tax=0.8, discount=0.0, total=12.0)
        assert "total" in exc.value.messages

    def test_negative_components_rejected(self):
        with pytest.raises(ValidationError):
            PriceBreakdown(subtotal=-1.0, shipping=0.0, tax=0.0, discount=0.0, total=-1.0)
