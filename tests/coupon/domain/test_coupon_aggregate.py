"""Tests for the Coupon aggregate: creation, applicability rules and usage accounting."""

from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError

from storefront.coupon.coupon import Coupon, CouponRejection
from storefront.coupon.events import CouponCreated, CouponRedeemed, CouponRedemptionReleased, CouponUpdated
from storefront.shared.errors import Conflict

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=UTC)


def _make_coupon(**overrides):
    defaults = {
        "code": "welcome10",
        "discount_type": "percentage",
        "discount_value": 10,
        "valid_from": NOW - timedelta(days=1),
        "valid_until": NOW + timedelta(days=30),
    }
    defaults.update(overrides)
    return Coupon.create(**defaults)


class TestCouponCreation:
    def test_code_is_uppercased(self):
        assert _make_coupon(code="  welcome10 ").code == "WELCOME10"

    def test_naive_datetimes_are_treated_as_utc(self):
        coupon = _make_coupon(valid_from=datetime(2026, 1, 1), valid_until=datetime(2026, 12, 31))
        assert coupon.valid_from.tzinfo is not None

    def test_defaults(self):
        coupon = _make_coupon()
        assert coupon.used_count == 0
        assert coupon.is_active is True
        assert coupon.is_percentage is True
        assert coupon.uses_left is None

    def test_raises_coupon_created(self):
        assert isinstance(_make_coupon()._events[-1], CouponCreated)

    def test_unknown_discount_type_rejected(self):
        with pytest.raises(ValidationError):
            _make_coupon(discount_type="bogo")

    def test_window_must_be_ordered(self):
        with pytest.raises(ValidationError) as exc:
            _make_coupon(valid_from=NOW, valid_until=NOW - timedelta(days=1))
        assert "valid_until" in exc.value.messages

    def test_percentage_over_hundred_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _make_coupon(discount_value=150)
        assert "discount_value" in exc.value.messages

    def test_fixed_amount_over_hundred_allowed(self):
        assert _make_coupon(discount_type="fixed", discount_value=150).discount_value == 150


class TestCouponApplicability:
    def test_applies_inside_window(self):
        assert _make_coupon().rejection_for(40, now=NOW) is None

    def test_inactive(self):
        assert _make_coupon(is_active=False).rejection_for(40, now=NOW) == CouponRejection.INACTIVE

    def test_not_started(self):
        coupon = _make_coupon(valid_from=NOW + timedelta(hours=1), valid_until=NOW + timedelta(days=2))
        assert coupon.rejection_for(40, now=NOW) == CouponRejection.NOT_STARTED

    def test_expired(self):
        coupon = _make_coupon(valid_from=NOW - timedelta(days=10), valid_until=NOW - timedelta(seconds=1))
        assert coupon.rejection_for(40, now=NOW) == CouponRejection.EXPIRED

    def test_window_bounds_are_inclusive(self):
        coupon = _make_coupon(valid_from=NOW, valid_until=NOW + timedelta(days=1))
        assert coupon.rejection_for(40, now=NOW) is None
        assert coupon.rejection_for(40, now=NOW + timedelta(days=1)) is None

    def test_below_minimum(self):
        coupon = _make_coupon(minimum_amount=100)
        assert coupon.rejection_for(80, now=NOW) == CouponRejection.BELOW_MINIMUM
        assert coupon.rejection_for(100, now=NOW) is None

    def test_usage_exhausted(self):
        coupon = _make_coupon(usage_limit=1)
        coupon.record_usage()
        assert coupon.rejection_for(40, now=NOW) == CouponRejection.USAGE_EXHAUSTED

    def test_inactive_reported_before_expiry(self):
        coupon = _make_coupon(is_active=False, valid_from=NOW - timedelta(days=5), valid_until=NOW - timedelta(days=1))
        assert coupon.rejection_for(40, now=NOW) == CouponRejection.INACTIVE


class TestCouponUsage:
    def test_record_usage(self):
        coupon = _make_coupon(usage_limit=2)
        coupon.record_usage()

        assert coupon.used_count == 1
        assert coupon.uses_left == 1
        assert isinstance(coupon._events[-1], CouponRedeemed)

    def test_cannot_exceed_limit(self):
        coupon = _make_coupon(usage_limit=1)
        coupon.record_usage()

        with pytest.raises(Conflict):
            coupon.record_usage()
        assert coupon.used_count == 1

    def test_unlimited_coupon(self):
        coupon = _make_coupon()
        for _ in range(5):
            coupon.record_usage()
        assert coupon.used_count == 5

    def test_release_usage(self):
        coupon = _make_coupon()
        coupon.record_usage()
        coupon.release_usage()

        assert coupon.used_count == 0
        assert isinstance(coupon._events[-1], CouponRedemptionReleased)

    def test_release_never_goes_negative(self):
        coupon = _make_coupon()
        coupon.release_usage()
        assert coupon.used_count == 0


class TestCouponRevision:
    def test_revise_applies_given_fields(self):
        coupon = _make_coupon()
        coupon.revise(code="summer15", discount_value=15, description=None)

        assert coupon.code == "SUMMER15"
        assert coupon.discount_value == 15
        assert isinstance(coupon._events[-1], CouponUpdated)

    def test_revise_can_move_window_in_one_step(self):
        coupon = _make_coupon()
        later = NOW + timedelta(days=60)
        coupon.revise(valid_from=later, valid_until=later + timedelta(days=7))

        assert coupon.valid_from == later

    def test_revise_rejects_inverted_window(self):
        coupon = _make_coupon()
        with pytest.raises(ValidationError):
            coupon.revise(valid_until=NOW - timedelta(days=5))
