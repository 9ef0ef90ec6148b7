"""Integration tests for the coupon endpoints."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from app import create_app

CUSTOMER = {"X-User-Id": "user-api-003"}
ADMIN = {"X-User-Id": "admin-001", "X-User-Role": "admin"}


@pytest.fixture()
def client():
    return TestClient(create_app(init_domain=False))


class TestCouponEndpoints:
    def _create(self, client, **overrides):
        now = datetime.now(UTC)
        body = {
            "code": "welcome10",
            "discount_type": "percentage",
            "discount_value": 10,
            "minimum_amount": 25,
            "valid_from": (now - timedelta(days=1)).isoformat(),
            "valid_until": (now + timedelta(days=30)).isoformat(),
        }
        body.update(overrides)
        return client.post("/admin/coupons", json=body, headers=ADMIN)

    def test_create_and_fetch(self, client):
        assert self._create(client).status_code == 201

        coupon = client.get("/coupons/WELCOME10").json()
        assert coupon["code"] == "WELCOME10"
        assert coupon["used_count"] == 0

    def test_duplicate_is_409(self, client):
        self._create(client)
        assert self._create(client, code="Welcome10").status_code == 409

    def test_create_requires_admin(self, client):
        now = datetime.now(UTC).isoformat()
        body = {"code": "X", "discount_type": "fixed", "discount_value": 5, "valid_from": now, "valid_until": now}
        assert client.post("/admin/coupons", json=body, headers=CUSTOMER).status_code == 403

    def test_preview(self, client):
        self._create(client)

        applies = client.post("/coupons/welcome10/preview", json={"order_amount": 40}).json()
        too_small = client.post("/coupons/welcome10/preview", json={"order_amount": 10}).json()

        assert applies["applicable"] is True
        assert applies["discount"] == 4.0
        assert too_small["applicable"] is False
        assert too_small["reason"] == "below_minimum"

    def test_unknown_code_is_404(self, client):
        assert client.get("/coupons/NOPE").status_code == 404
