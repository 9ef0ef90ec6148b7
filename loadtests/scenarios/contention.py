"""Contention scenarios for the order placement pipeline.

Every user hammers the same scarce product and the same single-use coupon.
After the run, ``verify_no_oversell`` checks the invariants the pipeline
guarantees: the product's stock never went negative, exactly the seeded
number of units were sold, and the single-use coupon was redeemed at most
once.
"""

import logging

import requests
from locust import HttpUser, constant_pacing, task

from loadtests.data_generators import ADMIN_HEADERS, address_data, shopper_headers, shopper_id
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import seeded

logger = logging.getLogger("loadtest")


class LastUnitRushUser(HttpUser):
    """Many shoppers racing for the last units of one product.

    Successful orders plus 409 refusals must add up to every attempt; any
    other status is a failure.
    """

    wait_time = constant_pacing(0.2)

    def on_start(self):
        self.headers = shopper_headers(shopper_id())

    @task(3)
    def grab_last_unit(self):
        address = address_data()
        with self.client.post(
            "/orders",
            json={
                "items": [{"product_id": seeded.scarce_product_id, "quantity": 1}],
                "shipping_address": address,
                "billing_address": address,
            },
            headers=self.headers,
            catch_response=True,
            name="[RUSH] POST /orders",
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()
            else:
                resp.failure(f"Unexpected status: {resp.status_code} — {extract_error_detail(resp)}")

    @task(1)
    def redeem_single_use_coupon(self):
        address = address_data()
        with self.client.post(
            "/orders",
            json={
                "items": [{"product_id": seeded.product_ids[0], "quantity": 1}],
                "shipping_address": address,
                "billing_address": address,
                "coupon_code": seeded.single_use_coupon,
            },
            headers=self.headers,
            catch_response=True,
            name="[RUSH] POST /orders (single-use coupon)",
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()
            else:
                resp.failure(f"Unexpected status: {resp.status_code} — {extract_error_detail(resp)}")


def verify_no_oversell(host: str) -> bool:
    """Check stock and coupon invariants after a contention run; log and return the verdict."""
    product = requests.get(f"{host}/products/{seeded.scarce_product_id}", timeout=10).json()
    coupon = requests.get(f"{host}/coupons/{seeded.single_use_coupon}", timeout=10).json()

    sold = 0
    page = 1
    while True:
        resp = requests.get(
            f"{host}/admin/orders",
            params={"page": page, "limit": 100},
            headers=ADMIN_HEADERS,
            timeout=30,
        ).json()
        for order in resp["orders"]:
            if order["status"] == "Cancelled":
                continue
            sold += sum(i["quantity"] for i in order["items"] if i["product_id"] == seeded.scarce_product_id)
        if page >= resp["pages"]:
            break
        page += 1

    ok = (
        product["stock_count"] >= 0
        and sold + product["stock_count"] == seeded.scarce_stock
        and coupon["used_count"] <= 1
    )
    logger.info(
        "[CONTENTION] stock_left=%s sold=%s seeded=%s coupon_used=%s -> %s",
        product["stock_count"],
        sold,
        seeded.scarce_stock,
        coupon["used_count"],
        "OK" if ok else "VIOLATED",
    )
    return ok
