"""Storefront Load Testing — Locust entry point.

Seeds a catalogue and coupons through the admin API when the test starts,
then runs the shopper and contention scenarios against it.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py --host http://localhost:8000

    # Mixed workload only:
    locust -f loadtests/locustfile.py MixedWorkloadUser

    # Oversell check under contention:
    locust -f loadtests/locustfile.py LastUnitRushUser --headless -u 50 -r 10 -t 60s

    # Headless (CI mode):
    locust -f loadtests/locustfile.py MixedWorkloadUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

import requests
from locust import events

from loadtests.data_generators import ADMIN_HEADERS, category_name, coupon_data, product_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import seeded

# Import all user classes so Locust discovers them
from loadtests.scenarios.contention import LastUnitRushUser, verify_no_oversell  # noqa: F401
from loadtests.scenarios.mixed import MixedWorkloadUser  # noqa: F401

logger = logging.getLogger("loadtest")

SEED_PRODUCTS = 20
SCARCE_STOCK = 25
SEED_COUPONS = 3


def _create(host: str, path: str, payload: dict) -> dict:
    resp = requests.post(f"{host}{path}", json=payload, headers=ADMIN_HEADERS, timeout=10)
    if resp.status_code != 201:
        raise RuntimeError(f"Seeding {path} failed: {resp.status_code} — {extract_error_detail(resp)}")
    return resp.json()


def seed_catalogue(host: str) -> None:
    category_id = _create(host, "/categories", {"name": category_name()})["category_id"]
    seeded.product_ids = [
        _create(host, "/products", product_data(category_id=category_id))["product_id"] for _ in range(SEED_PRODUCTS)
    ]
    seeded.scarce_stock = SCARCE_STOCK
    seeded.scarce_product_id = _create(host, "/products", product_data(stock_count=SCARCE_STOCK))["product_id"]

    seeded.coupon_codes = []
    for _ in range(SEED_COUPONS):
        coupon = coupon_data()
        _create(host, "/admin/coupons", coupon)
        seeded.coupon_codes.append(coupon["code"])

    single_use = coupon_data(usage_limit=1)
    _create(host, "/admin/coupons", single_use)
    seeded.single_use_coupon = single_use["code"]


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request.

    Fires globally for all scenarios — no per-task wiring needed.
    """
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400 and response.status_code != 409:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    """Seed the catalogue and log a marker when the load test begins."""
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    seed_catalogue(environment.host)
    print(f"[LOADTEST] Seeded {len(seeded.product_ids)} products and {len(seeded.coupon_codes)} coupon(s)")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Verify the stock and coupon invariants when the test ends."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    try:
        ok = verify_no_oversell(environment.host)
    except requests.RequestException as e:
        print(f"[LOADTEST] Could not verify stock invariants: {e}\n")
        return
    print(f"[LOADTEST] Stock invariants: {'OK' if ok else 'VIOLATED'}\n")
    if not ok:
        environment.process_exit_code = 1
