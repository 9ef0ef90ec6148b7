"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the API's Pydantic request
schemas and the domain's own validation (required address fields, coupon
windows that have already opened, non-negative prices).
"""

import random
import uuid
from datetime import UTC, datetime, timedelta

from faker import Faker

fake = Faker()

ADMIN_HEADERS = {"X-User-Id": "loadtest-admin", "X-User-Role": "admin"}


def shopper_id() -> str:
    """Generate shopper ids like 'shopper-a1b2c3d4'."""
    return f"shopper-{uuid.uuid4().hex[:8]}"


def shopper_headers(user_id: str) -> dict:
    return {"X-User-Id": user_id}


# ---------- Catalogue ----------


def category_name() -> str:
    """Generate a category name like 'Smoky Condiments', unique per call."""
    return f"{fake.word().capitalize()} {fake.word().capitalize()} {uuid.uuid4().hex[:4]}"[:100]


def product_data(stock_count: int | None = None, category_id: str | None = None) -> dict:
    """Generate CreateProductRequest payload matching schema field names."""
    word = fake.word().capitalize()
    return {
        "name": f"{word} {random.choice(['Hot Sauce', 'Salsa', 'Chili Tee', 'Rub'])}"[:255],
        "description": fake.paragraph(nb_sentences=2),
        "price": round(random.uniform(4.99, 39.99), 2),
        "stock_count": stock_count if stock_count is not None else random.randint(50, 500),
        "category_id": category_id,
        "colors": random.sample(["Red", "Green", "Black", "Orange"], k=2),
        "sizes": random.sample(["S", "M", "L", "XL"], k=3),
    }


# ---------- Coupons ----------


def coupon_data(code: str | None = None, usage_limit: int | None = None) -> dict:
    """Generate CreateCouponRequest payload; the window opened yesterday."""
    now = datetime.now(UTC)
    percentage = random.random() < 0.7
    return {
        "code": code or f"LT{uuid.uuid4().hex[:6].upper()}",
        "description": fake.sentence(nb_words=6),
        "discount_type": "percentage" if percentage else "fixed",
        "discount_value": random.choice([5, 10, 15, 20]) if percentage else random.choice([5.0, 10.0]),
        "minimum_amount": random.choice([None, 25.0, 50.0]),
        "maximum_discount": 25.0 if percentage else None,
        "usage_limit": usage_limit,
        "valid_from": (now - timedelta(days=1)).isoformat(),
        "valid_until": (now + timedelta(days=30)).isoformat(),
    }


# ---------- Orders ----------


def address_data() -> dict:
    """Generate AddressPayload matching schema field names."""
    return {
        "first_name": fake.first_name()[:100],
        "last_name": fake.last_name()[:100],
        "street": fake.street_address()[:255],
        "city": fake.city()[:100],
        "state": fake.state_abbr(),
        "zip_code": fake.zipcode()[:20],
        "country": "US",
        "phone": fake.numerify("+1-###-###-####"),
    }


def order_line(product_id: str, max_quantity: int = 3) -> dict:
    return {
        "product_id": product_id,
        "quantity": random.randint(1, max_quantity),
        "selected_size": random.choice([None, "S", "M", "L"]),
    }


def order_data(product_ids: list[str], coupon_code: str | None = None, num_items: int = 2) -> dict:
    """Generate PlaceOrderRequest payload over the given products."""
    chosen = random.sample(product_ids, k=min(num_items, len(product_ids)))
    shipping = address_data()
    return {
        "items": [order_line(pid) for pid in chosen],
        "shipping_address": shipping,
        "billing_address": shipping if random.random() < 0.8 else address_data(),
        "notes": fake.sentence() if random.random() < 0.2 else None,
        "coupon_code": coupon_code,
    }


def checkout_data(coupon_code: str | None = None) -> dict:
    """Generate CheckoutRequest payload."""
    shipping = address_data()
    return {
        "shipping_address": shipping,
        "billing_address": shipping,
        "coupon_code": coupon_code,
    }
