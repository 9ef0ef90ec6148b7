"""Shopper journeys against the storefront API.

Three stateful SequentialTaskSet journeys: browse-and-checkout through the
cart, a direct order followed by a cancellation, and a wishlist that is
moved into the cart. All of them buy from the catalogue seeded at test
start.
"""

import random

from locust import SequentialTaskSet, task

from loadtests.data_generators import checkout_data, order_data, shopper_headers, shopper_id
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ShopperState, seeded


def _coupon_or_none(rate: float = 0.4) -> str | None:
    if seeded.coupon_codes and random.random() < rate:
        return random.choice(seeded.coupon_codes)
    return None


class CartCheckoutJourney(SequentialTaskSet):
    """Add Items -> View Cart -> Adjust Quantity -> Checkout -> View Order.

    409 on add or checkout means a product sold out under load; it is
    recorded as a success because refusing to oversell is correct.
    """

    def on_start(self):
        self.state = ShopperState(user_id=shopper_id())
        self.headers = shopper_headers(self.state.user_id)

    @task
    def add_items(self):
        for product_id in random.sample(seeded.product_ids, k=min(2, len(seeded.product_ids))):
            with self.client.post(
                "/cart/items",
                json={"product_id": product_id, "quantity": random.randint(1, 2)},
                headers=self.headers,
                catch_response=True,
                name="POST /cart/items",
            ) as resp:
                if resp.status_code == 201:
                    self.state.cart_item_ids.append(resp.json()["item_id"])
                elif resp.status_code == 409:
                    resp.success()
                else:
                    resp.failure(f"Add to cart failed: {resp.status_code} — {extract_error_detail(resp)}")
        if not self.state.cart_item_ids:
            self.interrupt()

    @task
    def view_cart(self):
        self.client.get("/cart", headers=self.headers, name="GET /cart")

    @task
    def adjust_quantity(self):
        item_id = self.state.cart_item_ids[0]
        with self.client.put(
            f"/cart/items/{item_id}",
            json={"quantity": 1},
            headers=self.headers,
            catch_response=True,
            name="PUT /cart/items/{id}",
        ) as resp:
            if resp.status_code not in (200, 409):
                resp.failure(f"Update cart item failed: {resp.status_code} — {extract_error_detail(resp)}")
            else:
                resp.success()

    @task
    def checkout(self):
        with self.client.post(
            "/cart/checkout",
            json=checkout_data(_coupon_or_none()),
            headers=self.headers,
            catch_response=True,
            name="POST /cart/checkout",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_ids.append(resp.json()["id"])
            elif resp.status_code == 409:
                resp.success()
                self.interrupt()
            else:
                resp.failure(f"Checkout failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def view_order(self):
        self.client.get(f"/orders/{self.state.order_ids[-1]}", headers=self.headers, name="GET /orders/{id}")

    @task
    def done(self):
        self.interrupt()


class OrderAndCancelJourney(SequentialTaskSet):
    """Place Order -> List My Orders -> Cancel.

    Cancelling returns the stock, so this journey keeps the seeded
    catalogue from draining during long runs.
    """

    def on_start(self):
        self.state = ShopperState(user_id=shopper_id())
        self.headers = shopper_headers(self.state.user_id)

    @task
    def place_order(self):
        with self.client.post(
            "/orders",
            json=order_data(seeded.product_ids, coupon_code=_coupon_or_none()),
            headers=self.headers,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_ids.append(resp.json()["id"])
            elif resp.status_code == 409:
                resp.success()
                self.interrupt()
            else:
                resp.failure(f"Place order failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def list_orders(self):
        self.client.get("/orders", headers=self.headers, name="GET /orders")

    @task
    def cancel(self):
        with self.client.post(
            f"/orders/{self.state.order_ids[-1]}/cancel",
            headers=self.headers,
            catch_response=True,
            name="POST /orders/{id}/cancel",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Cancel failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class WishlistJourney(SequentialTaskSet):
    """Add To Wishlist -> View Wishlist -> Move To Cart -> Clear Cart."""

    def on_start(self):
        self.state = ShopperState(user_id=shopper_id())
        self.headers = shopper_headers(self.state.user_id)

    @task
    def add_to_wishlist(self):
        with self.client.post(
            "/wishlist/items",
            json={"product_id": random.choice(seeded.product_ids)},
            headers=self.headers,
            catch_response=True,
            name="POST /wishlist/items",
        ) as resp:
            if resp.status_code == 201:
                self.state.wishlist_item_ids.append(resp.json()["item_id"])
            else:
                resp.failure(f"Add to wishlist failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def view_wishlist(self):
        self.client.get("/wishlist", headers=self.headers, name="GET /wishlist")

    @task
    def move_to_cart(self):
        item_id = self.state.wishlist_item_ids[-1]
        with self.client.post(
            f"/wishlist/items/{item_id}/move-to-cart",
            json={"quantity": 1},
            headers=self.headers,
            catch_response=True,
            name="POST /wishlist/items/{id}/move-to-cart",
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()
            else:
                resp.failure(f"Move to cart failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def clear_cart(self):
        self.client.delete("/cart", headers=self.headers, name="DELETE /cart")

    @task
    def done(self):
        self.interrupt()
