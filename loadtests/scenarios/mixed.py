"""Mixed shopper workload scenario.

Combines the shopper journeys with weights that model realistic storefront
traffic. This is the recommended scenario for load baseline testing.
"""

from locust import HttpUser, between

from loadtests.scenarios.shopping import CartCheckoutJourney, OrderAndCancelJourney, WishlistJourney


class MixedWorkloadUser(HttpUser):
    """Realistic mixed workload simulating concurrent shoppers.

    Weight distribution:
    - Cart checkout (50%): the main conversion path
    - Direct order then cancel (30%): keeps stock circulating
    - Wishlist to cart (20%): browsing without buying
    """

    wait_time = between(0.5, 2.0)

    tasks = {
        CartCheckoutJourney: 5,
        OrderAndCancelJourney: 3,
        WishlistJourney: 2,
    }
