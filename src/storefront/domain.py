"""Storefront domain: catalogue, coupons, carts and order placement.

A single Protean domain holds every aggregate the order placement pipeline
touches, so products, coupons, addresses and orders share one domain context
and one set of repositories.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

storefront = Domain(name="storefront")
