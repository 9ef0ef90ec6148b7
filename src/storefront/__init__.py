"""Storefront backend: catalogue, coupons, carts and the order placement pipeline."""
