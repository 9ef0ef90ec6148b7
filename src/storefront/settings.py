"""Business policy read from the ``[custom]`` section of ``domain.toml``."""

from dataclasses import dataclass
from decimal import Decimal

from storefront.shared.money import to_decimal


@dataclass(frozen=True)
class PricingPolicy:
    tax_rate: Decimal = Decimal("0.08")
    free_shipping_threshold: Decimal = Decimal("50.00")
    standard_shipping_threshold: Decimal = Decimal("25.00")
    standard_shipping_fee: Decimal = Decimal("5.99")
    express_shipping_fee: Decimal = Decimal("9.99")
    clamp_total_at_zero: bool = True

    @classmethod
    def from_config(cls, custom: dict) -> "PricingPolicy":
        defaults = cls()
        return cls(
            tax_rate=to_decimal(custom.get("tax_rate", defaults.tax_rate)),
            free_shipping_threshold=to_decimal(custom.get("free_shipping_threshold", defaults.free_shipping_threshold)),
            standard_shipping_threshold=to_decimal(
                custom.get("standard_shipping_threshold", defaults.standard_shipping_threshold)
            ),
            standard_shipping_fee=to_decimal(custom.get("standard_shipping_fee", defaults.standard_shipping_fee)),
            express_shipping_fee=to_decimal(custom.get("express_shipping_fee", defaults.express_shipping_fee)),
            clamp_total_at_zero=bool(custom.get("clamp_total_at_zero", defaults.clamp_total_at_zero)),
        )


@dataclass(frozen=True)
class PipelineSettings:
    pricing: PricingPolicy = PricingPolicy()
    order_number_prefix: str = "FH"
    order_number_attempts: int = 5
    stock_write_attempts: int = 3
    restore_coupon_on_cancel: bool = False

    @classmethod
    def from_config(cls, custom: dict) -> "PipelineSettings":
        defaults = cls()
        return cls(
            pricing=PricingPolicy.from_config(custom),
            order_number_prefix=str(custom.get("order_number_prefix", defaults.order_number_prefix)),
            order_number_attempts=int(custom.get("order_number_attempts", defaults.order_number_attempts)),
            stock_write_attempts=int(custom.get("stock_write_attempts", defaults.stock_write_attempts)),
            restore_coupon_on_cancel=bool(custom.get("restore_coupon_on_cancel", defaults.restore_coupon_on_cancel)),
        )


def load_settings(domain=None) -> PipelineSettings:
    """Build settings from the active domain's configuration."""
    if domain is None:
        from protean.utils.globals import current_domain

        domain = current_domain
    custom = domain.config.get("custom") or {}
    return PipelineSettings.from_config(dict(custom))
