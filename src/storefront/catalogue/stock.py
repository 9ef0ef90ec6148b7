"""Stock ledger: the only writer of ``Product.stock_count``.

Each mutation reloads the product under its lock, re-checks availability on
the fresh record and saves it, so the check and the write cannot be split by
another order for the same product.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.shared.errors import NotFound
from storefront.shared.locks import KeyedLocks, locks
from storefront.shared.versioned import mutate_under_lock
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def product_lock_key(product_id) -> str:
    return f"product:{product_id}"


def load_product(product_id) -> Product:
    try:
        return current_domain.repository_for(Product).get(str(product_id))
    except ObjectNotFoundError:
        raise NotFound({"product_id": [f"Product {product_id} not found"]}) from None


class StockLedger:
    def __init__(self, lock_registry: KeyedLocks | None = None, attempts: int = 3):
        self.locks = lock_registry or locks
        self.attempts = max(1, attempts)

    def decrement(self, product_id, quantity: int) -> Product:
        """Remove ``quantity`` units; raises InsufficientStock rather than going below zero."""
        product = self._mutate(product_id, lambda p: p.withdraw_stock(quantity))
        logger.debug("stock_decremented", product_id=str(product_id), quantity=quantity, stock=product.stock_count)
        return product

    def increment(self, product_id, quantity: int) -> Product:
        product = self._mutate(product_id, lambda p: p.restock(quantity))
        logger.debug("stock_incremented", product_id=str(product_id), quantity=quantity, stock=product.stock_count)
        return product

    def _mutate(self, product_id, change) -> Product:
        return mutate_under_lock(
            self.locks,
            product_lock_key(product_id),
            lambda: load_product(product_id),
            change,
            attempts=self.attempts,
        )
