"""Product aggregate: price, stock on hand and selectable options."""

import json
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.shared.errors import InsufficientStock


def _as_json_list(values):
    if values is None:
        return None
    if isinstance(values, str):
        return values
    return json.dumps(list(values))


@storefront.aggregate
class Product:
    """A sellable item.

    ``stock_count`` is the only source of truth for availability; ``in_stock``
    mirrors ``stock_count > 0`` and is kept in step by every stock mutation.
    Colours and sizes are free-form option lists stored as JSON arrays.
    """

    name: String(required=True, max_length=255)
    description: Text()
    price: Float(required=True, min_value=0.0)
    stock_count: Integer(default=0, min_value=0)
    in_stock: Boolean(default=False)
    category_id: Identifier()
    colors: Text()
    sizes: Text()
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def availability_follows_stock_count(self):
        if self.in_stock != (self.stock_count > 0):
            raise ValidationError({"in_stock": ["Availability must match the stock count"]})

    @property
    def color_options(self) -> list[str]:
        return json.loads(self.colors) if self.colors else []

    @property
    def size_options(self) -> list[str]:
        return json.loads(self.sizes) if self.sizes else []

    @classmethod
    def create(cls, name, price, stock_count=0, description=None, category_id=None, colors=None, sizes=None):
        from storefront.catalogue.events import ProductAdded

        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            price=price,
            stock_count=stock_count,
            in_stock=stock_count > 0,
            category_id=category_id,
            colors=_as_json_list(colors),
            sizes=_as_json_list(sizes),
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=product.id,
                name=name,
                price=price,
                stock_count=stock_count,
                category_id=category_id,
                created_at=now,
            )
        )
        return product

    def can_supply(self, quantity: int) -> bool:
        return self.in_stock and self.stock_count >= quantity

    def withdraw_stock(self, quantity: int):
        """Take ``quantity`` units off the shelf. Never clamps at zero."""
        from storefront.catalogue.events import ProductSoldOut, StockWithdrawn

        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if not self.can_supply(quantity):
            raise InsufficientStock(str(self.id), quantity, self.stock_count, name=self.name)

        with atomic_change(self):
            self.stock_count -= quantity
            self.in_stock = self.stock_count > 0
            self.updated_at = datetime.now(UTC)

        self.raise_(StockWithdrawn(product_id=self.id, quantity=quantity, stock_count=self.stock_count))
        if not self.in_stock:
            self.raise_(ProductSoldOut(product_id=self.id))

    def restock(self, quantity: int):
        from storefront.catalogue.events import StockReplenished

        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        with atomic_change(self):
            self.stock_count += quantity
            self.in_stock = True
            self.updated_at = datetime.now(UTC)

        self.raise_(StockReplenished(product_id=self.id, quantity=quantity, stock_count=self.stock_count))

    def change_price(self, new_price: float):
        from storefront.catalogue.events import ProductPriceChanged

        if new_price < 0:
            raise ValidationError({"price": ["Price cannot be negative"]})

        previous = self.price
        self.price = new_price
        self.updated_at = datetime.now(UTC)
        self.raise_(ProductPriceChanged(product_id=self.id, previous_price=previous, new_price=new_price))
