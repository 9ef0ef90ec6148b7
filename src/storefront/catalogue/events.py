"""Domain events for the catalogue aggregates."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Category")
class CategoryCreated:
    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)


@storefront.event(part_of="Product")
class ProductAdded:
    """A product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    price: Float(required=True)
    stock_count: Integer(required=True)
    category_id: Identifier()
    created_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductPriceChanged:
    __version__ = 1

    product_id: Identifier(required=True)
    previous_price: Float(required=True)
    new_price: Float(required=True)


@storefront.event(part_of="Product")
class StockWithdrawn:
    """Units left the shelf because an order was placed."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    stock_count: Integer(required=True)


@storefront.event(part_of="Product")
class StockReplenished:
    """Units came back on the shelf: received goods, a cancelled order or a rolled back placement."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    stock_count: Integer(required=True)


@storefront.event(part_of="Product")
class ProductSoldOut:
    __version__ = 1

    product_id: Identifier(required=True)
