"""Catalogue administration: commands and handlers for seeding products and categories."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category import Category, slugify
from storefront.catalogue.product import Product
from storefront.catalogue.stock import StockLedger, load_product
from storefront.domain import storefront
from storefront.settings import load_settings
from storefront.shared.errors import Conflict, NotFound


@storefront.command(part_of="Product")
class AddProduct:
    name: String(required=True, max_length=255)
    description: Text()
    price: Float(required=True, min_value=0.0)
    stock_count: Integer(default=0, min_value=0)
    category_id: Identifier()
    colors: Text()  # JSON array
    sizes: Text()  # JSON array


@storefront.command(part_of="Product")
class ChangeProductPrice:
    product_id: Identifier(required=True)
    price: Float(required=True, min_value=0.0)


@storefront.command(part_of="Product")
class ReceiveStock:
    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)


@storefront.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100)
    description: Text()


@storefront.command_handler(part_of=Product)
class ProductManagementHandler:
    @handle(AddProduct)
    def add_product(self, command):
        if command.category_id:
            try:
                current_domain.repository_for(Category).get(command.category_id)
            except ObjectNotFoundError as exc:
                raise NotFound({"category_id": [f"Category {command.category_id} not found"]}) from exc

        product = Product.create(
            name=command.name,
            price=command.price,
            stock_count=command.stock_count or 0,
            description=command.description,
            category_id=command.category_id,
            colors=command.colors,
            sizes=command.sizes,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(ChangeProductPrice)
    def change_price(self, command):
        product = load_product(command.product_id)
        product.change_price(command.price)
        current_domain.repository_for(Product).add(product)

    @handle(ReceiveStock)
    def receive_stock(self, command):
        ledger = StockLedger(attempts=load_settings().stock_write_attempts)
        product = ledger.increment(command.product_id, command.quantity)
        return product.stock_count


@storefront.command_handler(part_of=Category)
class CategoryManagementHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        repo = current_domain.repository_for(Category)
        slug = slugify(command.name)
        if repo._dao.query.filter(slug=slug).all().items:
            raise Conflict({"name": [f"Category '{command.name}' already exists"]})

        category = Category.create(name=command.name, description=command.description)
        repo.add(category)
        return str(category.id)
