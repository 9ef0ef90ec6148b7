"""Cart item management: commands and handler."""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalogue.stock import load_product
from storefront.domain import storefront
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def find_cart(user_id) -> Cart | None:
    found = current_domain.repository_for(Cart)._dao.query.filter(user_id=str(user_id)).all().items
    return found[0] if found else None


def cart_for(user_id) -> Cart:
    """The user's cart, created empty (and unsaved) when they have none yet."""
    return find_cart(user_id) or Cart.create(user_id=str(user_id))


@storefront.command(part_of="Cart")
class AddToCart:
    user_id: Identifier(required=True)
    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)
    selected_color: String(max_length=50)
    selected_size: String(max_length=50)


@storefront.command(part_of="Cart")
class UpdateCartItem:
    user_id: Identifier(required=True)
    item_id: Identifier(required=True)
    quantity: Integer(required=True)


@storefront.command(part_of="Cart")
class RemoveFromCart:
    user_id: Identifier(required=True)
    item_id: Identifier(required=True)


@storefront.command(part_of="Cart")
class ClearCart:
    user_id: Identifier(required=True)


@storefront.command_handler(part_of=Cart)
class CartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = load_product(command.product_id)
        cart = cart_for(command.user_id)
        line = cart.add_item(
            product,
            command.quantity,
            selected_color=command.selected_color,
            selected_size=command.selected_size,
        )
        current_domain.repository_for(Cart).add(cart)
        logger.info("cart_item_added", user_id=command.user_id, product_id=command.product_id, quantity=line.quantity)
        return str(line.id)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        cart = cart_for(command.user_id)
        line = cart.find_item(command.item_id)
        cart.change_quantity(command.item_id, command.quantity, load_product(line.product_id))
        current_domain.repository_for(Cart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = cart_for(command.user_id)
        cart.remove_item(command.item_id)
        current_domain.repository_for(Cart).add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = find_cart(command.user_id)
        if cart is None:
            return
        cart.clear()
        current_domain.repository_for(Cart).add(cart)
        logger.info("cart_cleared", user_id=command.user_id)
