"""Wishlist management: commands and handler."""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.cart.management import cart_for
from storefront.catalogue.stock import load_product
from storefront.domain import storefront
from storefront.shared.errors import InsufficientStock
from storefront.utils.logging import get_logger
from storefront.wishlist.wishlist import Wishlist

logger = get_logger(__name__)


def find_wishlist(user_id) -> Wishlist | None:
    found = current_domain.repository_for(Wishlist)._dao.query.filter(user_id=str(user_id)).all().items
    return found[0] if found else None


def wishlist_for(user_id) -> Wishlist:
    return find_wishlist(user_id) or Wishlist.create(user_id=str(user_id))


@storefront.command(part_of="Wishlist")
class AddToWishlist:
    user_id: Identifier(required=True)
    product_id: Identifier(required=True)


@storefront.command(part_of="Wishlist")
class RemoveFromWishlist:
    user_id: Identifier(required=True)
    item_id: Identifier(required=True)


@storefront.command(part_of="Wishlist")
class MoveToCart:
    user_id: Identifier(required=True)
    item_id: Identifier(required=True)
    quantity: Integer(default=1, min_value=1)


@storefront.command_handler(part_of=Wishlist)
class WishlistHandler:
    @handle(AddToWishlist)
    def add_to_wishlist(self, command):
        load_product(command.product_id)
        wishlist = wishlist_for(command.user_id)
        item = wishlist.add_product(command.product_id)
        current_domain.repository_for(Wishlist).add(wishlist)
        return str(item.id)

    @handle(RemoveFromWishlist)
    def remove_from_wishlist(self, command):
        wishlist = wishlist_for(command.user_id)
        wishlist.remove_item(command.item_id)
        current_domain.repository_for(Wishlist).add(wishlist)

    @handle(MoveToCart)
    def move_to_cart(self, command):
        wishlist = wishlist_for(command.user_id)
        item = wishlist.find_item(command.item_id)
        quantity = command.quantity or 1

        product = load_product(item.product_id)
        if not product.can_supply(quantity):
            raise InsufficientStock(str(product.id), quantity, product.stock_count, name=product.name)

        cart = cart_for(command.user_id)
        line = cart.add_item(product, quantity)
        wishlist.remove_item(command.item_id)

        current_domain.repository_for(Cart).add(cart)
        current_domain.repository_for(Wishlist).add(wishlist)
        logger.info("wishlist_item_moved_to_cart", user_id=command.user_id, product_id=str(product.id))
        return str(line.id)
