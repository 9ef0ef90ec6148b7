"""Wishlist aggregate: products a user wants to remember, each at most once."""

from protean.fields import DateTime, HasMany, Identifier

from storefront.domain import storefront
from storefront.shared.clock import utcnow
from storefront.shared.errors import Conflict, NotFound


@storefront.entity(part_of="Wishlist")
class WishlistItem:
    product_id: Identifier(required=True)
    added_at: DateTime()


@storefront.aggregate
class Wishlist:
    user_id: Identifier(required=True, unique=True)
    items: HasMany(WishlistItem)
    created_at: DateTime()

    @classmethod
    def create(cls, user_id):
        return cls(user_id=user_id, created_at=utcnow())

    @property
    def item_count(self) -> int:
        return len(self.items)

    def contains(self, product_id) -> bool:
        return any(str(i.product_id) == str(product_id) for i in self.items)

    def add_product(self, product_id) -> WishlistItem:
        if self.contains(product_id):
            raise Conflict({"product_id": ["Product is already in your wishlist"]})
        item = WishlistItem(product_id=product_id, added_at=utcnow())
        self.add_items(item)
        return item

    def find_item(self, item_id) -> WishlistItem:
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise NotFound({"item_id": [f"Wishlist item {item_id} not found"]})
        return item

    def remove_item(self, item_id) -> WishlistItem:
        item = self.find_item(item_id)
        self.remove_items(item)
        return item
