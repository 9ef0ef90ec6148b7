"""Cart aggregate: one per user, holding products the user intends to buy."""

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String

from storefront.cart.events import CartCleared, CartItemAdded, CartItemQuantityChanged, CartItemRemoved
from storefront.domain import storefront
from storefront.shared.clock import utcnow
from storefront.shared.errors import InsufficientStock, NotFound


@storefront.entity(part_of="Cart")
class CartItem:
    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)
    selected_color: String(max_length=50)
    selected_size: String(max_length=50)
    added_at: DateTime()


@storefront.aggregate
class Cart:
    """A user's cart.

    The same product with the same colour and size is one line; adding it
    again raises that line's quantity. Stock is checked against the product
    passed in, but nothing is reserved until checkout.
    """

    user_id: Identifier(required=True, unique=True)
    items: HasMany(CartItem)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, user_id):
        now = utcnow()
        return cls(user_id=user_id, created_at=now, updated_at=now)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def find_item(self, item_id) -> CartItem:
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise NotFound({"item_id": [f"Cart item {item_id} not found"]})
        return item

    def _matching_line(self, product_id, selected_color, selected_size):
        return next(
            (
                i
                for i in self.items
                if str(i.product_id) == str(product_id)
                and (i.selected_color or None) == (selected_color or None)
                and (i.selected_size or None) == (selected_size or None)
            ),
            None,
        )

    def add_item(self, product, quantity, selected_color=None, selected_size=None) -> CartItem:
        """Add ``quantity`` of ``product``; the line's cumulative quantity may not exceed stock."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if not product.in_stock:
            raise InsufficientStock(str(product.id), quantity, product.stock_count, name=product.name)

        line = self._matching_line(product.id, selected_color, selected_size)
        wanted = quantity + (line.quantity if line else 0)
        if wanted > product.stock_count:
            raise InsufficientStock(str(product.id), wanted, product.stock_count, name=product.name)

        now = utcnow()
        if line:
            line.quantity = wanted
        else:
            line = CartItem(
                product_id=product.id,
                quantity=quantity,
                selected_color=selected_color,
                selected_size=selected_size,
                added_at=now,
            )
            self.add_items(line)
        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=self.id,
                user_id=self.user_id,
                item_id=line.id,
                product_id=product.id,
                quantity=quantity,
                selected_color=selected_color,
                selected_size=selected_size,
            )
        )
        return line

    def change_quantity(self, item_id, quantity, product) -> CartItem | None:
        """Set a line's quantity; zero or less removes the line and returns None."""
        line = self.find_item(item_id)
        if quantity <= 0:
            self.remove_item(item_id)
            return None
        if quantity > product.stock_count:
            raise InsufficientStock(str(product.id), quantity, product.stock_count, name=product.name)

        previous = line.quantity
        line.quantity = quantity
        self.updated_at = utcnow()
        self.raise_(
            CartItemQuantityChanged(
                cart_id=self.id,
                item_id=line.id,
                previous_quantity=previous,
                new_quantity=quantity,
            )
        )
        return line

    def remove_item(self, item_id):
        line = self.find_item(item_id)
        self.remove_items(line)
        self.updated_at = utcnow()
        self.raise_(CartItemRemoved(cart_id=self.id, item_id=line.id, product_id=line.product_id))

    def clear(self):
        if not self.items:
            return
        self.remove_items(list(self.items))
        self.updated_at = utcnow()
        self.raise_(CartCleared(cart_id=self.id, user_id=self.user_id))
