"""Order-owned address records and the snapshot embedded in each order."""

from enum import Enum

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront
from storefront.shared.clock import utcnow


class AddressType(Enum):
    SHIPPING = "Shipping"
    BILLING = "Billing"


@storefront.value_object
class AddressSnapshot:
    """A postal address frozen at order time.

    Orders embed their own copy, so later edits to a user's saved addresses
    never change where an order went.
    """

    first_name: String(required=True, max_length=100)
    last_name: String(required=True, max_length=100)
    street: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    state: String(required=True, max_length=100)
    zip_code: String(required=True, max_length=20)
    country: String(required=True, max_length=100)
    phone: String(required=True, max_length=30)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@storefront.aggregate
class Address:
    user_id: Identifier(required=True)
    order_id: Identifier()
    address_type: String(required=True, choices=AddressType)
    first_name: String(required=True, max_length=100)
    last_name: String(required=True, max_length=100)
    street: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    state: String(required=True, max_length=100)
    zip_code: String(required=True, max_length=20)
    country: String(required=True, max_length=100)
    phone: String(required=True, max_length=30)
    created_at: DateTime()

    @classmethod
    def from_snapshot(cls, snapshot: AddressSnapshot, user_id, address_type: AddressType, order_id=None):
        return cls(
            user_id=user_id,
            order_id=order_id,
            address_type=address_type.value,
            first_name=snapshot.first_name,
            last_name=snapshot.last_name,
            street=snapshot.street,
            city=snapshot.city,
            state=snapshot.state,
            zip_code=snapshot.zip_code,
            country=snapshot.country,
            phone=snapshot.phone,
            created_at=utcnow(),
        )

    def to_snapshot(self) -> AddressSnapshot:
        return AddressSnapshot(
            first_name=self.first_name,
            last_name=self.last_name,
            street=self.street,
            city=self.city,
            state=self.state,
            zip_code=self.zip_code,
            country=self.country,
            phone=self.phone,
        )
