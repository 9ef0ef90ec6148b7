"""Persists address snapshots for orders and removes them when a placement rolls back."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.address.address import Address, AddressSnapshot, AddressType
from storefront.shared.errors import NotFound


def record_address(snapshot: AddressSnapshot, user_id, address_type: AddressType, order_id=None) -> Address:
    address = Address.from_snapshot(snapshot, user_id=user_id, address_type=address_type, order_id=order_id)
    current_domain.repository_for(Address).add(address)
    return address


def get_address(address_id) -> Address:
    try:
        return current_domain.repository_for(Address).get(address_id)
    except ObjectNotFoundError:
        raise NotFound({"address_id": [f"Address {address_id} not found"]}) from None


def discard_address(address_id) -> None:
    repo = current_domain.repository_for(Address)
    repo._dao.delete(get_address(address_id))


def addresses_for_order(order_id) -> list[Address]:
    repo = current_domain.repository_for(Address)
    return repo._dao.query.filter(order_id=str(order_id)).all().items
