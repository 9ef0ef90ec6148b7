"""Coupon administration: commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.coupon.coupon import Coupon
from storefront.coupon.store import find_by_code
from storefront.domain import storefront
from storefront.shared.errors import Conflict, NotFound


@storefront.command(part_of="Coupon")
class CreateCoupon:
    code: String(required=True, max_length=50)
    description: Text()
    discount_type: String(required=True, max_length=20)
    discount_value: Float(required=True, min_value=0.0)
    minimum_amount: Float(min_value=0.0)
    maximum_discount: Float(min_value=0.0)
    usage_limit: Integer(min_value=1)
    valid_from: DateTime(required=True)
    valid_until: DateTime(required=True)
    is_active: Boolean(default=True)


@storefront.command(part_of="Coupon")
class UpdateCoupon:
    coupon_id: Identifier(required=True)
    code: String(max_length=50)
    description: Text()
    discount_type: String(max_length=20)
    discount_value: Float(min_value=0.0)
    minimum_amount: Float(min_value=0.0)
    maximum_discount: Float(min_value=0.0)
    usage_limit: Integer(min_value=1)
    valid_from: DateTime()
    valid_until: DateTime()
    is_active: Boolean()


@storefront.command(part_of="Coupon")
class DeleteCoupon:
    coupon_id: Identifier(required=True)


def _load(coupon_id) -> Coupon:
    try:
        return current_domain.repository_for(Coupon).get(coupon_id)
    except ObjectNotFoundError:
        raise NotFound({"coupon_id": [f"Coupon {coupon_id} not found"]}) from None


@storefront.command_handler(part_of=Coupon)
class CouponManagementHandler:
    @handle(CreateCoupon)
    def create_coupon(self, command):
        if find_by_code(command.code) is not None:
            raise Conflict({"code": [f"Coupon code {command.code.upper()} already exists"]})

        coupon = Coupon.create(
            code=command.code,
            discount_type=command.discount_type.lower(),
            discount_value=command.discount_value,
            valid_from=command.valid_from,
            valid_until=command.valid_until,
            description=command.description,
            minimum_amount=command.minimum_amount,
            maximum_discount=command.maximum_discount,
            usage_limit=command.usage_limit,
            is_active=command.is_active if command.is_active is not None else True,
        )
        current_domain.repository_for(Coupon).add(coupon)
        return str(coupon.id)

    @handle(UpdateCoupon)
    def update_coupon(self, command):
        coupon = _load(command.coupon_id)

        if command.code:
            clash = find_by_code(command.code)
            if clash is not None and clash.id != coupon.id:
                raise Conflict({"code": [f"Coupon code {command.code.upper()} already exists"]})

        coupon.revise(
            code=command.code,
            description=command.description,
            discount_type=command.discount_type.lower() if command.discount_type else None,
            discount_value=command.discount_value,
            minimum_amount=command.minimum_amount,
            maximum_discount=command.maximum_discount,
            usage_limit=command.usage_limit,
            valid_from=command.valid_from,
            valid_until=command.valid_until,
            is_active=command.is_active,
        )
        current_domain.repository_for(Coupon).add(coupon)

    @handle(DeleteCoupon)
    def delete_coupon(self, command):
        coupon = _load(command.coupon_id)
        current_domain.repository_for(Coupon)._dao.delete(coupon)
