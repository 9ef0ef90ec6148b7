"""Admin order updates: command and handler."""

from protean import handle
from protean.fields import Date, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.order.queries import get_order
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrder:
    order_id: Identifier(required=True)
    status: String(max_length=20)
    tracking_number: String(max_length=100)
    estimated_delivery: Date()
    notes: Text()


@storefront.command_handler(part_of=Order)
class OrderAdministrationHandler:
    @handle(UpdateOrder)
    def update_order(self, command):
        order = get_order(command.order_id)

        changed = False
        if command.status:
            changed = order.change_status(command.status)
        order.update_details(
            tracking_number=command.tracking_number,
            estimated_delivery=command.estimated_delivery,
            notes=command.notes,
        )

        current_domain.repository_for(Order).add(order)
        logger.info(
            "order_updated",
            order_id=order.id,
            order_number=order.order_number,
            status=order.status,
            status_changed=changed,
        )
