"""Order status management — command and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    store_id: Identifier(required=True)
    order_id: Identifier(required=True)
    status: String(required=True, max_length=20)


@storefront.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)

        # Another store's order and a missing order look the same to the caller
        order = repo.find_in_store(command.store_id, command.order_id)
        if order is None:
            raise ObjectNotFoundError("Pedido no encontrado")

        order.change_status(command.status)
        repo.add(order)
        return str(order.id)
