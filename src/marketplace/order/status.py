"""Order status updates: command, handler and entry point.

Only a seller with at least one line item in the order may move it along its
lifecycle. Ownership is decided by `seller_id`; display names never authorize.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.exceptions import Unauthorized
from marketplace.order.order import Order
from marketplace.shared.identity import require_identity
from marketplace.utils.logging import log_context

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    seller_id = Identifier(required=True)


@marketplace.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if not order.sold_by(command.seller_id):
            logger.warning("Rejected status change by non-owning seller")
            raise Unauthorized("Only a seller with products in this order can change its status")

        previous = order.status
        order.change_status(command.status, changed_by=command.seller_id)
        repo.add(order)

        logger.info("Order status changed", previous_status=previous, new_status=order.status)


def update_order_status(identity, order_id, status):
    identity = require_identity(identity)
    with log_context(order_id=order_id, seller_id=identity.user_id):
        current_domain.process(
            UpdateOrderStatus(order_id=order_id, status=status, seller_id=identity.user_id),
            asynchronous=False,
        )
