"""Read-side entry points for the buyer's and seller's order views."""

from protean.utils.globals import current_domain

from marketplace.order.order import Order
from marketplace.shared.identity import require_identity


def orders_placed_by(identity):
    identity = require_identity(identity)
    return current_domain.repository_for(Order).placed_by(identity.user_id)


def orders_received_by(identity):
    identity = require_identity(identity)
    return current_domain.repository_for(Order).received_by(identity.user_id)


def orders_visible_to(identity):
    """Orders the caller bought or sold into, each once, newest first."""
    seen = {}
    for order in [*orders_placed_by(identity), *orders_received_by(identity)]:
        seen.setdefault(str(order.id), order)
    return sorted(seen.values(), key=lambda order: order.order_date, reverse=True)
