"""Order aggregate: a placed order with snapshot line items.

Line items copy the product's name, price and seller at checkout time, so
editing or deleting a product later never changes a historical order. After
creation only `status` changes, and only along the lifecycle below.

State Machine:
    PENDING → CONFIRMED → DELIVERED
    PENDING | CONFIRMED → CANCELLED
    DELIVERED and CANCELLED are terminal.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from marketplace.domain import marketplace
from marketplace.exceptions import InvalidStatusTransition
from marketplace.order.events import OrderPlaced, OrderStatusChanged


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    CASH = "cash"
    CARD = "card"
    UPI = "upi"
    BANK = "bank"


DEFAULT_DELIVERY_TIME = "Within 1 hour"

# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


def order_total(items_data):
    """Sum of `price * quantity` over line item dicts, rounded to cents."""
    return round(sum(item["price"] * item["quantity"] for item in items_data), 2)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@marketplace.entity(part_of="Order")
class OrderLineItem:
    """One purchased product, frozen as it was at checkout."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    seller = String(max_length=255)
    seller_id = Identifier(required=True)

    @property
    def subtotal(self):
        return self.price * self.quantity


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@marketplace.aggregate
class Order:
    buyer_id = Identifier(required=True)
    buyer_name = String(max_length=255)
    buyer_email = String(max_length=254)
    items = HasMany(OrderLineItem)
    total_amount = Float(required=True, min_value=0.0)
    payment_method = String(required=True, choices=PaymentMethod)
    delivery_address = Text(required=True)
    delivery_time = String(max_length=100, default=DEFAULT_DELIVERY_TIME)
    order_date = DateTime(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    seller_ids = Text()  # JSON: distinct seller ids across line items

    @invariant.post
    def total_must_match_line_items(self):
        if not self.items:
            return
        if round(self.total_amount, 2) != order_total([{"price": i.price, "quantity": i.quantity} for i in self.items]):
            raise ValidationError({"total_amount": ["Total amount must equal the sum of line item subtotals"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        buyer_id,
        buyer_name,
        buyer_email,
        items_data,
        payment_method,
        delivery_address,
        delivery_time=None,
    ):
        """Create a pending order from line item snapshots.

        Args:
            items_data: List of dicts with product_id, product_name, quantity,
                        price, seller, seller_id.
        """
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one line item"]})

        now = datetime.now(UTC)
        total_amount = order_total(items_data)
        seller_ids = list(dict.fromkeys(str(item["seller_id"]) for item in items_data))

        order = cls(
            buyer_id=buyer_id,
            buyer_name=buyer_name,
            buyer_email=buyer_email,
            items=[OrderLineItem(**item) for item in items_data],
            total_amount=total_amount,
            payment_method=payment_method,
            delivery_address=delivery_address,
            delivery_time=delivery_time or DEFAULT_DELIVERY_TIME,
            order_date=now,
            status=OrderStatus.PENDING.value,
            seller_ids=json.dumps(seller_ids),
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                buyer_id=str(buyer_id),
                items=json.dumps(items_data),
                item_count=len(items_data),
                total_amount=total_amount,
                payment_method=payment_method,
                order_date=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def sold_by(self, seller_id):
        """True if at least one line item belongs to `seller_id`."""
        return any(str(item.seller_id) == str(seller_id) for item in self.items)

    def items_sold_by(self, seller_id):
        return [item for item in self.items if str(item.seller_id) == str(seller_id)]

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidStatusTransition(current.value, target_status.value)

    def change_status(self, new_status, changed_by):
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status: {new_status}"]}) from None

        self._assert_can_transition(target)

        previous = self.status
        self.status = target.value

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous,
                new_status=target.value,
                changed_by=str(changed_by),
                changed_at=datetime.now(UTC),
            )
        )
