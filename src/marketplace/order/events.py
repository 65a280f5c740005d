"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """A buyer checked out; line items and total are fixed from here on."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of line item snapshots
    item_count = Integer(required=True)
    total_amount = Float(required=True)
    payment_method = String(required=True)
    order_date = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderStatusChanged:
    """A seller moved the order along its lifecycle."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_by = Identifier(required=True)
    changed_at = DateTime(required=True)
