"""Log context bound around marketplace workflows."""

from unittest.mock import patch

import structlog
from marketplace.checkout import placement
from marketplace.checkout.placement import place_order
from marketplace.order import status
from marketplace.order.status import update_order_status
from marketplace.utils.logging import SERVICE, add_context, add_service, clear_context, log_context


def _context_when_called(seen):
    def _record(*_args, **_kwargs):
        seen.update(structlog.contextvars.get_contextvars())

    return _record


class TestLogContext:
    def test_log_context_binds_only_inside_block(self):
        with log_context(order_id="ord-1"):
            assert structlog.contextvars.get_contextvars()["order_id"] == "ord-1"
        assert "order_id" not in structlog.contextvars.get_contextvars()

    def test_add_context_stringifies_and_clears(self):
        add_context(user_id=42)
        assert structlog.contextvars.get_contextvars()["user_id"] == "42"
        clear_context()
        assert structlog.contextvars.get_contextvars() == {}

    def test_service_is_stamped(self):
        assert add_service(None, "info", {"event": "x"})["service"] == SERVICE


class TestWorkflowContext:
    def test_checkout_events_carry_buyer(self, buyer, list_product):
        product = list_product()
        seen = {}

        with patch.object(placement.logger, "info", side_effect=_context_when_called(seen)):
            place_order(buyer, [{"product_id": product.id, "quantity": 1}], "cash", "Nashik")

        assert seen["buyer_id"] == buyer.user_id
        assert "buyer_id" not in structlog.contextvars.get_contextvars()

    def test_status_change_events_carry_order_and_seller(self, seller, buyer, list_product):
        product = list_product()
        order = place_order(buyer, [{"product_id": product.id, "quantity": 1}], "cash", "Nashik")
        seen = {}

        with patch.object(status.logger, "info", side_effect=_context_when_called(seen)):
            update_order_status(seller, order.id, "confirmed")

        assert seen["order_id"] == str(order.id)
        assert seen["seller_id"] == seller.user_id
