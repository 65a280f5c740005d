"""Order placement: the checkout workflow.

Flow (one `PlaceOrder` command, one unit of work):
    1. Validate stock for every requested line (fails before any write).
    2. Snapshot each product into an order line item and build the pending order.
    3. Compare-and-decrement each product's stock.
    4. Clear the buyer's cart.
    5. Persist the order.

All writes share the handler's UnitOfWork, so a failure at any step leaves no
order header, no partial decrement and an untouched cart. Step 3 is the only
place that closes the race with other checkouts: the validation pass only
avoids wasted work.
"""

import json

import structlog
from protean import handle
from protean.exceptions import DatabaseError, ExpectedVersionError, TransactionError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.cart.cart import Cart
from marketplace.domain import marketplace
from marketplace.exceptions import InsufficientStock, PersistenceFailure, StockConflict
from marketplace.order.order import Order, PaymentMethod
from marketplace.product.product import Product
from marketplace.shared.identity import require_identity
from marketplace.utils.logging import log_context

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class PlaceOrder:
    buyer_id = Identifier(required=True)
    buyer_name = String(max_length=255)
    buyer_email = String(max_length=254)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    payment_method = String(required=True, choices=PaymentMethod)
    delivery_address = Text(required=True)
    delivery_time = String(max_length=100)


@marketplace.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        requests = json.loads(command.items) if isinstance(command.items, str) else command.items
        if not requests:
            raise ValidationError({"items": ["Cannot place an order without items"]})

        product_repo = current_domain.repository_for(Product)

        # Validation pass: nothing is written if any line is short
        products = {}
        for line in requests:
            product = product_repo.get(line["product_id"])
            if line["quantity"] > product.quantity:
                logger.info(
                    "Checkout rejected for insufficient stock",
                    buyer_id=str(command.buyer_id),
                    product_id=str(product.id),
                    available=product.quantity,
                    requested=line["quantity"],
                )
                raise InsufficientStock(
                    product_id=str(product.id),
                    product_name=product.name,
                    available=product.quantity,
                    requested=line["quantity"],
                )
            products[str(product.id)] = product

        items_data = [_snapshot(products[str(line["product_id"])], line["quantity"]) for line in requests]

        order = Order.place(
            buyer_id=command.buyer_id,
            buyer_name=command.buyer_name,
            buyer_email=command.buyer_email,
            items_data=items_data,
            payment_method=command.payment_method,
            delivery_address=command.delivery_address,
            delivery_time=command.delivery_time,
        )

        for line in requests:
            product_repo.decrement_stock(line["product_id"], line["quantity"])

        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.for_user(command.buyer_id)
        if cart is not None:
            cart.clear()
            cart_repo.add(cart)

        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            buyer_id=str(command.buyer_id),
            item_count=len(items_data),
            total_amount=order.total_amount,
        )
        return str(order.id)


def _snapshot(product, quantity):
    """Freeze the product details an order line keeps regardless of later edits."""
    return {
        "product_id": str(product.id),
        "product_name": product.name,
        "quantity": quantity,
        "price": product.price,
        "seller": product.seller,
        "seller_id": str(product.seller_id),
    }


def _normalize(line_items):
    """Merge repeated products and coerce quantities; checkout works per product."""
    merged = {}
    for line in line_items:
        product_id = str(line["product_id"])
        quantity = int(line["quantity"])
        if quantity < 1:
            raise ValidationError({"items": [f"Quantity for {product_id} must be at least 1"]})
        merged[product_id] = merged.get(product_id, 0) + quantity
    return [{"product_id": product_id, "quantity": quantity} for product_id, quantity in merged.items()]


def place_order(identity, line_items, payment_method, delivery_address, delivery_time=None):
    """Check out `line_items` for the signed-in buyer and return the placed `Order`.

    Raises:
        NotAuthenticated: nobody is signed in.
        InsufficientStock: a product has fewer units than requested.
        PersistenceFailure: the store failed a write.
        StockConflict: concurrent checkouts kept invalidating this one.
        ValidationError / ObjectNotFoundError: bad input or an unknown product.
        Any other error propagates unchanged.
    """
    identity = require_identity(identity)
    if not line_items:
        raise ValidationError({"items": ["Cannot place an order without items"]})

    command = PlaceOrder(
        buyer_id=identity.user_id,
        buyer_name=identity.name,
        buyer_email=identity.email,
        items=json.dumps(_normalize(line_items)),
        payment_method=payment_method,
        delivery_address=delivery_address,
        delivery_time=delivery_time,
    )

    with log_context(buyer_id=identity.user_id):
        try:
            order_id = current_domain.process(command, asynchronous=False)
        except ExpectedVersionError as exc:
            logger.warning("Checkout kept colliding with other checkouts", error=str(exc))
            raise StockConflict("Stock changed while placing the order; please try again") from exc
        except (DatabaseError, TransactionError) as exc:
            logger.error("Checkout failed in the store", error=str(exc))
            raise PersistenceFailure(f"Failed to place order: {exc}") from exc

    return current_domain.repository_for(Order).get(order_id)


def checkout_cart(identity, payment_method, delivery_address, delivery_time=None):
    """Place an order for everything in the caller's cart."""
    identity = require_identity(identity)
    cart = current_domain.repository_for(Cart).for_user(identity.user_id)
    line_items = cart.as_requests() if cart else []
    return place_order(identity, line_items, payment_method, delivery_address, delivery_time)
