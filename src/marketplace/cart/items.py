"""Cart item management: commands, handler and caller-facing entry points.

Every command is scoped to the caller's own cart via `user_id`; there is no way
to address somebody else's cart.
"""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from marketplace.cart.cart import Cart
from marketplace.domain import marketplace
from marketplace.product.product import Product
from marketplace.shared.identity import require_identity


@marketplace.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(min_value=1, default=1)


@marketplace.command(part_of="Cart")
class UpdateCartQuantity:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)  # zero or less removes the item


@marketplace.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@marketplace.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)


@marketplace.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        # Fails with ObjectNotFoundError for unknown products
        current_domain.repository_for(Product).get(command.product_id)

        repo = current_domain.repository_for(Cart)
        cart = repo.for_user_or_new(command.user_id)
        cart.add_item(product_id=command.product_id, quantity=command.quantity or 1)
        repo.add(cart)
        return str(cart.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user_or_new(command.user_id)
        cart.update_item_quantity(product_id=command.product_id, new_quantity=command.quantity)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id)
        if cart is None:
            return
        cart.remove_item(product_id=command.product_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id)
        if cart is None:
            return
        cart.clear()
        repo.add(cart)


def add_to_cart(identity, product_id, quantity=1):
    identity = require_identity(identity)
    return current_domain.process(
        AddToCart(user_id=identity.user_id, product_id=product_id, quantity=quantity),
        asynchronous=False,
    )


def update_cart_quantity(identity, product_id, quantity):
    identity = require_identity(identity)
    current_domain.process(
        UpdateCartQuantity(user_id=identity.user_id, product_id=product_id, quantity=quantity),
        asynchronous=False,
    )


def remove_from_cart(identity, product_id):
    identity = require_identity(identity)
    current_domain.process(
        RemoveFromCart(user_id=identity.user_id, product_id=product_id),
        asynchronous=False,
    )


def clear_cart(identity):
    identity = require_identity(identity)
    current_domain.process(ClearCart(user_id=identity.user_id), asynchronous=False)


def cart_for(identity):
    """The caller's cart lines as `{product_id, quantity}` dicts (empty if no cart yet)."""
    identity = require_identity(identity)
    cart = current_domain.repository_for(Cart).for_user(identity.user_id)
    return cart.as_requests() if cart else []
