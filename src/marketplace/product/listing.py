"""Product listing: commands, handler and entry points for sellers.

Listings are owned by `seller_id`. Delisting a product also removes it from
every cart in the same unit of work; placed orders keep their snapshots.
"""

import structlog
from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from marketplace.cart.cart import Cart
from marketplace.domain import marketplace
from marketplace.exceptions import Unauthorized
from marketplace.product.product import Product, ProductCategory
from marketplace.shared.identity import Role, require_identity

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Product")
class AddProduct:
    seller_id = Identifier(required=True)
    seller = String(max_length=255)
    name = String(required=True, max_length=255)
    description = Text()
    category = String(required=True, choices=ProductCategory)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=0)
    rating = Float(default=0.0)
    image_url = String(max_length=500)


@marketplace.command(part_of="Product")
class DeleteProduct:
    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)


@marketplace.command(part_of="Product")
class ChangeProductPrice:
    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    price = Float(required=True, min_value=0.0)


@marketplace.command_handler(part_of=Product)
class ProductListingHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.create(
            seller_id=command.seller_id,
            seller=command.seller,
            name=command.name,
            description=command.description,
            category=command.category,
            price=command.price,
            quantity=command.quantity,
            rating=command.rating,
            image_url=command.image_url,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        if not product.is_owned_by(command.seller_id):
            raise Unauthorized("Only the seller who listed a product can delete it")

        cart_repo = current_domain.repository_for(Cart)
        carts = cart_repo.containing(command.product_id)
        for cart in carts:
            cart.remove_item(command.product_id)
            cart_repo.add(cart)

        repo.remove(product)

        logger.info(
            "Product delisted",
            product_id=str(command.product_id),
            seller_id=str(command.seller_id),
            carts_purged=len(carts),
        )

    @handle(ChangeProductPrice)
    def change_price(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        if not product.is_owned_by(command.seller_id):
            raise Unauthorized("Only the seller who listed a product can change its price")

        product.change_price(command.price)
        repo.add(product)


def add_product(
    identity,
    name,
    category,
    price,
    quantity,
    description=None,
    rating=0.0,
    image_url=None,
):
    identity = require_identity(identity)
    if identity.role != Role.SELLER.value:
        raise Unauthorized("Only sellers can list products")

    product_id = current_domain.process(
        AddProduct(
            seller_id=identity.user_id,
            seller=identity.name,
            name=name,
            description=description,
            category=category,
            price=price,
            quantity=quantity,
            rating=rating,
            image_url=image_url,
        ),
        asynchronous=False,
    )
    return current_domain.repository_for(Product).get(product_id)


def delete_product(identity, product_id):
    identity = require_identity(identity)
    current_domain.process(
        DeleteProduct(product_id=product_id, seller_id=identity.user_id),
        asynchronous=False,
    )


def change_product_price(identity, product_id, price):
    """Reprice a listing. Orders already placed keep the price they were placed at."""
    identity = require_identity(identity)
    current_domain.process(
        ChangeProductPrice(product_id=product_id, seller_id=identity.user_id, price=price),
        asynchronous=False,
    )
    return current_domain.repository_for(Product).get(product_id)


def list_products(category=None):
    """Products newest first, optionally narrowed to one category."""
    return current_domain.repository_for(Product).newest_first(category=category)
