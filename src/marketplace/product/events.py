"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Product")
class ProductListed:
    """A seller put a new product up for sale."""

    __version__ = 1

    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    name = String(required=True)
    category = String(required=True)
    price = Float(required=True)
    quantity = Integer(required=True)
    listed_at = DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductPriceChanged:
    __version__ = 1

    product_id = Identifier(required=True)
    previous_price = Float(required=True)
    new_price = Float(required=True)


@marketplace.event(part_of="Product")
class ProductDelisted:
    """The owning seller removed the product from sale."""

    __version__ = 1

    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    delisted_at = DateTime(required=True)
