"""Product aggregate: a seller's listing and its authoritative stock count.

`quantity` is the only field mutated by unrelated actors (many buyers checking
out against the same listing). Checkout takes stock through the repository's
`decrement_stock`, a conditional update guarded by `remaining_after`.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from marketplace.domain import marketplace
from marketplace.exceptions import InsufficientStock
from marketplace.product.events import (
    ProductDelisted,
    ProductListed,
    ProductPriceChanged,
)


class ProductCategory(Enum):
    FERTILIZERS = "fertilizers"
    PESTICIDES = "pesticides"
    CATTLE_FEED = "cow-food"


@marketplace.aggregate
class Product:
    name = String(required=True, max_length=255)
    description = Text()
    category = String(required=True, choices=ProductCategory)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=0)
    seller = String(max_length=255)
    seller_id = Identifier(required=True)
    rating = Float(default=0.0, min_value=0.0, max_value=5.0)
    image_url = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(
        cls,
        seller_id,
        seller,
        name,
        category,
        price,
        quantity,
        description=None,
        rating=0.0,
        image_url=None,
    ):
        """Create a new listing owned by `seller_id`."""
        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            category=category,
            price=price,
            quantity=quantity,
            seller=seller,
            seller_id=seller_id,
            rating=rating or 0.0,
            image_url=image_url,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductListed(
                product_id=str(product.id),
                seller_id=str(seller_id),
                name=name,
                category=product.category,
                price=price,
                quantity=quantity,
                listed_at=now,
            )
        )
        return product

    def is_owned_by(self, user_id):
        return str(self.seller_id) == str(user_id)

    def remaining_after(self, amount):
        """The quantity left after taking `amount` units, refusing to go below zero.

        This is the guard only; the write itself is the repository's
        conditional update in `ProductRepository.decrement_stock`.
        """
        if amount is None or amount < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if amount > self.quantity:
            raise InsufficientStock(
                product_id=str(self.id),
                product_name=self.name,
                available=self.quantity,
                requested=amount,
            )
        return self.quantity - amount

    def change_price(self, new_price):
        if new_price is None or new_price < 0:
            raise ValidationError({"price": ["Price cannot be negative"]})

        previous = self.price
        self.price = new_price
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductPriceChanged(
                product_id=str(self.id),
                previous_price=previous,
                new_price=new_price,
            )
        )

    def delist(self):
        self.raise_(
            ProductDelisted(
                product_id=str(self.id),
                seller_id=str(self.seller_id),
                delisted_at=datetime.now(UTC),
            )
        )
