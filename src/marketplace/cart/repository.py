"""Repository for the Cart aggregate."""

from marketplace.cart.cart import Cart
from marketplace.domain import marketplace
from marketplace.shared.paging import every


@marketplace.repository(part_of=Cart)
class CartRepository:
    def for_user(self, user_id) -> Cart | None:
        """The user's cart, or None if they have never added anything."""
        return self._dao.query.filter(user_id=str(user_id)).all().first

    def for_user_or_new(self, user_id) -> Cart:
        return self.for_user(user_id) or Cart.create(user_id=str(user_id))

    def containing(self, product_id) -> list[Cart]:
        # Items are child entities, so the product match happens in Python.
        return [cart for cart in every(self._dao.query) if cart.item_for(product_id) is not None]
