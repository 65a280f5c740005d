"""Repository for the Product aggregate, including the stock decrement primitive."""

import structlog
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.exceptions import StockConflict
from marketplace.product.product import Product
from marketplace.shared.paging import every

logger = structlog.get_logger(__name__)

DEFAULT_CONFLICT_RETRIES = 3


def _conflict_retries():
    custom = current_domain.config.get("custom", {}) or {}
    return int(custom.get("STOCK_CONFLICT_RETRIES", DEFAULT_CONFLICT_RETRIES))


@marketplace.repository(part_of=Product)
class ProductRepository:
    def decrement_stock(self, product_id, amount) -> int:
        """Take `amount` units of `product_id` out of stock and return the new quantity.

        The write is one conditional update, `quantity = q - amount WHERE
        quantity = q`, issued against the quantity the guard just checked. If
        another checkout got there first the update matches no row; the product
        is re-read and the guard runs again, so a lost race ends in
        `InsufficientStock` or a retry, never in negative stock.

        `QuerySet.update` also records the row's version, so a checkout that
        commits the same product first fails this unit of work at commit with
        `ExpectedVersionError`, which Protean retries from a fresh read.
        """
        attempts = _conflict_retries() + 1
        for attempt in range(1, attempts + 1):
            product = self.get(product_id)
            remaining = product.remaining_after(amount)

            updated = self._dao.query.filter(id=str(product.id), quantity=product.quantity).update(
                quantity=remaining
            )
            if updated:
                return remaining

            logger.info(
                "Stock changed before decrement, retrying",
                product_id=str(product_id),
                attempt=attempt,
            )

        raise StockConflict(f"Stock for product {product_id} kept changing; please try again")

    def newest_first(self, category=None) -> list[Product]:
        query = self._dao.query
        if category:
            query = query.filter(category=category)
        return list(every(query.order_by("-created_at")))

    def remove(self, product) -> None:
        """Delete a listing, recording the delisting event first."""
        product.delist()
        self.add(product)
        self._dao.delete(product)
