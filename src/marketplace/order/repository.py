"""Repository for the Order aggregate: buyer and seller order views."""

import json

from marketplace.domain import marketplace
from marketplace.order.order import Order
from marketplace.shared.paging import every


@marketplace.repository(part_of=Order)
class OrderRepository:
    def placed_by(self, buyer_id) -> list[Order]:
        """Orders placed by `buyer_id`, newest first."""
        query = self._dao.query.filter(buyer_id=str(buyer_id)).order_by("-order_date")
        return list(every(query))

    def received_by(self, seller_id) -> list[Order]:
        """Orders with at least one line item sold by `seller_id`, newest first."""
        # `seller_ids` is a JSON list, so the quoted id only matches a whole entry.
        query = self._dao.query.filter(seller_ids__contains=json.dumps(str(seller_id))).order_by("-order_date")
        return [order for order in every(query) if order.sold_by(seller_id)]
