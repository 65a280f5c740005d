"""Marketplace bounded context: agricultural product listings, carts and orders.

Sellers list stock, buyers fill a cart and check out. The checkout workflow
validates stock, records the order with snapshot line items, decrements
inventory and clears the cart as one unit of work.
"""

from protean.domain import Domain

from marketplace.utils.logging import configure_logging

configure_logging()

# Domain Composition Root
marketplace = Domain(name="marketplace")
