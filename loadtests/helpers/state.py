"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state; nothing is shared across
users. State tracks IDs returned by creation endpoints so follow-up
operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class SellerState:
    """Tracks a simulated seller's listings and orders."""

    headers: dict = field(default_factory=dict)
    product_ids: list[str] = field(default_factory=list)
    order_ids: list[str] = field(default_factory=list)


@dataclass
class BuyerState:
    """Tracks a simulated buyer's cart and placed orders."""

    headers: dict = field(default_factory=dict)
    cart_product_ids: list[str] = field(default_factory=list)
    order_ids: list[str] = field(default_factory=list)
