"""Error taxonomy for marketplace operations.

Field-level input problems use Protean's `ValidationError` and missing records
use `ObjectNotFoundError`, as everywhere else in the domain. The errors below
carry the checkout and authorization failures callers must tell apart.
"""

from protean.exceptions import ValidationError


class MarketplaceError(Exception):
    """Base class for errors raised by marketplace workflows."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotAuthenticated(MarketplaceError):
    """The operation needs a signed-in identity."""

    def __init__(self, message: str = "Please log in to continue"):
        super().__init__(message)


class Unauthorized(MarketplaceError):
    """The acting identity does not own the resource being changed."""


class InsufficientStock(MarketplaceError):
    """A product has fewer units available than were requested."""

    def __init__(self, product_id: str, product_name: str, available: int, requested: int):
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(f"Insufficient stock for {product_name}. Available: {available}, Requested: {requested}")


class PersistenceFailure(MarketplaceError):
    """The underlying store rejected or failed a write."""


class StockConflict(PersistenceFailure):
    """Stock kept changing underneath a conditional decrement until it gave up."""


class InvalidStatusTransition(ValidationError):
    """An order status change that the lifecycle does not allow."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__({"status": [f"Cannot transition from {current} to {target}"]})
