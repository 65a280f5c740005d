"""The authenticated caller, handed to every workflow entry point.

Authentication itself happens upstream; by the time a request reaches the
marketplace the caller is either an `Identity` or `None`.
"""

from enum import Enum

from protean.fields import String

from marketplace.domain import marketplace
from marketplace.exceptions import NotAuthenticated


class Role(Enum):
    BUYER = "buyer"
    SELLER = "seller"


@marketplace.value_object
class Identity:
    """Stable identity plus the display details captured on orders and listings."""

    user_id: String(required=True, max_length=255)
    name: String(max_length=255, default="")
    email: String(max_length=254, default="")
    role: String(choices=Role, default=Role.BUYER.value)


def require_identity(identity):
    """Return `identity`, or raise `NotAuthenticated` when nobody is signed in."""
    if identity is None or not identity.user_id:
        raise NotAuthenticated()
    return identity
