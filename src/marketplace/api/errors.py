"""HTTP status mapping for marketplace workflow errors.

Protean's own `ValidationError` and `ObjectNotFoundError` are mapped by
`protean.integrations.fastapi.register_exception_handlers`; this module covers
the errors defined in `marketplace.exceptions`.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from marketplace.exceptions import (
    InsufficientStock,
    MarketplaceError,
    NotAuthenticated,
    PersistenceFailure,
    Unauthorized,
)

logger = structlog.get_logger(__name__)

_STATUS_CODES = {
    NotAuthenticated: 401,
    Unauthorized: 403,
    InsufficientStock: 409,
    PersistenceFailure: 503,
}


def status_code_for(exc: MarketplaceError) -> int:
    for error_class in type(exc).__mro__:
        if error_class in _STATUS_CODES:
            return _STATUS_CODES[error_class]
    return 500


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    status_code = status_code_for(exc)
    content = {"error": exc.message}
    if isinstance(exc, InsufficientStock):
        content.update(
            product_id=exc.product_id,
            product_name=exc.product_name,
            available=exc.available,
            requested=exc.requested,
        )

    if status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=status_code, content=content)


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's handlers plus the marketplace error mapping on `app`."""
    register_exception_handlers(app)
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
