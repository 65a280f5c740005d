"""Response error extraction for load test observability.

Turns Agrimart API error bodies into one-line messages for Locust failures:

- Pydantic validation (422): {"detail": [{"loc": [...], "msg": "..."}]}
- Domain errors: {"error": "msg"} or {"error": {"field": ["msg"]}}, with
  `available`/`requested` added for insufficient stock (409)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def _field_errors(errors: dict) -> str:
    return " | ".join(f"{name}: {', '.join(map(str, msgs)) if isinstance(msgs, list) else msgs}" for name, msgs in errors.items())


def extract_error_detail(response: Response) -> str:
    """A compact, human-readable summary of an API error response."""
    try:
        body = response.json()
    except ValueError:
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if isinstance(body.get("detail"), list):
        parts = []
        for err in body["detail"]:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)

    if "error" in body:
        error = body["error"]
        if isinstance(error, dict):
            return _field_errors(error)
        if "available" in body:
            return f"{error} (product {body.get('product_id')})"
        return str(error)

    return str(body)[:300]


def is_stock_conflict(response: Response) -> bool:
    """True for the 409 a checkout gets when another buyer took the stock first."""
    return response.status_code == 409
