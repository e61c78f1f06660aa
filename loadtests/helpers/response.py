"""Response error extraction for load test observability.

Parses Dispatch API error responses into human-readable messages.
Handles two response shapes:

- Pydantic validation (422): {"detail": [{"loc": [...], "msg": "...", "type": "..."}]}
- Domain errors (400/404/409/422/503):
  {"error": "InvalidTransition", "errors": {"field": ["msg"]}, "retryable": false}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    """
    try:
        body = response.json()
    except ValueError:
        # Not JSON, return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if "detail" in body and isinstance(body["detail"], list):
        parts = []
        for err in body["detail"]:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)

    if "error" in body:
        errors = body.get("errors") or {}
        detail = " | ".join(f"{field}: {'; '.join(map(str, msgs))}" for field, msgs in errors.items())
        prefix = f"{body['error']} (retryable)" if body.get("retryable") else str(body["error"])
        return f"{prefix}: {detail}" if detail else prefix

    return str(body)[:300]


def is_retryable(response: Response) -> bool:
    """True when the API flagged the failure as safe to retry (409 Conflict, 503 Unavailable)."""
    try:
        return bool(response.json().get("retryable"))
    except ValueError:
        return False
