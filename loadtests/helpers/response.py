"""Response error extraction for load test observability.

Parses Gestularia API error responses into human-readable messages. Every
handled failure has the shape ``{"error": "msg"}``; anything else is reported
as raw text.
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
        # Not JSON — return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if isinstance(body, dict) and "error" in body:
        return str(body["error"])

    # Unknown shape — stringify and truncate
    return str(body)[:300]
