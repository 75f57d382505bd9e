"""Utility functions for HTTP client operations."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeVar

import httpx

from dblapi.core.api.http.errors import ApiError

E = TypeVar("E", bound=ApiError)


def safe_snippet(content: bytes, limit: int) -> str:
    """Extract safe text snippet from response content for logging.

    Truncates content and decodes as UTF-8 with replacement for invalid bytes.

    Args:
        content: Response body bytes
        limit: Maximum number of bytes to include

    Returns:
        Truncated, decoded text snippet
    """
    if not content:
        return ""
    return content[:limit].decode("utf-8", errors="replace")


def get_request_id(headers: Mapping[str, str]) -> str | None:
    """Extract request ID from common tracing headers.

    Checks for: x-request-id, x-correlation-id, request-id, trace-id, cf-ray
    (case-insensitive).

    Args:
        headers: Response headers

    Returns:
        Request ID if found, None otherwise
    """
    for key in ("x-request-id", "x-correlation-id", "request-id", "trace-id", "cf-ray"):
        for hk, hv in headers.items():
            if hk.lower() == key:
                return hv
    return None


def build_api_error(
    *,
    exc_type: type[E],
    message: str,
    method: str,
    url: str,
    status_code: int | None = None,
    response: httpx.Response | None = None,
    body_snippet_limit: int = 4096,
    cause: BaseException | None = None,
) -> E:
    """Build API error with response context.

    The response is only read for its headers and a body snippet; the
    returned error keeps no reference to it.

    Args:
        exc_type: Error class to instantiate
        message: Human-readable error message
        method: HTTP method
        url: Request URL
        status_code: HTTP status code (if available)
        response: HTTP response (if available)
        body_snippet_limit: Max bytes to include in error
        cause: Original exception that triggered this error

    Returns:
        Constructed API error
    """
    headers: dict[str, str] | None = None
    snippet: str | None = None
    request_id: str | None = None
    if response is not None:
        headers = dict(response.headers)
        snippet = safe_snippet(response.content or b"", body_snippet_limit)
        request_id = get_request_id(response.headers)

    return exc_type(
        message=message,
        method=method,
        url=url,
        status_code=status_code,
        request_id=request_id,
        response_headers=headers,
        response_body_snippet=snippet,
        cause=cause,
    )
