"""Structured DEBUG records for the HTTP exchange.

All records go to the ``dblapi.core.api.http`` logger. Header values are
redacted before they reach a record: the configured names plus whatever the
request itself marks sensitive (the credential header, whatever it is called).
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping

import httpx
from pydantic import BaseModel, ConfigDict

from dblapi.core.api.http.request import ApiRequest
from dblapi.core.api.http.utils import get_request_id

logger = logging.getLogger("dblapi.core.api.http")

REDACTED = "***REDACTED***"


def redact_headers(headers: Mapping[str, str], redact: Iterable[str]) -> dict[str, str]:
    """Copy ``headers`` with the values of ``redact`` names replaced (case-insensitive)."""
    hidden = {name.lower() for name in redact}
    return {k: REDACTED if k.lower() in hidden else v for k, v in headers.items()}


class RequestLogContext(BaseModel):
    """Per-request logging context.

    Args:
        method: HTTP method (GET, POST)
        url: Full request URL
        redact: Lowercased header names to hide in records
        started: perf_counter() value when the request was sent
    """

    model_config = ConfigDict(frozen=True)

    method: str
    url: str
    redact: frozenset[str] = frozenset()
    started: float | None = None

    @classmethod
    def for_request(cls, request: ApiRequest, redact: Iterable[str]) -> RequestLogContext:
        """Context for ``request``, hiding ``redact`` and its own sensitive headers."""
        names = {name.lower() for name in redact} | request.sensitive_headers
        return cls(method=request.method, url=str(request.url), redact=frozenset(names))

    def elapsed_ms(self) -> int | None:
        if self.started is None:
            return None
        return int((time.perf_counter() - self.started) * 1000)


def log_request(ctx: RequestLogContext, headers: Mapping[str, str]) -> RequestLogContext:
    """Record an outgoing request.

    Returns:
        Copy of ``ctx`` stamped with the send time, for log_response
    """
    logger.debug(
        "HTTP request",
        extra={
            "method": ctx.method,
            "url": ctx.url,
            "headers": redact_headers(headers, ctx.redact),
        },
    )
    return ctx.model_copy(update={"started": time.perf_counter()})


def log_response(ctx: RequestLogContext, response: httpx.Response) -> None:
    """Record the response to a request logged with log_request."""
    logger.debug(
        "HTTP response",
        extra={
            "method": ctx.method,
            "url": ctx.url,
            "request_id": get_request_id(response.headers),
            "status_code": response.status_code,
            "elapsed_ms": ctx.elapsed_ms(),
        },
    )


def log_failure(ctx: RequestLogContext, error: BaseException) -> None:
    """Record a request that produced no response."""
    logger.debug(
        "HTTP request failed",
        extra={
            "method": ctx.method,
            "url": ctx.url,
            "error_type": type(error).__name__,
            "elapsed_ms": ctx.elapsed_ms(),
        },
    )
