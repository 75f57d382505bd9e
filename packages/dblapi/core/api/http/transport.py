"""HTTP transport built on HTTPX.

The transport owns both the connection pool (an ``httpx.Client``) and the
dispatch pool whose worker threads send requests and run completion
callbacks. Callers hand it a request plus two callbacks and return
immediately; exactly one callback fires per request.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

import httpx

from dblapi.core.api.http.config import HttpClientConfig
from dblapi.core.api.http.errors import (
    AuthError,
    ClientError,
    HttpStatusError,
    NetworkError,
    RateLimitError,
    RequestTimeoutError,
    ServerError,
    TransportClosedError,
    TransportError,
    UnexpectedStatusError,
)
from dblapi.core.api.http.logging_utils import (
    RequestLogContext,
    log_failure,
    log_request,
    log_response,
)
from dblapi.core.api.http.request import ApiRequest
from dblapi.core.api.http.utils import build_api_error

logger = logging.getLogger(__name__)

ResponseCallback = Callable[[ApiRequest, httpx.Response], None]
FailureCallback = Callable[[ApiRequest, TransportError], None]


class Transport(Protocol):
    """Asynchronous request dispatch.

    ``enqueue`` must not block on network I/O. For every accepted request it
    later calls exactly one of ``on_response`` (2xx response, body already
    read) or ``on_failure`` (a TransportError). It may raise TransportError
    synchronously if the request cannot be accepted at all.
    """

    def enqueue(
        self,
        request: ApiRequest,
        on_response: ResponseCallback,
        on_failure: FailureCallback,
    ) -> None: ...

    def close(self) -> None: ...


def _categorize_http_error(status_code: int) -> type[HttpStatusError]:
    """Map HTTP status code to appropriate error class."""
    if status_code in (401, 403):
        return AuthError
    if status_code == 429:
        return RateLimitError
    if 400 <= status_code < 500:
        return ClientError
    if 500 <= status_code < 600:
        return ServerError
    return UnexpectedStatusError


class HttpxTransport:
    """Transport sending requests with a shared ``httpx.Client``.

    Args:
        config: Client configuration
        transport: Optional custom httpx transport (e.g. httpx.MockTransport in tests)

    Example:
        >>> transport = HttpxTransport(HttpClientConfig())
        >>> transport.enqueue(request, on_response, on_failure)
        >>> transport.close()
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config or HttpClientConfig()
        self._client = httpx.Client(
            headers={"User-Agent": self.config.user_agent, **self.config.headers},
            timeout=self.config.timeout,
            limits=self.config.limits,
            follow_redirects=self.config.follow_redirects,
            transport=transport,
        )
        self._pool = ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix="dblapi-http",
        )
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Wait for in-flight requests, then release the pools."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._pool.shutdown(wait=True)
        self._client.close()
        logger.debug("HTTP transport closed")

    def __enter__(self) -> HttpxTransport:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def enqueue(
        self,
        request: ApiRequest,
        on_response: ResponseCallback,
        on_failure: FailureCallback,
    ) -> None:
        with self._lock:
            if self._closed:
                raise TransportClosedError(
                    message="Transport is closed",
                    method=request.method,
                    url=str(request.url),
                )
            self._pool.submit(self._dispatch, request, on_response, on_failure)

    def _dispatch(
        self,
        request: ApiRequest,
        on_response: ResponseCallback,
        on_failure: FailureCallback,
    ) -> None:
        try:
            response = self.send(request)
        except TransportError as e:
            self._run_callback(on_failure, request, e)
            return
        except Exception as e:
            # Every accepted request must reach one callback.
            logger.exception("Unexpected error sending %s %s", request.method, request.url)
            error = build_api_error(
                exc_type=NetworkError,
                message="Unexpected error while sending request",
                method=request.method,
                url=str(request.url),
                cause=e,
            )
            self._run_callback(on_failure, request, error)
            return

        try:
            self._run_callback(on_response, request, response)
        finally:
            response.close()

    @staticmethod
    def _run_callback(callback: Callable, request: ApiRequest, arg: object) -> None:
        # Nothing above the worker thread would see this exception.
        try:
            callback(request, arg)
        except Exception:
            logger.exception("Completion callback failed for %s %s", request.method, request.url)

    def send(self, request: ApiRequest) -> httpx.Response:
        """Send ``request`` and return the fully read 2xx response (blocking).

        Raises:
            RequestTimeoutError: If the request timed out
            NetworkError: On any other httpx transport failure
            HttpStatusError: On a non-2xx response
        """
        method = request.method
        url = str(request.url)
        http_request = self._client.build_request(
            method,
            request.url,
            headers=request.wire_headers(),
            content=request.body,
        )

        ctx = log_request(
            RequestLogContext.for_request(request, self.config.redact_headers),
            http_request.headers,
        )

        try:
            resp = self._client.send(http_request)
        except httpx.TimeoutException as e:
            log_failure(ctx, e)
            raise build_api_error(
                exc_type=RequestTimeoutError,
                message="Request timed out",
                method=method,
                url=url,
                cause=e,
            ) from e
        except httpx.RequestError as e:
            log_failure(ctx, e)
            raise build_api_error(
                exc_type=NetworkError,
                message="Network error while sending request",
                method=method,
                url=url,
                cause=e,
            ) from e

        log_response(ctx, resp)

        if not resp.is_success:
            error = build_api_error(
                exc_type=_categorize_http_error(resp.status_code),
                message="HTTP error response",
                method=method,
                url=url,
                status_code=resp.status_code,
                response=resp,
                body_snippet_limit=self.config.max_response_body_for_error,
            )
            resp.close()
            raise error

        return resp
