"""Asynchronous request execution.

AsyncExecutor ties the pipeline together: it hands a built request to the
transport, returns a PendingResult straight away, and completes that result
from the transport's callback thread using the caller-supplied decoder.
"""

from __future__ import annotations

import logging
from typing import TypeVar

import httpx

from dblapi.core.api.http.decoders import Decoder, decode_error
from dblapi.core.api.http.errors import DecodeError, NetworkError, TransportError
from dblapi.core.api.http.pending import PendingResult
from dblapi.core.api.http.request import ApiRequest
from dblapi.core.api.http.transport import Transport

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AsyncExecutor:
    """Run requests on a transport and deliver outcomes through PendingResults.

    Holds no per-call state; any number of calls may be in flight at once.

    Args:
        transport: Transport used for dispatch (usually an AuthenticatedTransport)

    Example:
        >>> executor = AsyncExecutor(transport)
        >>> pending = executor.execute(get_request(base, ["bots", "42"]), SchemaDecoder(Bot))
        >>> bot = pending.result(timeout=10)
    """

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    def execute(self, request: ApiRequest, decoder: Decoder[T]) -> PendingResult[T]:
        """Submit ``request`` and return a handle to its decoded result.

        Never blocks on network I/O. The returned result is rejected with a
        TransportError if the request fails below the application layer, or
        with a DecodeError if ``decoder`` fails on the response.
        """
        pending: PendingResult[T] = PendingResult()

        def on_response(req: ApiRequest, response: httpx.Response) -> None:
            try:
                value = decoder(response)
            except DecodeError as e:
                self._reject(pending, req, e)
            except Exception as e:
                self._reject(pending, req, decode_error(response, "Decoder failed", cause=e))
            else:
                logger.debug("Resolved %s %s", req.method, req.url)
                pending.resolve(value)

        def on_failure(req: ApiRequest, error: BaseException) -> None:
            if not isinstance(error, TransportError):
                error = NetworkError(
                    message="Transport failed",
                    method=req.method,
                    url=str(req.url),
                    cause=error,
                )
            self._reject(pending, req, error)

        logger.debug("Submitting %s %s", request.method, request.url)
        try:
            self.transport.enqueue(request, on_response, on_failure)
        except TransportError as e:
            self._reject(pending, request, e)
        return pending

    @staticmethod
    def _reject(pending: PendingResult[T], request: ApiRequest, error: Exception) -> None:
        logger.warning("%s %s failed: %s", request.method, request.url, error)
        pending.reject(error)
