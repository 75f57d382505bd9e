"""Asynchronous request pipeline on top of HTTPX.

Exposes a small surface:
- AsyncExecutor / PendingResult: dispatch and write-once results
- Transport, HttpxTransport, AuthenticatedTransport: dispatch layers
- ApiRequest, build_url, get_request, post_json: request construction
- SchemaDecoder, NoContent, json_object, json_field: response decoding
- Exceptions: ApiError and subclasses
"""

from dblapi.core.api.http.auth import AuthenticatedTransport, Credential
from dblapi.core.api.http.config import HttpClientConfig
from dblapi.core.api.http.decoders import (
    Decoder,
    NoContent,
    SchemaDecoder,
    json_field,
    json_object,
)
from dblapi.core.api.http.errors import (
    ApiError,
    AuthError,
    ClientError,
    DecodeError,
    HttpStatusError,
    InvalidStateError,
    NetworkError,
    RateLimitError,
    RequestTimeoutError,
    ServerError,
    TransportClosedError,
    TransportError,
    UnexpectedStatusError,
)
from dblapi.core.api.http.executor import AsyncExecutor
from dblapi.core.api.http.pending import PendingResult, ResultState
from dblapi.core.api.http.request import ApiRequest, build_url, get_request, post_json
from dblapi.core.api.http.transport import HttpxTransport, Transport

__all__ = [
    "AsyncExecutor",
    "PendingResult",
    "ResultState",
    "Transport",
    "HttpxTransport",
    "AuthenticatedTransport",
    "Credential",
    "HttpClientConfig",
    "ApiRequest",
    "build_url",
    "get_request",
    "post_json",
    "Decoder",
    "NoContent",
    "SchemaDecoder",
    "json_field",
    "json_object",
    "ApiError",
    "TransportError",
    "NetworkError",
    "RequestTimeoutError",
    "TransportClosedError",
    "HttpStatusError",
    "AuthError",
    "RateLimitError",
    "ClientError",
    "ServerError",
    "UnexpectedStatusError",
    "DecodeError",
    "InvalidStateError",
]
