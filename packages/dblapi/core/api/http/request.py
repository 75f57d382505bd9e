"""Request construction for the API pipeline.

Everything here is pure: the same inputs always produce an equivalent
ApiRequest, and nothing touches the network.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any, Literal
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict

JSON_CONTENT_TYPE = "application/json"

QueryParams = Mapping[str, str | int | float | bool | None]


class ApiRequest(BaseModel):
    """Transport-ready request.

    Frozen once built; with_header() returns a new instance.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: Literal["GET", "POST"]
    url: httpx.URL
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes | None = None
    content_type: str | None = None
    # Lowercased names whose values must never reach a log record
    sensitive_headers: frozenset[str] = frozenset()

    def header(self, name: str) -> str | None:
        """Return the value of a header (case-insensitive), or None."""
        key = name.lower()
        for k, v in self.headers:
            if k.lower() == key:
                return v
        return None

    def with_header(self, name: str, value: str, *, sensitive: bool = False) -> ApiRequest:
        """Return a copy with ``name`` set to ``value``, replacing any existing value.

        Args:
            name: Header name (case-insensitive)
            value: Header value
            sensitive: Redact this header wherever the request is logged
        """
        key = name.lower()
        kept = tuple((k, v) for k, v in self.headers if k.lower() != key)
        update: dict[str, Any] = {"headers": (*kept, (name, value))}
        if sensitive:
            update["sensitive_headers"] = self.sensitive_headers | {key}
        return self.model_copy(update=update)

    def wire_headers(self) -> list[tuple[str, str]]:
        """Headers to send, including Content-Type when a body is present."""
        out = list(self.headers)
        if self.content_type is not None:
            out.append(("Content-Type", self.content_type))
        return out


def _quote_segment(segment: str) -> str:
    if not isinstance(segment, str) or not segment:
        raise ValueError(f"Path segment must be a non-empty string, got {segment!r}")
    return quote(segment, safe="")


def build_url(
    base_url: str,
    segments: Sequence[str],
    params: QueryParams | None = None,
) -> httpx.URL:
    """Build an absolute endpoint URL.

    Args:
        base_url: Absolute base URL (e.g. "https://discordbots.org/api")
        segments: Path segments appended in order, each percent-encoded
        params: Query parameters; entries whose value is None are dropped

    Returns:
        Absolute httpx.URL

    Raises:
        ValueError: If the base URL is not absolute or a segment is empty

    Example:
        >>> str(build_url("https://discordbots.org/api", ["bots", "42", "check"], {"userId": "7"}))
        'https://discordbots.org/api/bots/42/check?userId=7'
    """
    base = httpx.URL(base_url)
    if not base.is_absolute_url:
        raise ValueError(f"Base URL must be absolute, got {base_url!r}")

    path = "/".join(_quote_segment(s) for s in segments)
    url = httpx.URL(f"{str(base).rstrip('/')}/{path}")

    if params:
        query = {k: v for k, v in params.items() if v is not None}
        if query:
            url = url.copy_merge_params(query)
    return url


def get_request(
    base_url: str,
    segments: Sequence[str],
    params: QueryParams | None = None,
) -> ApiRequest:
    """Build a GET request."""
    return ApiRequest(method="GET", url=build_url(base_url, segments, params))


def post_json(base_url: str, segments: Sequence[str], body: Any) -> ApiRequest:
    """Build a POST request carrying ``body`` serialized as JSON.

    Raises:
        ValueError: If body is not JSON-serializable
    """
    try:
        payload = json.dumps(body).encode("utf-8")
    except TypeError as e:
        raise ValueError(f"Request body is not JSON-serializable: {e}") from e
    return ApiRequest(
        method="POST",
        url=build_url(base_url, segments),
        body=payload,
        content_type=JSON_CONTENT_TYPE,
    )
