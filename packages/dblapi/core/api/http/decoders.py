"""Response decoders.

A decoder is any callable taking an ``httpx.Response`` and returning a value,
raising DecodeError when the body does not match what the call site expects.
Two flavours ship here: SchemaDecoder for pydantic-described shapes, and the
json_object/json_field helpers for ad hoc extraction.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any, Generic, TypeAlias, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from dblapi.core.api.http.errors import DecodeError
from dblapi.core.api.http.utils import build_api_error

T = TypeVar("T")

Decoder: TypeAlias = Callable[[httpx.Response], T]


class NoContent:
    """Marker target for endpoints whose body carries no information."""


def decode_error(
    response: httpx.Response,
    message: str,
    cause: BaseException | None = None,
) -> DecodeError:
    """Build a DecodeError describing ``response`` without retaining it."""
    try:
        method, url = response.request.method, str(response.request.url)
    except RuntimeError:
        # Response built without a request (hand-made test doubles)
        method, url = "UNKNOWN", ""
    return build_api_error(
        exc_type=DecodeError,
        message=message,
        method=method,
        url=url,
        status_code=response.status_code,
        response=response,
        cause=cause,
    )


class SchemaDecoder(Generic[T]):
    """Decode a JSON body into ``target`` with a pydantic TypeAdapter.

    ``target`` may be a model class, a container such as ``list[Model]``, or
    any type pydantic can validate. ``NoContent`` skips the body and yields None.
    Instances are stateless and safe to share across threads.

    Args:
        target: Shape to validate the body against

    Example:
        >>> decoder = SchemaDecoder(BotStats)
        >>> stats = decoder(response)
    """

    def __init__(self, target: type[T] | Any) -> None:
        self.target = target
        self._adapter: TypeAdapter[T] | None = (
            None if target is NoContent else TypeAdapter(target)
        )

    def __repr__(self) -> str:
        name = getattr(self.target, "__name__", None) or repr(self.target)
        return f"SchemaDecoder({name})"

    def __call__(self, response: httpx.Response) -> T:
        if self._adapter is None:
            return None  # type: ignore[return-value]
        try:
            return self._adapter.validate_json(response.content)
        except ValidationError as e:
            raise decode_error(
                response,
                f"Response body does not match {self!r} ({e.error_count()} errors)",
                cause=e,
            ) from e


def json_object(response: httpx.Response) -> dict[str, Any]:
    """Parse the body as a JSON object.

    Raises:
        DecodeError: If the body is empty, not JSON, or not an object
    """
    if not response.content:
        raise decode_error(response, "Response body is empty")
    try:
        data = json.loads(response.content)
    except ValueError as e:
        raise decode_error(response, "Failed to parse JSON response", cause=e) from e
    if not isinstance(data, dict):
        raise decode_error(response, f"Expected a JSON object, got {type(data).__name__}")
    return data


def json_field(name: str, convert: Callable[[Any], T]) -> Decoder[T]:
    """Build a decoder extracting one required field from a JSON object body.

    Args:
        name: Field to extract
        convert: Applied to the raw field value; TypeError/ValueError become DecodeError

    Returns:
        Decoder returning the converted field value
    """

    def _decode(response: httpx.Response) -> T:
        data = json_object(response)
        if name not in data:
            raise decode_error(response, f"Response is missing required field {name!r}")
        try:
            return convert(data[name])
        except (TypeError, ValueError) as e:
            raise decode_error(response, f"Invalid value for field {name!r}", cause=e) from e

    return _decode
