from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from dblapi.core.api.http.request import ApiRequest
from dblapi.core.api.http.transport import FailureCallback, ResponseCallback, Transport


class Credential(BaseModel):
    """Static API token and the bot it belongs to.

    Args:
        token: API token sent verbatim in the Authorization header
        bot_id: ID of the bot this token was issued for

    Example:
        >>> credential = Credential(token="secret", bot_id="264811613708746752")
    """

    model_config = {"frozen": True}

    token: str = Field(repr=False)  # Don't leak secrets in repr
    bot_id: str

    @field_validator("token", "bot_id")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must be a non-empty string")
        if not v.isascii():
            # Sent verbatim as a header value
            raise ValueError("must contain only ASCII characters")
        return v.strip()


class AuthenticatedTransport:
    """Transport decorator adding the credential header to every request.

    The header is applied to a copy of the request before it reaches the
    inner transport, so redirects handled below see it too.

    Args:
        inner: Transport that actually dispatches requests
        credential: Token to send
        header_name: Header carrying the token (default: "Authorization")
    """

    def __init__(
        self,
        inner: Transport,
        credential: Credential,
        header_name: str = "Authorization",
    ) -> None:
        self._inner = inner
        self._credential = credential
        self._header_name = header_name

    @property
    def inner(self) -> Transport:
        return self._inner

    def authorize(self, request: ApiRequest) -> ApiRequest:
        """Return a copy of ``request`` carrying the credential header."""
        return request.with_header(self._header_name, self._credential.token, sensitive=True)

    def enqueue(
        self,
        request: ApiRequest,
        on_response: ResponseCallback,
        on_failure: FailureCallback,
    ) -> None:
        self._inner.enqueue(self.authorize(request), on_response, on_failure)

    def close(self) -> None:
        self._inner.close()
