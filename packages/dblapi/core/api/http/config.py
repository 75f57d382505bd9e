from __future__ import annotations

import httpx
from pydantic import BaseModel, Field, field_validator

DEFAULT_BASE_URL = "https://discordbots.org/api"


class HttpClientConfig(BaseModel):
    """Configuration for HttpxTransport and the API client.

    Args:
        base_url: Base URL for all requests
        timeout: HTTPX timeout configuration
        limits: Connection pool limits
        follow_redirects: Whether to follow HTTP redirects
        headers: Default headers applied to all requests
        user_agent: User-Agent header value
        max_workers: Size of the dispatch pool whose threads run completion callbacks
        redact_headers: Headers to redact in logs (case-insensitive)
        max_response_body_for_error: Max response bytes to include in error messages
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    base_url: str = DEFAULT_BASE_URL
    timeout: httpx.Timeout = Field(default_factory=lambda: httpx.Timeout(10.0, connect=5.0))
    limits: httpx.Limits = Field(
        default_factory=lambda: httpx.Limits(max_keepalive_connections=20, max_connections=100)
    )
    follow_redirects: bool = True
    headers: dict[str, str] = Field(default_factory=dict)
    user_agent: str = "dblapi-python/1.0"
    max_workers: int = Field(default=8, ge=1)
    redact_headers: tuple[str, ...] = (
        "authorization",
        "proxy-authorization",
        "cookie",
        "set-cookie",
    )
    max_response_body_for_error: int = 4096

    @field_validator("timeout", mode="before")
    @classmethod
    def coerce_timeout(cls, v: object) -> object:
        """Accept plain seconds (as found in config files) for timeout."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return httpx.Timeout(float(v))
        return v

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure base_url is a valid URL."""
        if not v:
            raise ValueError("base_url cannot be empty")
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")
