"""Client library for the Discord Bot List REST API.

Example:
    >>> from dblapi import DiscordBotListAPI
    >>> with DiscordBotListAPI.create(token="...", bot_id="264811613708746752") as api:
    ...     pending = api.get_bot("264811613708746752")
    ...     bot = pending.result(timeout=10)
"""

from dblapi.core.api.dbl import (
    Bot,
    BotResult,
    BotStats,
    DiscordBotListAPI,
    SimpleUser,
    Social,
    User,
    encode_search,
)
from dblapi.core.api.http import (
    ApiError,
    Credential,
    DecodeError,
    HttpClientConfig,
    InvalidStateError,
    PendingResult,
    TransportError,
)

__version__ = "1.0.0"

__all__ = [
    "DiscordBotListAPI",
    "Credential",
    "HttpClientConfig",
    "PendingResult",
    "Bot",
    "BotResult",
    "BotStats",
    "SimpleUser",
    "Social",
    "User",
    "encode_search",
    "ApiError",
    "TransportError",
    "DecodeError",
    "InvalidStateError",
]
