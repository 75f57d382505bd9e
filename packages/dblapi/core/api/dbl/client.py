"""Discord Bot List API client.

Each method maps its arguments to a request and a decoder, then hands both
to the AsyncExecutor. Methods return immediately with a PendingResult.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any

from dblapi.core.api.dbl.models import Bot, BotResult, BotStats, SimpleUser, User
from dblapi.core.api.dbl.search import SearchEncoder, encode_search
from dblapi.core.api.http.auth import AuthenticatedTransport, Credential
from dblapi.core.api.http.config import HttpClientConfig
from dblapi.core.api.http.decoders import NoContent, SchemaDecoder, json_field
from dblapi.core.api.http.executor import AsyncExecutor
from dblapi.core.api.http.pagination import iterate_offset
from dblapi.core.api.http.pending import PendingResult
from dblapi.core.api.http.request import get_request, post_json
from dblapi.core.api.http.transport import HttpxTransport, Transport
from dblapi.core.config.loader import load_client_settings
from dblapi.core.utils.logging import get_logger

MAX_SEARCH_LIMIT = 500
DEFAULT_SEARCH_LIMIT = 50


def _voted_flag(value: Any) -> bool:
    if not isinstance(value, int):
        raise TypeError(f"expected an integer, got {type(value).__name__}")
    return value == 1


_NO_CONTENT = SchemaDecoder(NoContent)
_STATS = SchemaDecoder(BotStats)
_VOTERS = SchemaDecoder(list[SimpleUser])
_BOT = SchemaDecoder(Bot)
_BOT_RESULT = SchemaDecoder(BotResult)
_USER = SchemaDecoder(User)
_VOTED = json_field("voted", _voted_flag)


def _require_id(value: str | int, name: str) -> str:
    """Validate a Discord snowflake ID."""
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ValueError(f"{name} must be a string or integer, got {type(value).__name__}")
    text = str(value).strip()
    if not text.isdigit():
        raise ValueError(f"{name} must be a numeric Discord ID, got {value!r}")
    return text


def _require_count(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


class DiscordBotListAPI:
    """Client for the Discord Bot List REST API.

    Every request carries the credential's token. All methods validate their
    arguments synchronously (raising ValueError) and return a PendingResult
    that is resolved or rejected from a transport thread.

    Args:
        credential: API token and the ID of the bot it belongs to
        config: HTTP configuration (base URL, timeouts, pool sizes)
        transport: Transport to dispatch through; defaults to an HttpxTransport
        search_encoder: Encoder for get_bots search criteria

    Example:
        >>> with DiscordBotListAPI.create(token="...", bot_id="264811613708746752") as api:
        ...     api.set_stats(server_count=1200).result(timeout=10)
        ...     voted = api.has_voted("140862798832861184").result(timeout=10)
    """

    def __init__(
        self,
        credential: Credential,
        *,
        config: HttpClientConfig | None = None,
        transport: Transport | None = None,
        search_encoder: SearchEncoder = encode_search,
    ) -> None:
        self.credential = credential
        self.config = config or HttpClientConfig()
        self.search_encoder = search_encoder
        inner = transport if transport is not None else HttpxTransport(self.config)
        self._transport = AuthenticatedTransport(inner, credential)
        self._executor = AsyncExecutor(self._transport)
        self._log = get_logger(__name__, bot_id=credential.bot_id)

    @classmethod
    def create(cls, token: str, bot_id: str | int, **kwargs: Any) -> DiscordBotListAPI:
        """Build a client from a raw token and bot ID."""
        return cls(Credential(token=token, bot_id=_require_id(bot_id, "bot_id")), **kwargs)

    @classmethod
    def from_config(cls, path: str | Path | None = None, **kwargs: Any) -> DiscordBotListAPI:
        """Build a client from a JSON/YAML config file and DBL_* environment variables."""
        settings = load_client_settings(path)
        kwargs.setdefault("config", settings.http)
        return cls(settings.credential, **kwargs)

    @property
    def bot_id(self) -> str:
        return self.credential.bot_id

    def close(self) -> None:
        """Wait for in-flight requests and release the transport."""
        self._log.debug("Closing client")
        self._transport.close()

    def __enter__(self) -> DiscordBotListAPI:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # =========================================================================
    # Stats
    # =========================================================================

    def set_stats(
        self,
        server_count: int | None = None,
        *,
        shard_id: int | None = None,
        shard_total: int | None = None,
        shards: Sequence[int] | None = None,
    ) -> PendingResult[None]:
        """Post server counts for the configured bot.

        Call with exactly one of:
            - ``server_count`` alone (whole bot),
            - ``server_count`` with ``shard_id`` and ``shard_total`` (one shard),
            - ``shards`` (server count of every shard, in shard order).

        Returns:
            PendingResult resolved with None once the API accepts the stats

        Raises:
            ValueError: If the argument combination or any count is invalid
        """
        body: dict[str, Any]
        if shards is not None:
            if server_count is not None or shard_id is not None or shard_total is not None:
                raise ValueError("shards cannot be combined with server_count or shard arguments")
            body = {"shards": [_require_count(c, "shards[]") for c in shards]}
        elif server_count is None:
            raise ValueError("Either server_count or shards is required")
        elif (shard_id is None) != (shard_total is None):
            raise ValueError("shard_id and shard_total must be given together")
        elif shard_id is not None and shard_total is not None:
            _require_count(shard_id, "shard_id")
            _require_count(shard_total, "shard_total")
            if shard_id >= shard_total:
                raise ValueError(f"shard_id {shard_id} out of range for {shard_total} shards")
            body = {
                "shard_id": shard_id,
                "shard_total": shard_total,
                "server_count": _require_count(server_count, "server_count"),
            }
        else:
            body = {"server_count": _require_count(server_count, "server_count")}

        self._log.debug("Posting stats: %s", body)
        request = post_json(self.config.base_url, ["bots", self.bot_id, "stats"], body)
        return self._executor.execute(request, _NO_CONTENT)

    def get_stats(self, bot_id: str | int | None = None) -> PendingResult[BotStats]:
        """Fetch posted stats for a bot (default: the configured bot)."""
        bid = self.bot_id if bot_id is None else _require_id(bot_id, "bot_id")
        request = get_request(self.config.base_url, ["bots", bid, "stats"])
        return self._executor.execute(request, _STATS)

    # =========================================================================
    # Votes
    # =========================================================================

    def get_voters(self, bot_id: str | int | None = None) -> PendingResult[list[SimpleUser]]:
        """Fetch the users who recently voted for a bot (default: the configured bot)."""
        bid = self.bot_id if bot_id is None else _require_id(bot_id, "bot_id")
        request = get_request(self.config.base_url, ["bots", bid, "votes"])
        return self._executor.execute(request, _VOTERS)

    def has_voted(self, user_id: str | int) -> PendingResult[bool]:
        """Check whether a user has voted for the configured bot.

        The result is rejected with DecodeError if the response lacks an
        integer ``voted`` field.
        """
        uid = _require_id(user_id, "user_id")
        request = get_request(
            self.config.base_url,
            ["bots", self.bot_id, "check"],
            {"userId": uid},
        )
        return self._executor.execute(request, _VOTED)

    # =========================================================================
    # Bots and users
    # =========================================================================

    def get_bot(self, bot_id: str | int) -> PendingResult[Bot]:
        """Fetch a bot listing."""
        request = get_request(self.config.base_url, ["bots", _require_id(bot_id, "bot_id")])
        return self._executor.execute(request, _BOT)

    def get_bots(
        self,
        search: Mapping[str, Any] | None = None,
        sort: str | None = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
        offset: int = 0,
        fields: Sequence[str] | None = None,
    ) -> PendingResult[BotResult]:
        """Search the bot directory.

        Args:
            search: Field/value filters, encoded with ``search_encoder``
            sort: Field to sort by (prefix with "-" for descending)
            limit: Page size, 1 to 500
            offset: Number of bots to skip
            fields: Restrict returned bot fields

        Raises:
            ValueError: If limit or offset is out of range
        """
        if (
            isinstance(limit, bool)
            or not isinstance(limit, int)
            or not 1 <= limit <= MAX_SEARCH_LIMIT
        ):
            raise ValueError(f"limit must be between 1 and {MAX_SEARCH_LIMIT}, got {limit!r}")
        _require_count(offset, "offset")

        params: dict[str, str | int | None] = {
            "search": self.search_encoder(search) if search else None,
            "sort": sort or None,
            "limit": limit,
            "offset": offset,
            "fields": ",".join(fields) if fields else None,
        }
        request = get_request(self.config.base_url, ["bots"], params)
        return self._executor.execute(request, _BOT_RESULT)

    def iter_bots(
        self,
        search: Mapping[str, Any] | None = None,
        sort: str | None = None,
        page_size: int = DEFAULT_SEARCH_LIMIT,
        fields: Sequence[str] | None = None,
        max_pages: int | None = None,
        timeout: float | None = None,
    ) -> Iterator[Bot]:
        """Iterate over every bot matching ``search``, one page at a time.

        Blocks the calling thread while each page is fetched.
        """
        return iterate_offset(
            lambda offset, limit: self.get_bots(search, sort, limit, offset, fields),
            page_size=page_size,
            max_pages=max_pages,
            timeout=timeout,
        )

    def get_user(self, user_id: str | int) -> PendingResult[User]:
        """Fetch a user profile."""
        request = get_request(self.config.base_url, ["users", _require_id(user_id, "user_id")])
        return self._executor.execute(request, _USER)
