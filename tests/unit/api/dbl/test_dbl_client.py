"""Tests for DiscordBotListAPI over httpx.MockTransport."""

from __future__ import annotations

import json
import threading

import httpx
import pytest

from dblapi.core.api.dbl.client import DiscordBotListAPI
from dblapi.core.api.dbl.models import Bot, BotResult, BotStats, SimpleUser, User
from dblapi.core.api.http.config import HttpClientConfig
from dblapi.core.api.http.errors import ClientError, DecodeError, NetworkError, TransportError
from dblapi.core.api.http.transport import HttpxTransport
from tests.doubles import BASE_URL, BOT_ID, TOKEN

USER_ID = "140862798832861184"


class Recorder:
    """MockTransport handler recording requests and replying with a fixed response."""

    def __init__(self, status: int = 200, payload=None, content: bytes | None = None) -> None:
        self.status = status
        self.payload = payload
        self.content = content
        self.requests: list[httpx.Request] = []
        self._lock = threading.Lock()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        with self._lock:
            self.requests.append(request)
        if self.payload is not None:
            return httpx.Response(self.status, json=self.payload)
        return httpx.Response(self.status, content=self.content or b"")

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


# =============================================================================
# has_voted
# =============================================================================


@pytest.mark.parametrize(("payload", "expected"), [({"voted": 1}, True), ({"voted": 0}, False)])
def test_has_voted(make_api, payload, expected) -> None:
    """Test vote check results."""
    handler = Recorder(payload=payload)
    api = make_api(handler)

    assert api.has_voted(USER_ID).result(timeout=5) is expected

    assert handler.last.method == "GET"
    assert handler.last.url.path == f"/api/bots/{BOT_ID}/check"
    assert handler.last.url.params["userId"] == USER_ID


def test_has_voted_missing_field_is_decode_error(make_api) -> None:
    """Test vote check with no voted field."""
    api = make_api(Recorder(payload={}))

    with pytest.raises(DecodeError, match="voted"):
        api.has_voted(USER_ID).result(timeout=5)


def test_has_voted_non_integer_flag_is_decode_error(make_api) -> None:
    """Test vote check with a non-integer voted field."""
    api = make_api(Recorder(payload={"voted": "yes"}))

    error = api.has_voted(USER_ID).exception(timeout=5)

    assert isinstance(error, DecodeError)
    assert isinstance(error.cause, TypeError)


# =============================================================================
# set_stats
# =============================================================================


def test_set_stats_posts_server_count(make_api) -> None:
    """Test posting a whole-bot server count."""
    handler = Recorder(status=200)
    api = make_api(handler)

    assert api.set_stats(server_count=42).result(timeout=5) is None

    sent = handler.last
    assert sent.method == "POST"
    assert sent.url.path == f"/api/bots/{BOT_ID}/stats"
    assert sent.headers["content-type"] == "application/json"
    assert json.loads(sent.content) == {"server_count": 42}


def test_set_stats_ignores_response_body(make_api) -> None:
    """Test that the stats response body is not decoded."""
    api = make_api(Recorder(payload={"anything": "goes"}))
    assert api.set_stats(server_count=1).result(timeout=5) is None


def test_set_stats_single_shard(make_api) -> None:
    """Test posting the server count of one shard."""
    handler = Recorder()
    api = make_api(handler)

    api.set_stats(100, shard_id=1, shard_total=4).result(timeout=5)

    assert json.loads(handler.last.content) == {
        "shard_id": 1,
        "shard_total": 4,
        "server_count": 100,
    }


def test_set_stats_all_shards(make_api) -> None:
    """Test posting per-shard server counts."""
    handler = Recorder()
    api = make_api(handler)

    api.set_stats(shards=[10, 20, 30]).result(timeout=5)

    assert json.loads(handler.last.content) == {"shards": [10, 20, 30]}


@pytest.mark.parametrize(
    "kwargs",
    [
        {},
        {"server_count": -1},
        {"server_count": True},
        {"server_count": 5, "shard_id": 0},
        {"server_count": 5, "shard_total": 2},
        {"server_count": 5, "shard_id": 2, "shard_total": 2},
        {"server_count": 5, "shards": [1, 2]},
        {"shards": [1, -2]},
    ],
)
def test_set_stats_rejects_invalid_arguments(make_api, kwargs) -> None:
    """Test that invalid stats arguments fail before any request."""
    handler = Recorder()
    api = make_api(handler)

    with pytest.raises(ValueError):
        api.set_stats(**kwargs)

    assert handler.requests == []


# =============================================================================
# Lookups
# =============================================================================


def test_get_bot(make_api, bot_payload) -> None:
    """Test fetching a bot listing."""
    handler = Recorder(payload=bot_payload)
    api = make_api(handler)

    bot = api.get_bot("999").result(timeout=5)

    assert bot == Bot.model_validate(bot_payload)
    assert bot.short_description == bot_payload["shortdesc"]
    assert bot.monthly_points == 19
    assert handler.last.url.path == "/api/bots/999"


def test_get_bot_not_found_is_client_error(make_api) -> None:
    """Test that a 404 rejects with ClientError."""
    api = make_api(Recorder(status=404, payload={"error": "Not found"}))

    error = api.get_bot("999").exception(timeout=5)

    assert isinstance(error, ClientError)
    assert isinstance(error, TransportError)
    assert error.status_code == 404


def test_get_bot_accepts_integer_id(make_api, bot_payload) -> None:
    """Test bot lookup with an integer ID."""
    handler = Recorder(payload=bot_payload)
    api = make_api(handler)

    api.get_bot(999).result(timeout=5)

    assert handler.last.url.path == "/api/bots/999"


@pytest.mark.parametrize("bad_id", ["", "abc", "12/34", True, 1.5, None])
def test_lookups_reject_malformed_ids(make_api, bad_id) -> None:
    """Test that malformed IDs fail before any request."""
    handler = Recorder()
    api = make_api(handler)

    with pytest.raises(ValueError):
        api.get_bot(bad_id)
    with pytest.raises(ValueError):
        api.get_user(bad_id)
    with pytest.raises(ValueError):
        api.has_voted(bad_id)

    assert handler.requests == []


def test_get_user(make_api, user_payload) -> None:
    """Test fetching a user profile."""
    handler = Recorder(payload=user_payload)
    api = make_api(handler)

    user = api.get_user(USER_ID).result(timeout=5)

    assert user == User.model_validate(user_payload)
    assert user.certified_dev is True
    assert user.social.github == "Xetera"
    assert handler.last.url.path == f"/api/users/{USER_ID}"


def test_get_stats_defaults_to_own_bot(make_api) -> None:
    """Test fetching stats for the configured and another bot."""
    handler = Recorder(payload={"server_count": 1200, "shards": [600, 600], "shard_count": 2})
    api = make_api(handler)

    stats = api.get_stats().result(timeout=5)

    assert stats == BotStats(server_count=1200, shards=[600, 600], shard_count=2)
    assert handler.last.url.path == f"/api/bots/{BOT_ID}/stats"

    api.get_stats("123").result(timeout=5)
    assert handler.last.url.path == "/api/bots/123/stats"


def test_get_voters(make_api) -> None:
    """Test fetching recent voters."""
    voters = [
        {"id": "1", "username": "a", "discriminator": "0001", "avatar": None},
        {"id": "2", "username": "b", "discriminator": "0002", "avatar": "abc"},
    ]
    handler = Recorder(payload=voters)
    api = make_api(handler)

    result = api.get_voters().result(timeout=5)

    assert result == [SimpleUser.model_validate(v) for v in voters]
    assert handler.last.url.path == f"/api/bots/{BOT_ID}/votes"


def test_get_voters_wrong_shape_is_decode_error(make_api) -> None:
    """Test voters response that is not a list."""
    api = make_api(Recorder(payload={"id": "1"}))

    with pytest.raises(DecodeError):
        api.get_voters().result(timeout=5)


# =============================================================================
# Search
# =============================================================================


def _page(bot_payload, ids, offset, total):
    results = [{**bot_payload, "id": i} for i in ids]
    return {
        "results": results,
        "limit": 2,
        "offset": offset,
        "count": len(results),
        "total": total,
    }


def test_get_bots_sends_query_parameters(make_api, bot_payload) -> None:
    """Test search query parameters."""
    handler = Recorder(payload=_page(bot_payload, ["1"], 10, 11))
    api = make_api(handler)

    page = api.get_bots(
        search={"lib": "discord.py", "prefix": "!"},
        sort="-points",
        limit=25,
        offset=10,
        fields=["id", "username"],
    ).result(timeout=5)

    assert isinstance(page, BotResult)
    assert [b.id for b in page.results] == ["1"]
    params = handler.last.url.params
    assert handler.last.url.path == "/api/bots"
    assert params["search"] == "lib: discord.py prefix: !"
    assert params["sort"] == "-points"
    assert params["limit"] == "25"
    assert params["offset"] == "10"
    assert params["fields"] == "id,username"


def test_get_bots_omits_unset_parameters(make_api, bot_payload) -> None:
    """Test that unset search parameters are not sent."""
    handler = Recorder(payload=_page(bot_payload, [], 0, 0))
    api = make_api(handler)

    api.get_bots().result(timeout=5)

    assert dict(handler.last.url.params) == {"limit": "50", "offset": "0"}


def test_get_bots_uses_custom_search_encoder(make_api, bot_payload) -> None:
    """Test search with a custom encoder."""
    handler = Recorder(payload=_page(bot_payload, [], 0, 0))
    api = make_api(handler, search_encoder=lambda c: "&".join(f"{k}={v}" for k, v in c.items()))

    api.get_bots(search={"lib": "discord.js"}).result(timeout=5)

    assert handler.last.url.params["search"] == "lib=discord.js"


@pytest.mark.parametrize("kwargs", [{"limit": 0}, {"limit": 501}, {"offset": -1}])
def test_get_bots_rejects_out_of_range_paging(make_api, kwargs) -> None:
    """Test that out-of-range limit or offset is rejected."""
    api = make_api(Recorder())

    with pytest.raises(ValueError):
        api.get_bots(**kwargs)


def test_iter_bots_walks_pages(make_api, bot_payload) -> None:
    """Test iterating over every search page."""
    pages = {
        "0": _page(bot_payload, ["1", "2"], 0, 5),
        "2": _page(bot_payload, ["3", "4"], 2, 5),
        "4": _page(bot_payload, ["5"], 4, 5),
    }
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        offset = request.url.params["offset"]
        seen.append(offset)
        return httpx.Response(200, json=pages[offset])

    api = make_api(handler)

    ids = [bot.id for bot in api.iter_bots(page_size=2, timeout=5)]

    assert ids == ["1", "2", "3", "4", "5"]
    assert seen == ["0", "2", "4"]


# =============================================================================
# Authentication and lifecycle
# =============================================================================


def test_every_request_is_authorized(make_api, bot_payload, user_payload) -> None:
    """Test that each endpoint sends the token."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.startswith("/api/users"):
            return httpx.Response(200, json=user_payload)
        if request.url.path.endswith("/check"):
            return httpx.Response(200, json={"voted": 1})
        return httpx.Response(200, json=bot_payload)

    api = make_api(handler)
    api.get_bot("1").result(timeout=5)
    api.get_user(USER_ID).result(timeout=5)
    api.has_voted(USER_ID).result(timeout=5)
    api.set_stats(server_count=3).result(timeout=5)

    assert len(seen) == 4
    assert all(r.headers["authorization"] == TOKEN for r in seen)


def test_concurrent_calls_resolve_independently(make_api, bot_payload) -> None:
    """Test many concurrent lookups."""
    def handler(request: httpx.Request) -> httpx.Response:
        ident = request.url.path.rsplit("/", 1)[-1]
        return httpx.Response(200, json={**bot_payload, "id": ident})

    api = make_api(handler)

    pendings = {str(i): api.get_bot(str(i)) for i in range(1, 21)}

    for ident, pending in pendings.items():
        assert pending.result(timeout=5).id == ident


def test_create_builds_credential() -> None:
    """Test the create() constructor."""
    transport = HttpxTransport(
        HttpClientConfig(base_url=BASE_URL),
        transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"voted": 0})),
    )
    with DiscordBotListAPI.create(
        TOKEN, int(BOT_ID), config=HttpClientConfig(base_url=BASE_URL), transport=transport
    ) as api:
        assert api.bot_id == BOT_ID
        assert api.has_voted(USER_ID).result(timeout=5) is False

    assert transport.closed


def test_create_rejects_non_numeric_bot_id() -> None:
    """Test create() with a non-numeric bot ID."""
    with pytest.raises(ValueError):
        DiscordBotListAPI.create(TOKEN, "my-bot")


def test_get_stats_without_server_count_is_decode_error(make_api) -> None:
    """Test stats response without a server count."""
    api = make_api(Recorder(payload={}))

    with pytest.raises(DecodeError):
        api.get_stats().result(timeout=5)


def test_unexpected_transport_failure_rejects_instead_of_hanging(make_api) -> None:
    """Test that a non-httpx failure still completes the result."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise RuntimeError("boom")

    api = make_api(handler)

    error = api.get_bot("999").exception(timeout=5)

    assert isinstance(error, NetworkError)
    assert isinstance(error.cause, RuntimeError)
