"""Shared pytest fixtures for dblapi tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest

from dblapi.core.api.dbl.client import DiscordBotListAPI
from dblapi.core.api.http.auth import Credential
from dblapi.core.api.http.config import HttpClientConfig
from dblapi.core.api.http.transport import HttpxTransport
from tests.doubles import BASE_URL, BOT_ID, TOKEN


@pytest.fixture
def credential() -> Credential:
    return Credential(token=TOKEN, bot_id=BOT_ID)


@pytest.fixture
def http_config() -> HttpClientConfig:
    return HttpClientConfig(base_url=BASE_URL, max_workers=4)


@pytest.fixture
def make_api(
    credential: Credential, http_config: HttpClientConfig
) -> Iterator[Callable[..., DiscordBotListAPI]]:
    """Factory for clients wired to an httpx.MockTransport handler."""
    created: list[DiscordBotListAPI] = []

    def _make(
        handler: Callable[[httpx.Request], httpx.Response], **kwargs: Any
    ) -> DiscordBotListAPI:
        transport = HttpxTransport(http_config, transport=httpx.MockTransport(handler))
        api = DiscordBotListAPI(credential, config=http_config, transport=transport, **kwargs)
        created.append(api)
        return api

    yield _make

    for api in created:
        api.close()


@pytest.fixture
def bot_payload() -> dict[str, Any]:
    """Bot listing as returned by GET /bots/{id}."""
    return {
        "id": BOT_ID,
        "username": "Luca",
        "discriminator": "1375",
        "avatar": "7edcc4c6fbb0b23762455ca139f0e1c9",
        "defAvatar": "6debd47ed13483642cf09e832ed0bc1b",
        "lib": "discord.js",
        "prefix": "- or @Luca",
        "shortdesc": "Luca is a bot for managing and informing members of the server",
        "longdesc": "# Luca\nA moderation and information bot.",
        "tags": ["Moderation", "Role Management", "Logging"],
        "website": "https://luca.example.test",
        "support": "KYZsaFb",
        "owners": ["129908908096487424"],
        "guilds": [],
        "invite": "https://discord.com/oauth2/authorize?client_id=264811613708746752",
        "date": "2017-04-26T18:08:17.125Z",
        "certifiedBot": False,
        "vanity": "luca",
        "points": 397,
        "monthlyPoints": 19,
        "server_count": 1200,
        "shards": [],
    }


@pytest.fixture
def user_payload() -> dict[str, Any]:
    """User profile as returned by GET /users/{id}."""
    return {
        "id": "140862798832861184",
        "username": "Xetera",
        "discriminator": "0001",
        "avatar": "a_1241439d430def25c100dd28add2d42f",
        "defAvatar": "322c936a8c8be1b803cd94861bdfa868",
        "bio": "Writes bots.",
        "banner": None,
        "social": {"github": "Xetera", "twitter": "xetera"},
        "color": "#7289da",
        "supporter": True,
        "certifiedDev": True,
        "mod": False,
        "webMod": False,
        "admin": False,
    }


@pytest.fixture
def anyio_backend() -> str:
    """Run anyio-marked tests on asyncio only; the library bridges into asyncio."""
    return "asyncio"
