"""Tests for the resource models."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from dblapi.core.api.dbl.models import Bot, BotResult, BotStats, SimpleUser, User


def test_bot_maps_camel_case_aliases(bot_payload) -> None:
    """Test that camelCase API keys map to model fields."""
    bot = Bot.model_validate(bot_payload)

    assert bot.default_avatar == bot_payload["defAvatar"]
    assert bot.long_description.startswith("# Luca")
    assert bot.certified_bot is False
    assert bot.points == 397
    assert bot.date == datetime(2017, 4, 26, 18, 8, 17, 125000, tzinfo=UTC)


def test_bot_ignores_unknown_fields(bot_payload) -> None:
    """Test that unknown API fields are ignored."""
    bot = Bot.model_validate({**bot_payload, "donatebotguildid": "", "legacy": True})
    assert bot == Bot.model_validate(bot_payload)


def test_bot_requires_id_and_username() -> None:
    """Test that a bot without an ID is rejected."""
    with pytest.raises(ValidationError):
        Bot.model_validate({"username": "nameless"})


def test_numeric_ids_are_coerced_to_strings() -> None:
    """Test that numeric snowflakes become strings."""
    user = SimpleUser.model_validate({"id": 140862798832861184, "username": "x"})
    assert user.id == "140862798832861184"


def test_models_accept_field_names() -> None:
    """Test populating models by field name."""
    user = User(id="1", username="x", certified_dev=True, web_mod=True)
    assert user.certified_dev and user.web_mod


def test_models_are_frozen() -> None:
    """Test that decoded models are immutable."""
    stats = BotStats(server_count=1)
    with pytest.raises(ValidationError):
        stats.server_count = 2


def test_stats_require_server_count() -> None:
    """Test that stats without a server count are rejected rather than defaulted."""
    with pytest.raises(ValidationError):
        BotStats.model_validate({})


def test_stats_shard_fields_default_empty() -> None:
    """Test that shard fields are optional when only a total is posted."""
    stats = BotStats.model_validate({"server_count": 12})
    assert stats.shards == []
    assert stats.shard_count is None


def test_stats_rejects_negative_count() -> None:
    """Test that negative server counts are rejected."""
    with pytest.raises(ValidationError):
        BotStats(server_count=-5)


def test_user_social_defaults(user_payload) -> None:
    """Test default social links on a user profile."""
    payload = {k: v for k, v in user_payload.items() if k != "social"}
    user = User.model_validate(payload)
    assert user.social.github is None


def test_bot_result_page(bot_payload) -> None:
    """Test decoding a search result page."""
    page = BotResult.model_validate(
        {"results": [bot_payload], "limit": 50, "offset": 0, "count": 1, "total": 1}
    )
    assert page.count == 1
    assert page.results[0].id == bot_payload["id"]


def test_bot_result_requires_paging_fields() -> None:
    """Test that a page without paging fields is rejected."""
    with pytest.raises(ValidationError):
        BotResult.model_validate({"results": []})
