"""Discord Bot List endpoints and resource models."""

from dblapi.core.api.dbl.client import DiscordBotListAPI
from dblapi.core.api.dbl.models import Bot, BotResult, BotStats, SimpleUser, Social, User
from dblapi.core.api.dbl.search import SearchEncoder, encode_search

__all__ = [
    "DiscordBotListAPI",
    "Bot",
    "BotResult",
    "BotStats",
    "SimpleUser",
    "Social",
    "User",
    "SearchEncoder",
    "encode_search",
]
