"""Resource models for the Discord Bot List API.

Field names follow Python conventions; aliases map the API's camelCase keys.
Unknown keys are ignored so new API fields don't break decoding.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class DblModel(BaseModel):
    """Common configuration for API resources."""

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class BotStats(DblModel):
    """Server and shard counts last posted for a bot."""

    server_count: int = Field(ge=0, description="Total server count")
    shards: list[int] = Field(default_factory=list, description="Server count per shard")
    shard_count: int | None = Field(default=None, ge=0, description="Number of shards")


class SimpleUser(DblModel):
    """Abbreviated user record, as returned in voter lists."""

    id: str = Field(description="Discord user ID (snowflake)")
    username: str = Field(description="Discord username")
    discriminator: str | None = Field(default=None, description="Discord discriminator")
    avatar: str | None = Field(default=None, description="Avatar hash")
    default_avatar: str | None = Field(
        default=None, alias="defAvatar", description="Default avatar hash"
    )


class Social(DblModel):
    """Social links on a user profile."""

    youtube: str | None = None
    reddit: str | None = None
    twitter: str | None = None
    instagram: str | None = None
    github: str | None = None


class User(SimpleUser):
    """Full user profile."""

    bio: str | None = Field(default=None, description="Profile bio")
    banner: str | None = Field(default=None, description="Profile banner URL")
    social: Social = Field(default_factory=Social, description="Social links")
    color: str | None = Field(default=None, description="Profile colour (hex)")
    supporter: bool = False
    certified_dev: bool = Field(default=False, alias="certifiedDev")
    mod: bool = False
    web_mod: bool = Field(default=False, alias="webMod")
    admin: bool = False


class Bot(DblModel):
    """Bot listing."""

    id: str = Field(description="Bot user ID (snowflake)")
    username: str = Field(description="Bot username")
    discriminator: str | None = None
    avatar: str | None = None
    default_avatar: str | None = Field(default=None, alias="defAvatar")
    lib: str | None = Field(default=None, description="Library the bot is written with")
    prefix: str | None = Field(default=None, description="Command prefix")
    short_description: str | None = Field(default=None, alias="shortdesc")
    long_description: str | None = Field(default=None, alias="longdesc")
    tags: list[str] = Field(default_factory=list)
    website: str | None = None
    support: str | None = Field(default=None, description="Support server invite code")
    github: str | None = None
    owners: list[str] = Field(default_factory=list, description="Owner user IDs")
    guilds: list[str] = Field(default_factory=list, description="Featured guild IDs")
    invite: str | None = Field(default=None, description="Custom invite URL")
    date: datetime | None = Field(default=None, description="Date the bot was approved")
    certified_bot: bool = Field(default=False, alias="certifiedBot")
    vanity: str | None = None
    points: int = Field(default=0, description="All-time upvotes")
    monthly_points: int = Field(default=0, alias="monthlyPoints")
    server_count: int | None = None
    shard_count: int | None = None
    shards: list[int] = Field(default_factory=list)


class BotResult(DblModel):
    """One page of a bot search."""

    results: list[Bot] = Field(default_factory=list)
    limit: int = Field(ge=0, description="Page size requested")
    offset: int = Field(ge=0, description="Offset of this page")
    count: int = Field(ge=0, description="Number of results on this page")
    total: int | None = Field(default=None, ge=0, description="Total matching bots")
