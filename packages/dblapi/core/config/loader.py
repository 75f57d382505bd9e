"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from dblapi.core.api.http.auth import Credential
from dblapi.core.api.http.config import HttpClientConfig

logger = logging.getLogger(__name__)

ENV_TOKEN = "DBL_TOKEN"
ENV_BOT_ID = "DBL_BOT_ID"
ENV_BASE_URL = "DBL_BASE_URL"


class ClientSettings(BaseModel):
    """Everything needed to build an API client."""

    model_config = {"frozen": True}

    credential: Credential
    http: HttpClientConfig = Field(default_factory=HttpClientConfig)


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("dbl.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return raw configuration dictionary.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            content = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            with path.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

    # safe_load returns None for empty files
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ValueError(f"Config root in {path} must be a mapping")
    return content


def _from_env(raw: dict[str, Any], key: str, env_var: str) -> Any:
    value = raw.get(key)
    if value is None:
        value = os.getenv(env_var)
        if value:
            logger.debug(f"Loaded {env_var} from environment")
    return value


def load_client_settings(path: str | Path | None = None) -> ClientSettings:
    """Load client settings from a config file and the environment.

    Values in the file win; DBL_TOKEN, DBL_BOT_ID and DBL_BASE_URL fill in
    anything the file leaves out.

    File layout::

        token: "..."
        bot_id: "264811613708746752"
        http:
          base_url: "https://discordbots.org/api"
          timeout: 10
          max_workers: 4

    Args:
        path: Optional path to a .json/.yaml/.yml file

    Returns:
        Validated ClientSettings

    Raises:
        ValueError: If the token or bot ID is missing, or the file is invalid
    """
    raw = load_config(path) if path is not None else {}

    token = _from_env(raw, "token", ENV_TOKEN)
    bot_id = _from_env(raw, "bot_id", ENV_BOT_ID)
    if not token:
        raise ValueError(f"API token is required (config 'token' or {ENV_TOKEN})")
    if not bot_id:
        raise ValueError(f"Bot ID is required (config 'bot_id' or {ENV_BOT_ID})")

    http = dict(raw.get("http") or {})
    base_url = _from_env(http, "base_url", ENV_BASE_URL)
    if base_url:
        http["base_url"] = base_url

    return ClientSettings(
        credential=Credential(token=str(token), bot_id=str(bot_id)),
        http=HttpClientConfig.model_validate(http),
    )
