"""Configuration loader for the apartment notifier."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .adapters.base import GeoPoint, SearchFilter
from .exceptions import ConfigError

DEFAULT_DATABASE_PATH = "./apartments.db"
DEFAULT_POLL_INTERVAL_MINUTES = 30

_SEARCH_KEYS = {"price_min", "price_max", "areas", "bounding_box", "per_page"}


@dataclass(frozen=True)
class Config:
    """Static settings resolved once at startup."""

    webhook_url: str
    error_webhook_url: Optional[str] = None
    status_webhook_url: Optional[str] = None
    database_path: str = DEFAULT_DATABASE_PATH
    poll_interval_minutes: int = DEFAULT_POLL_INTERVAL_MINUTES
    search_filter: SearchFilter = field(default_factory=SearchFilter)

    @property
    def poll_interval_seconds(self) -> int:
        return self.poll_interval_minutes * 60


def load_config(search_config_path: Optional[str] = None) -> Config:
    """
    Load configuration from environment variables and an optional YAML file.

    Args:
        search_config_path: YAML file overriding the default search filter.
                            Falls back to SEARCH_CONFIG_PATH when not given.

    Returns:
        Resolved Config

    Raises:
        ConfigError: If the primary webhook is unset or a value is invalid
    """
    # Load environment variables from .env file
    load_dotenv()

    try:
        webhook_url = get_env("DISCORD_WEBHOOK_URL", required=True)
    except ValueError as e:
        raise ConfigError(str(e)) from e

    interval = get_env("POLL_INTERVAL_MINUTES", str(DEFAULT_POLL_INTERVAL_MINUTES))
    try:
        poll_interval_minutes = int(interval)
    except ValueError as e:
        raise ConfigError(f"POLL_INTERVAL_MINUTES must be an integer, got {interval!r}") from e
    if poll_interval_minutes <= 0:
        raise ConfigError(f"POLL_INTERVAL_MINUTES must be positive, got {poll_interval_minutes}")

    search_config_path = search_config_path or get_env("SEARCH_CONFIG_PATH")
    search_filter = load_search_filter(search_config_path) if search_config_path else SearchFilter()

    return Config(
        webhook_url=webhook_url,
        error_webhook_url=get_env("DISCORD_ERROR_WEBHOOK_URL") or None,
        status_webhook_url=get_env("DISCORD_STATUS_WEBHOOK_URL") or None,
        database_path=get_env("DATABASE_PATH") or DEFAULT_DATABASE_PATH,
        poll_interval_minutes=poll_interval_minutes,
        search_filter=search_filter,
    )


def load_search_filter(config_path: str) -> SearchFilter:
    """
    Build a SearchFilter from the ``search`` section of a YAML file.

    Keys left out keep their defaults.
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise ConfigError(f"Search configuration file not found: {config_path}")

    try:
        with open(config_file, "r") as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"Expected a mapping at the top of {config_path}")

    search = config.get("search", {}) or {}
    if not isinstance(search, dict):
        raise ConfigError("The search section must be a mapping")

    unknown = set(search) - _SEARCH_KEYS
    if unknown:
        raise ConfigError(f"Unknown search settings: {', '.join(sorted(unknown))}")

    try:
        search_filter = SearchFilter(**_filter_kwargs(search))
        search_filter.validate()
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"Invalid search configuration: {e}") from e

    return search_filter


def _filter_kwargs(search: Dict[str, Any]) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {}
    for key in ("price_min", "price_max", "per_page"):
        if key in search:
            kwargs[key] = int(search[key])
    if "areas" in search:
        kwargs["areas"] = tuple(int(a) for a in search["areas"])
    if "bounding_box" in search:
        box = search["bounding_box"]
        kwargs["top_left"] = GeoPoint(
            float(box["top_left"]["latitude"]), float(box["top_left"]["longitude"])
        )
        kwargs["bottom_right"] = GeoPoint(
            float(box["bottom_right"]["latitude"]), float(box["bottom_right"]["longitude"])
        )
    return kwargs


def get_env(key: str, default: str = None, required: bool = False) -> str:
    """
    Get environment variable with optional default and required check.

    Raises:
        ValueError: If required and not set
    """
    value = os.getenv(key, default)
    if required and not value:
        raise ValueError(f"{key} environment variable is required")
    return value
