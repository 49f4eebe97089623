"""
Configuration management for the feed splitter.

Provides centralized configuration using Pydantic for validation and
environment variable support. Supports splitter.yaml for per-deployment
settings.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_FEED_URL = "https://feed.podbean.com/badlandsmedia/feed.xml"
CONFIG_FILE_NAME = "splitter.yaml"


def load_splitter_yaml(search_dir: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load splitter.yaml configuration file.

    Searches for splitter.yaml starting from search_dir (or the current
    working directory) and walking up to 3 parent directories.

    Args:
        search_dir: Directory to start searching from

    Returns:
        Dictionary with splitter.yaml contents, or empty dict if not found
    """
    start = search_dir or Path.cwd()
    for parent in [start] + list(start.parents)[:3]:
        candidate = parent / CONFIG_FILE_NAME
        if candidate.exists():
            with open(candidate, "r", encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
    return {}


class Config(BaseSettings):
    """
    Application configuration with environment variable support.

    Configuration can be provided via:
    1. Environment variables (prefixed with FEED_SPLITTER_)
    2. .env file
    3. splitter.yaml
    4. Default values

    Example:
        export FEED_SPLITTER_FEED_URL="file:///srv/feed.xml"
        export FEED_SPLITTER_REFRESH_INTERVAL=60
    """

    model_config = SettingsConfigDict(
        env_prefix="FEED_SPLITTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Source feed
    feed_url: str = Field(
        default=DEFAULT_FEED_URL,
        description="Aggregated feed to split (http, https or file URL)"
    )
    refresh_interval: float = Field(
        default=300.0,
        gt=0,
        description="Seconds between feed refreshes (and first-run retries)"
    )
    fetch_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Per-attempt fetch timeout in seconds"
    )

    # HTTP server
    host: str = Field(
        default="0.0.0.0",
        description="Address to serve on"
    )
    port: int = Field(
        default=52390,
        ge=0,
        le=65535,
        description="Port to serve on"
    )

    # Output
    output_dir: Path = Field(
        default=Path("feeds"),
        description="Directory the split command writes <slug>.xml files to"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug logging"
    )


def get_config(search_dir: Optional[Path] = None) -> Config:
    """
    Get the application configuration instance.

    Values from splitter.yaml (if present) fill in settings that are not
    provided through environment variables or the .env file.

    Args:
        search_dir: Directory to start the splitter.yaml search from

    Returns:
        Config: Application configuration
    """
    env_config = Config()
    yaml_config = load_splitter_yaml(search_dir)
    if not yaml_config:
        return env_config

    # environment wins over the yaml file
    overrides = env_config.model_dump(exclude_unset=True)
    merged = {k: v for k, v in yaml_config.items() if k in Config.model_fields}
    merged.update(overrides)
    return Config(**merged)
