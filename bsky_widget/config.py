"""Application configuration loaded from environment variables."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from bsky_widget.errors import ConfigError, MissingConfigError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://bsky.social"


class BlueskyConfig(BaseModel):
    """Settings for the upstream Bluesky API."""

    identifier: str = ""
    password: str = ""
    base_url: str = DEFAULT_BASE_URL
    request_timeout_seconds: float = 10.0


class ServerConfig(BaseModel):
    """Settings for the widget HTTP server."""

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8080


class WidgetConfig(BaseModel):
    """Top-level configuration."""

    log_level: str = "INFO"
    home: str = "~/.bsky_widget"
    bluesky: BlueskyConfig = Field(default_factory=BlueskyConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


# env var -> (section, field); section None means top-level
_ENV_FIELDS: dict[str, tuple[str | None, str]] = {
    "BLUESKY_USERNAME": ("bluesky", "identifier"),
    "BLUESKY_PASSWORD": ("bluesky", "password"),
    "BLUESKY_BASE_URL": ("bluesky", "base_url"),
    "BSKY_WIDGET_TIMEOUT": ("bluesky", "request_timeout_seconds"),
    "BSKY_WIDGET_HOST": ("server", "host"),
    "BSKY_WIDGET_PORT": ("server", "port"),
    "BSKY_WIDGET_HOME": (None, "home"),
    "BSKY_WIDGET_LOG_LEVEL": (None, "log_level"),
}


def load_config(environ: Mapping[str, str] | None = None) -> WidgetConfig:
    """Build the config from *environ* (default: ``os.environ`` plus ``.env``).

    Blank values are treated as unset so pydantic defaults apply.
    Raises ``ConfigError`` if a value fails validation.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    data: dict[str, object] = {}
    for var, (section, field) in _ENV_FIELDS.items():
        value = environ.get(var, "").strip()
        if not value:
            continue
        if section is None:
            data[field] = value
        else:
            data.setdefault(section, {})[field] = value  # type: ignore[index]

    try:
        config = WidgetConfig.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid configuration: {exc}"
        raise ConfigError(msg) from exc

    logger.debug("Config loaded from environment (%d values set)", len(data))
    return config


@dataclass(frozen=True, slots=True)
class Credentials:
    """Login credentials plus the API origin they belong to."""

    identifier: str
    password: str
    base_url: str


def normalize_base_url(base_url: str) -> str:
    """Strip whitespace and trailing slashes; blank falls back to the default."""
    return base_url.strip().rstrip("/") or DEFAULT_BASE_URL


def get_credentials(config: BlueskyConfig) -> Credentials:
    """Return the login credentials. Raises ``MissingConfigError`` if unset."""
    missing = [
        name
        for name, value in (
            ("BLUESKY_USERNAME", config.identifier),
            ("BLUESKY_PASSWORD", config.password),
        )
        if not value
    ]
    if missing:
        msg = f"Missing configuration: {', '.join(missing)}"
        raise MissingConfigError(msg)
    return Credentials(
        identifier=config.identifier,
        password=config.password,
        base_url=normalize_base_url(config.base_url),
    )


def resolve_home(config: WidgetConfig) -> Path:
    """Expand ``~`` in the configured home directory."""
    return Path(config.home).expanduser()
