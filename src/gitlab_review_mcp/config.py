"""Configuration loading for gitlab-review-mcp.

Configuration is supplied by the host environment (e.g., MCP client config), not by the agent.
The access token is a secret and must never be emitted to agents or logs.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from urllib.parse import urlparse

from .errors import ConfigurationError

DEFAULT_API_URL = "https://gitlab.com/api/v4"

TOKEN_ENV = "GITLAB_PERSONAL_ACCESS_TOKEN"
API_URL_ENV = "GITLAB_API_URL"


@dataclass(frozen=True, slots=True)
class LimitsConfig:
    """Network limits for a single upstream request."""

    total_timeout_s: float = 30.0
    connect_timeout_s: float = 5.0
    read_timeout_s: float = 30.0


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Process-wide, read-only settings established once at startup."""

    access_token: str = field(repr=False)
    api_url: str = DEFAULT_API_URL
    limits: LimitsConfig = field(default_factory=LimitsConfig)


def _normalize_api_url(value: str | None) -> str:
    if value is None or not value.strip():
        return DEFAULT_API_URL

    url = value.strip().rstrip("/")
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(f"{API_URL_ENV} must be an http(s) URL")
    return url


def load_config_from_env(environ: Mapping[str, str] | None = None) -> AppConfig:
    """Load and validate configuration from environment variables.

    Raises:
        ConfigurationError: If the access token is missing or the API URL is invalid.
    """
    env = os.environ if environ is None else environ

    token = (env.get(TOKEN_ENV) or "").strip()
    if not token:
        raise ConfigurationError(f"{TOKEN_ENV} environment variable is not set")

    return AppConfig(
        access_token=token,
        api_url=_normalize_api_url(env.get(API_URL_ENV)),
        limits=LimitsConfig(),
    )
