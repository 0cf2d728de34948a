"""
Application configuration resolved from environment variables.

The process environment (plus an optional ``.env`` file) is read exactly
once through pydantic-settings into a flat name -> value mapping. Both the
resolver below and the validator in ``bridge.validation`` work on that
mapping, so they can be exercised with a plain dict.
"""

import re
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


# ---------------------------------------------------------------------------
# Enumerations and fixed endpoints
# ---------------------------------------------------------------------------

class Region(str, Enum):
    US = "US"
    EU = "EU"


class Environment(str, Enum):
    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"
    TRACE = "trace"


DEFAULT_PORT = 3000
DEFAULT_CLAUDE_API_URL = "https://api.anthropic.com/v1/messages"
DEFAULT_CLAUDE_API_VERSION = "2023-06-01"
DEFAULT_CLAUDE_MODEL = "claude-3-opus-20240229"

MONDAY_API_URL_US = "https://api.monday.com/v2"
MONDAY_API_URL_EU = "https://api.eu1.monday.com/v2"

_PORT_PATTERN = re.compile(r"^\d+$")


class RegionConfig(BaseModel):
    """Endpoint set selected by the deployment region."""

    model_config = ConfigDict(frozen=True)

    monday_api_url: str
    claude_api_url: str


REGION_CONFIGS: dict[Region, RegionConfig] = {
    Region.US: RegionConfig(
        monday_api_url=MONDAY_API_URL_US,
        claude_api_url=DEFAULT_CLAUDE_API_URL,
    ),
    Region.EU: RegionConfig(
        monday_api_url=MONDAY_API_URL_EU,
        claude_api_url=DEFAULT_CLAUDE_API_URL,
    ),
}


# ---------------------------------------------------------------------------
# Environment snapshot
# ---------------------------------------------------------------------------

class EnvironmentSnapshot(BaseSettings):
    """Raw values of every environment variable the service understands."""

    MONDAY_CLIENT_ID: str | None = None
    MONDAY_CLIENT_SECRET: str | None = None
    MONDAY_SIGNING_SECRET: str | None = None
    REDIRECT_URI: str | None = None
    MONDAY_API_TOKEN: str | None = None
    MONDAY_API_URL: str | None = None

    CLAUDE_API_KEY: str | None = None
    CLAUDE_API_URL: str | None = None
    CLAUDE_API_VERSION: str | None = None
    CLAUDE_MODEL: str | None = None

    PORT: str | None = None
    APP_ENV: str | None = None
    REGION: str | None = None

    ENCRYPTION_KEY: str | None = None
    SESSION_SECRET: str | None = None
    ADMIN_API_KEY: str | None = None

    REDIS_URL: str | None = None
    REDIS_PASSWORD: str | None = None

    LOG_LEVEL: str | None = None
    SENTRY_DSN: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    def as_mapping(self) -> dict[str, str | None]:
        """Return the snapshot as a plain variable-name -> value dict."""
        return self.model_dump()


ENVIRONMENT_VARIABLES: tuple[str, ...] = tuple(EnvironmentSnapshot.model_fields)


def load_environment() -> dict[str, str | None]:
    """Read the process environment (and ``.env``) into a fresh mapping."""
    return EnvironmentSnapshot().as_mapping()


@lru_cache
def get_environment() -> Mapping[str, str | None]:
    """Process-wide, read-only environment snapshot taken on first use."""
    return MappingProxyType(load_environment())


# ---------------------------------------------------------------------------
# Resolved configuration
# ---------------------------------------------------------------------------

class Configuration(BaseModel):
    """Resolved, defaulted and immutable service configuration."""

    model_config = ConfigDict(frozen=True)

    # Monday.com OAuth credentials
    monday_client_id: str | None = None
    monday_client_secret: str | None = None
    monday_signing_secret: str | None = None
    redirect_uri: str | None = None

    # Monday.com API
    monday_api_token: str | None = None
    monday_api_url: str = MONDAY_API_URL_US

    # Claude API
    claude_api_key: str | None = None
    claude_api_url: str = DEFAULT_CLAUDE_API_URL
    claude_api_version: str = DEFAULT_CLAUDE_API_VERSION
    claude_model: str = DEFAULT_CLAUDE_MODEL

    # Server
    port: int = DEFAULT_PORT
    environment: Environment = Environment.DEVELOPMENT
    region: Region = Region.US

    # Security
    encryption_key: str | None = None
    session_secret: str | None = None
    admin_api_key: str | None = None

    # Cache
    redis_url: str | None = None
    redis_password: str | None = None

    # Monitoring
    log_level: LogLevel = LogLevel.INFO
    sentry_dsn: str | None = None

    @property
    def is_production(self) -> bool:
        return self.environment is Environment.PRODUCTION

    @property
    def is_test(self) -> bool:
        return self.environment is Environment.TEST


def parse_port(raw: str | None) -> int | None:
    """
    Parse a port number, returning None unless it is a decimal integer
    in the range 1-65535.
    """
    if raw is None:
        return None
    value = raw.strip()
    if not _PORT_PATTERN.match(value):
        return None
    port = int(value)
    if 1 <= port <= 65535:
        return port
    return None


def resolve_region(raw: str | None) -> Region:
    """Map any region string onto a supported region; unknown values mean US."""
    try:
        return Region((raw or "").upper())
    except ValueError:
        return Region.US


def region_config(raw: str | None) -> RegionConfig:
    """Return the endpoint set for *raw*, falling back to the US endpoints."""
    return REGION_CONFIGS[resolve_region(raw)]


def _value(env: Mapping[str, str | None], name: str) -> str | None:
    value = env.get(name)
    return value if value else None


def resolve_configuration(env: Mapping[str, str | None]) -> Configuration:
    """
    Build a Configuration from a variable-name -> value mapping.

    Absent or empty variables take their defaults. Values that cannot be
    interpreted (an unknown region, environment or log level, a bad port)
    also fall back to their defaults here; reporting them is the job of
    ``bridge.validation.validate_environment``.

    Args:
        env: Raw environment values, as returned by ``load_environment``.

    Returns:
        The resolved Configuration.
    """
    region = resolve_region(_value(env, "REGION"))
    endpoints = REGION_CONFIGS[region]

    try:
        environment = Environment(_value(env, "APP_ENV") or Environment.DEVELOPMENT.value)
    except ValueError:
        environment = Environment.DEVELOPMENT

    try:
        log_level = LogLevel((_value(env, "LOG_LEVEL") or LogLevel.INFO.value).lower())
    except ValueError:
        log_level = LogLevel.INFO

    port = parse_port(_value(env, "PORT"))

    return Configuration(
        monday_client_id=_value(env, "MONDAY_CLIENT_ID"),
        monday_client_secret=_value(env, "MONDAY_CLIENT_SECRET"),
        monday_signing_secret=_value(env, "MONDAY_SIGNING_SECRET"),
        redirect_uri=_value(env, "REDIRECT_URI"),
        monday_api_token=_value(env, "MONDAY_API_TOKEN"),
        monday_api_url=_value(env, "MONDAY_API_URL") or endpoints.monday_api_url,
        claude_api_key=_value(env, "CLAUDE_API_KEY"),
        claude_api_url=_value(env, "CLAUDE_API_URL") or endpoints.claude_api_url,
        claude_api_version=_value(env, "CLAUDE_API_VERSION") or DEFAULT_CLAUDE_API_VERSION,
        claude_model=_value(env, "CLAUDE_MODEL") or DEFAULT_CLAUDE_MODEL,
        port=port if port is not None else DEFAULT_PORT,
        environment=environment,
        region=region,
        encryption_key=_value(env, "ENCRYPTION_KEY"),
        session_secret=_value(env, "SESSION_SECRET"),
        admin_api_key=_value(env, "ADMIN_API_KEY"),
        redis_url=_value(env, "REDIS_URL"),
        redis_password=_value(env, "REDIS_PASSWORD"),
        log_level=log_level,
        sentry_dsn=_value(env, "SENTRY_DSN"),
    )


@lru_cache
def get_configuration() -> Configuration:
    """
    Return the process-wide Configuration.

    Built once from ``get_environment()`` and never rebuilt.
    """
    return resolve_configuration(get_environment())
