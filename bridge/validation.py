"""
Environment variable validation.

Every variable the service reads has one entry in ``ENV_RULES``: whether
it is required (possibly only in production) and a check returning a
human-readable message when the value is unacceptable. Validation never
raises for bad values and never logs; the outcome is returned as a
``ValidationResult`` for the caller to act on.
"""

import re
from dataclasses import dataclass
from typing import Callable, Mapping

from pydantic import AnyUrl, BaseModel, Field, TypeAdapter, ValidationError

from bridge.config import DEFAULT_CLAUDE_MODEL, Environment, LogLevel, Region, parse_port

Check = Callable[[str], str | None]
RequiredWhen = Callable[[str | None], bool]

MIN_SECRET_LENGTH = 32

# Monday.com API tokens are JWTs
JWT_PATTERN = re.compile(r"^eyJ[a-zA-Z0-9_-]+\.[a-zA-Z0-9_-]+\.[a-zA-Z0-9_-]+\Z")
CLAUDE_KEY_PATTERN = re.compile(r"^sk-ant-api")
REDIS_URL_PATTERN = re.compile(r"^rediss?://")

SUPPORTED_CLAUDE_MODELS: tuple[str, ...] = (
    DEFAULT_CLAUDE_MODEL,
    "claude-3-sonnet-20240229",
    "claude-3-haiku-20240307",
    "claude-3-5-sonnet-20240620",
    "claude-3-5-sonnet-20241022",
    "claude-3-5-haiku-20241022",
    "claude-2.1",
    "claude-2.0",
    "claude-instant-1.2",
)

_url_adapter = TypeAdapter(AnyUrl)


class ValidationResult(BaseModel):
    """Outcome of validating the environment."""

    valid: bool = Field(..., description="True when there are no errors.")
    errors: list[str] = Field(default_factory=list, description="Problems that block startup.")
    warnings: list[str] = Field(default_factory=list, description="Problems that do not block startup.")


@dataclass(frozen=True)
class EnvRule:
    """Validation rule for a single environment variable."""

    name: str
    required: RequiredWhen
    check: Check


# ---------------------------------------------------------------------------
# Required-ness predicates
# ---------------------------------------------------------------------------

def always(environment: str | None) -> bool:
    return True


def never(environment: str | None) -> bool:
    return False


def in_production(environment: str | None) -> bool:
    return environment == Environment.PRODUCTION.value


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------

def required_message(name: str) -> str:
    return f"{name} is required but missing or empty"


def exists(name: str) -> Check:
    def check(value: str) -> str | None:
        if not value.strip():
            return required_message(name)
        return None

    return check


def absolute_url(name: str) -> Check:
    def check(value: str) -> str | None:
        try:
            _url_adapter.validate_python(value)
        except ValidationError:
            return f"{name} is not a valid URL"
        return None

    return check


def matches(name: str, pattern: re.Pattern, description: str) -> Check:
    def check(value: str) -> str | None:
        if not pattern.search(value):
            return f"{name} has invalid format. Expected {description}"
        return None

    return check


def min_length(name: str, length: int = MIN_SECRET_LENGTH) -> Check:
    def check(value: str) -> str | None:
        if len(value) < length:
            return f"{name} should be at least {length} characters long"
        return None

    return check


def one_of(name: str, allowed: tuple[str, ...], ignore_case: bool = False) -> Check:
    def check(value: str) -> str | None:
        candidate = value.lower() if ignore_case else value
        if candidate not in allowed:
            return f"{name} must be one of: {', '.join(allowed)}"
        return None

    return check


def region(name: str) -> Check:
    allowed = tuple(r.value for r in Region)

    def check(value: str) -> str | None:
        if value not in allowed:
            return f'{name} must be either "US" or "EU"'
        return None

    return check


def port(name: str) -> Check:
    def check(value: str) -> str | None:
        if parse_port(value) is None:
            return f"{name} must be a number between 1 and 65535"
        return None

    return check


def redis_url(name: str) -> Check:
    def check(value: str) -> str | None:
        if not REDIS_URL_PATTERN.match(value):
            return f"{name} must start with redis:// or rediss://"
        return None

    return check


def all_of(*checks: Check) -> Check:
    """Run *checks* in order and return the first failure message."""

    def check(value: str) -> str | None:
        for inner in checks:
            message = inner(value)
            if message is not None:
                return message
        return None

    return check


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------

ENV_RULES: tuple[EnvRule, ...] = (
    EnvRule("MONDAY_CLIENT_ID", always, exists("MONDAY_CLIENT_ID")),
    EnvRule("MONDAY_CLIENT_SECRET", always, exists("MONDAY_CLIENT_SECRET")),
    EnvRule("MONDAY_SIGNING_SECRET", always, exists("MONDAY_SIGNING_SECRET")),
    EnvRule(
        "REDIRECT_URI",
        always,
        all_of(exists("REDIRECT_URI"), absolute_url("REDIRECT_URI")),
    ),
    EnvRule(
        "MONDAY_API_TOKEN",
        in_production,
        all_of(
            exists("MONDAY_API_TOKEN"),
            matches("MONDAY_API_TOKEN", JWT_PATTERN, "JWT token format"),
        ),
    ),
    EnvRule(
        "CLAUDE_API_KEY",
        in_production,
        all_of(
            exists("CLAUDE_API_KEY"),
            matches(
                "CLAUDE_API_KEY",
                CLAUDE_KEY_PATTERN,
                "Claude API key format (starts with sk-ant-api)",
            ),
        ),
    ),
    EnvRule(
        "ENCRYPTION_KEY",
        always,
        all_of(exists("ENCRYPTION_KEY"), min_length("ENCRYPTION_KEY")),
    ),
    EnvRule(
        "SESSION_SECRET",
        always,
        all_of(exists("SESSION_SECRET"), min_length("SESSION_SECRET")),
    ),
    EnvRule("ADMIN_API_KEY", never, min_length("ADMIN_API_KEY")),
    EnvRule("REGION", in_production, region("REGION")),
    EnvRule("PORT", in_production, port("PORT")),
    EnvRule("APP_ENV", never, one_of("APP_ENV", tuple(e.value for e in Environment))),
    EnvRule("REDIS_URL", never, redis_url("REDIS_URL")),
    EnvRule("CLAUDE_MODEL", never, one_of("CLAUDE_MODEL", SUPPORTED_CLAUDE_MODELS)),
    EnvRule(
        "LOG_LEVEL",
        never,
        one_of("LOG_LEVEL", tuple(level.value for level in LogLevel), ignore_case=True),
    ),
)


def validate_environment(
    env: Mapping[str, str | None],
    rules: tuple[EnvRule, ...] = ENV_RULES,
) -> ValidationResult:
    """
    Validate raw environment values against the rule table.

    A required variable that is absent or blank produces a "required"
    error and is not checked further. A present value that fails its
    check is an error when the variable is required in the current
    environment, otherwise a warning. Absent optional variables are
    skipped. Messages keep rule-table order.

    Args:
        env: Raw environment values, keyed by variable name.
        rules: Rule table to apply.

    Returns:
        The ValidationResult; ``valid`` is False only when there are errors.
    """
    environment = env.get("APP_ENV")
    errors: list[str] = []
    warnings: list[str] = []

    for rule in rules:
        value = env.get(rule.name)
        required = rule.required(environment)

        if required and (not value or not value.strip()):
            errors.append(required_message(rule.name))
            continue

        if not value:
            continue

        message = rule.check(value)
        if message is None:
            continue
        if required:
            errors.append(message)
        else:
            warnings.append(message)

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)
