"""
Startup checks and logging setup.

Validation itself is pure (see ``bridge.validation``); this module is
where its result gets logged and turned into a go / no-go decision for
the application.
"""

import logging
from typing import Mapping

from bridge.config import Configuration, LogLevel
from bridge.validation import ValidationResult, validate_environment

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_LOG_LEVELS: dict[LogLevel, int] = {
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.TRACE: TRACE,
}


class EnvironmentValidationError(RuntimeError):
    """Raised when the environment is not fit for the application to start."""

    def __init__(self, result: ValidationResult):
        super().__init__(
            "Environment validation failed: " + "; ".join(result.errors)
        )
        self.result = result


def logging_level(level: LogLevel) -> int:
    """Translate a configured log level into a ``logging`` level number."""
    return _LOG_LEVELS[level]


def configure_logging(level: LogLevel = LogLevel.INFO) -> None:
    """Configure root logging with the service's format and *level*."""
    numeric = logging_level(level)
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    logging.getLogger().setLevel(numeric)


def log_validation_result(result: ValidationResult) -> None:
    """Emit one log record per outcome category of *result*."""
    if result.errors:
        logger.error(
            "Environment validation failed:\n%s",
            "\n".join(f"- {error}" for error in result.errors),
        )

    if result.warnings:
        logger.warning(
            "Environment validation warnings:\n%s",
            "\n".join(f"- {warning}" for warning in result.warnings),
        )

    if not result.errors and not result.warnings:
        logger.info("Environment validation successful.")


def ensure_valid_environment(
    env: Mapping[str, str | None],
    configuration: Configuration,
) -> ValidationResult | None:
    """
    Validate *env* and refuse to continue if it is invalid.

    Validation is skipped when the application runs in the ``test``
    environment.

    Returns:
        The ValidationResult, or None when validation was skipped.

    Raises:
        EnvironmentValidationError: If validation reported errors.
    """
    if configuration.is_test:
        logger.debug("Skipping environment validation in test mode.")
        return None

    result = validate_environment(env)
    log_validation_result(result)

    if not result.valid:
        logger.error("Please fix the issues above and restart the application.")
        raise EnvironmentValidationError(result)

    logger.info("Using %s region configuration.", configuration.region.value)
    return result
