"""
Tests for the startup gate, validation logging and the app lifespan.
"""

import logging
from unittest.mock import AsyncMock, patch

import pytest

from bridge import main as main_module
from bridge.config import LogLevel, resolve_configuration
from bridge.startup import (
    TRACE,
    EnvironmentValidationError,
    ensure_valid_environment,
    log_validation_result,
    logging_level,
)
from bridge.validation import ValidationResult


def test_validation_skipped_in_test_mode():
    env = {"APP_ENV": "test"}

    with patch("bridge.startup.validate_environment") as mock_validate:
        result = ensure_valid_environment(env, resolve_configuration(env))

    assert result is None
    mock_validate.assert_not_called()


def test_valid_environment_passes(valid_env):
    result = ensure_valid_environment(valid_env, resolve_configuration(valid_env))

    assert result is not None
    assert result.valid is True


def test_invalid_environment_raises(valid_env):
    env = {**valid_env, "ENCRYPTION_KEY": "x" * 20}

    with pytest.raises(EnvironmentValidationError) as exc_info:
        ensure_valid_environment(env, resolve_configuration(env))

    assert exc_info.value.result.valid is False
    assert "ENCRYPTION_KEY should be at least 32 characters long" in str(exc_info.value)


def test_invalid_development_environment_also_raises(valid_env):
    env = {**valid_env, "APP_ENV": "development"}
    del env["MONDAY_CLIENT_ID"]

    with pytest.raises(EnvironmentValidationError):
        ensure_valid_environment(env, resolve_configuration(env))


def test_log_success(caplog):
    caplog.set_level(logging.INFO, logger="bridge.startup")

    log_validation_result(ValidationResult(valid=True))

    assert [r.levelno for r in caplog.records] == [logging.INFO]
    assert "successful" in caplog.records[0].getMessage()


def test_log_errors_and_warnings(caplog):
    caplog.set_level(logging.INFO, logger="bridge.startup")

    log_validation_result(
        ValidationResult(valid=False, errors=["first", "second"], warnings=["careful"])
    )

    assert [r.levelno for r in caplog.records] == [logging.ERROR, logging.WARNING]
    assert "- first\n- second" in caplog.records[0].getMessage()
    assert "- careful" in caplog.records[1].getMessage()


def test_log_warnings_only(caplog):
    caplog.set_level(logging.INFO, logger="bridge.startup")

    log_validation_result(ValidationResult(valid=True, warnings=["careful"]))

    assert [r.levelno for r in caplog.records] == [logging.WARNING]


@pytest.mark.parametrize(
    "level, expected",
    [
        (LogLevel.ERROR, logging.ERROR),
        (LogLevel.WARN, logging.WARNING),
        (LogLevel.INFO, logging.INFO),
        (LogLevel.DEBUG, logging.DEBUG),
        (LogLevel.TRACE, TRACE),
    ],
)
def test_logging_level_mapping(level, expected):
    assert logging_level(level) == expected


def test_trace_level_is_below_debug():
    assert TRACE < logging.DEBUG
    assert logging.getLevelName(TRACE) == "TRACE"


@pytest.mark.asyncio
async def test_lifespan_aborts_on_invalid_environment(valid_env):
    env = {**valid_env, "MONDAY_API_TOKEN": "not-a-jwt"}

    with patch.object(main_module, "get_environment", return_value=env), \
         patch.object(main_module, "get_configuration", return_value=resolve_configuration(env)), \
         patch.object(main_module, "open_upstream_client") as mock_create:
        with pytest.raises(EnvironmentValidationError):
            async with main_module.lifespan(main_module.app):
                pass

    mock_create.assert_not_called()


@pytest.mark.asyncio
async def test_lifespan_starts_and_stops_client(valid_env):
    with patch.object(main_module, "get_environment", return_value=valid_env), \
         patch.object(main_module, "get_configuration", return_value=resolve_configuration(valid_env)), \
         patch.object(main_module, "open_upstream_client") as mock_create, \
         patch.object(main_module, "close_upstream_client", new_callable=AsyncMock) as mock_close:
        async with main_module.lifespan(main_module.app):
            mock_create.assert_called_once()
            mock_close.assert_not_called()

    mock_close.assert_awaited_once()


def test_serve_runs_uvicorn_on_configured_port(valid_env):
    configuration = resolve_configuration({**valid_env, "PORT": "4321", "LOG_LEVEL": "warn"})

    with patch.object(main_module, "get_configuration", return_value=configuration), \
         patch.object(main_module.uvicorn, "run") as mock_run:
        main_module.serve()

    mock_run.assert_called_once_with(
        main_module.app, host="0.0.0.0", port=4321, log_level="warning"
    )
