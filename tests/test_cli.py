"""
Tests for the operator command line.
"""

from unittest.mock import patch

import pytest

from bridge.cli import main


def test_check_reports_set_without_values(valid_env, capsys):
    env = dict(valid_env)
    del env["PORT"]

    with patch("bridge.cli.load_environment", return_value=env):
        exit_code = main(["check"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "- MONDAY_CLIENT_ID: Set" in out
    assert "- SENTRY_DSN: Not set" in out
    assert "- PORT: 3000 (default)" in out
    assert valid_env["MONDAY_CLIENT_SECRET"] not in out
    assert valid_env["ENCRYPTION_KEY"] not in out


def test_check_shows_configured_port(valid_env, capsys):
    with patch("bridge.cli.load_environment", return_value=valid_env):
        main(["check"])

    assert "- PORT: 8080" in capsys.readouterr().out


def test_validate_passes(valid_env, capsys):
    with patch("bridge.cli.load_environment", return_value=valid_env):
        exit_code = main(["validate"])

    assert exit_code == 0
    assert "passed" in capsys.readouterr().out


def test_validate_fails(valid_env, capsys):
    env = {**valid_env, "SESSION_SECRET": "short", "REDIS_URL": "memcached://x"}

    with patch("bridge.cli.load_environment", return_value=env):
        exit_code = main(["validate"])

    out = capsys.readouterr().out
    assert exit_code == 1
    assert "ERROR: SESSION_SECRET should be at least 32 characters long" in out
    assert "WARNING: REDIS_URL must start with redis:// or rediss://" in out


def test_generate_key(capsys):
    assert main(["generate-key", "--bytes", "16"]) == 0
    assert len(capsys.readouterr().out.strip()) == 32


def test_generate_key_rejects_zero_bytes():
    with pytest.raises(SystemExit) as exc_info:
        main(["generate-key", "--bytes", "0"])
    assert exc_info.value.code == 2


def test_command_is_required():
    with pytest.raises(SystemExit):
        main([])
