"""Tests for configuration loading and validation."""

import pytest
from pydantic import ValidationError

from src.adapters.driven.config.settings import Settings, load_settings

__all__ = []


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    """Remove worker variables a developer .env may have loaded."""
    for name in (
        "TERMINATION_TIMEOUT_SECONDS",
        "TIMEOUT_EXIT_CODE",
        "GRACEFUL_EXIT_CODE",
        "WORK_UNIT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)


def test_settings_defaults() -> None:
    """Only the timeout is required."""
    settings = Settings(termination_timeout_sec=0.5)

    assert settings.timeout_exit_code == 1
    assert settings.graceful_exit_code == 0
    assert settings.work_unit_sec == 1.0


def test_settings_accepts_zero_timeout() -> None:
    """A zero grace period is valid."""
    assert Settings(termination_timeout_sec=0).termination_timeout_sec == 0


def test_settings_rejects_negative_timeout() -> None:
    """Settings should reject a negative grace period."""
    with pytest.raises(ValidationError):
        Settings(termination_timeout_sec=-1)


@pytest.mark.parametrize("code", [-1, 256])
def test_settings_rejects_out_of_range_exit_codes(code: int) -> None:
    """Exit codes must fit the process exit status range."""
    with pytest.raises(ValidationError):
        Settings(termination_timeout_sec=1, timeout_exit_code=code)
    with pytest.raises(ValidationError):
        Settings(termination_timeout_sec=1, graceful_exit_code=code)


def test_settings_rejects_non_positive_work_unit() -> None:
    """Work units must take some time."""
    with pytest.raises(ValidationError):
        Settings(termination_timeout_sec=1, work_unit_sec=0)


def test_settings_load_settings_success(monkeypatch) -> None:
    """Load Settings should create Settings object when the input is valid."""
    monkeypatch.setenv("TERMINATION_TIMEOUT_SECONDS", "0.5")
    monkeypatch.setenv("TIMEOUT_EXIT_CODE", "3")
    monkeypatch.setenv("GRACEFUL_EXIT_CODE", "42")
    monkeypatch.setenv("WORK_UNIT_SECONDS", "0.1")

    settings = load_settings()

    assert isinstance(settings, Settings)
    assert settings.termination_timeout_sec == 0.5
    assert settings.timeout_exit_code == 3
    assert settings.graceful_exit_code == 42
    assert settings.work_unit_sec == 0.1


def test_settings_load_settings_missing_timeout() -> None:
    """The grace period has no default."""
    with pytest.raises(RuntimeError, match="Missing required environment variable"):
        load_settings()


def test_settings_load_settings_negative_timeout(monkeypatch) -> None:
    """Load Settings should raise when the timeout is negative."""
    monkeypatch.setenv("TERMINATION_TIMEOUT_SECONDS", "-5")

    with pytest.raises(RuntimeError, match="must be a non-negative number"):
        load_settings()


def test_settings_load_settings_non_numeric_exit_code(monkeypatch) -> None:
    """Load Settings should raise when an exit code is not an integer."""
    monkeypatch.setenv("TERMINATION_TIMEOUT_SECONDS", "1")
    monkeypatch.setenv("TIMEOUT_EXIT_CODE", "one")

    with pytest.raises(RuntimeError, match="Invalid numeric setting"):
        load_settings()


def test_settings_load_settings_out_of_range_exit_code(monkeypatch) -> None:
    """Range errors surface as ValueError (pydantic ValidationError)."""
    monkeypatch.setenv("TERMINATION_TIMEOUT_SECONDS", "1")
    monkeypatch.setenv("GRACEFUL_EXIT_CODE", "300")

    with pytest.raises(ValueError):
        load_settings()
