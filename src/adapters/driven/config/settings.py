"""Configuration loading from environment variables."""

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

__all__ = ["Settings", "load_settings"]

load_dotenv()

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    """Runtime configuration for the guarded worker.

    Attributes:
        termination_timeout_sec: Grace period after a termination signal.
        timeout_exit_code: Exit code when the grace period elapses.
        graceful_exit_code: Exit code when work stops at a checkpoint.
        work_unit_sec: Duration of one unit of work.
    """

    termination_timeout_sec: float = Field(
        ..., ge=0, description="Grace period in seconds after a termination signal."
    )
    timeout_exit_code: int = Field(
        default=1, ge=0, le=255, description="Exit code used when the grace period elapses."
    )
    graceful_exit_code: int = Field(
        default=0, ge=0, le=255, description="Exit code used at a termination checkpoint."
    )
    work_unit_sec: float = Field(
        default=1.0, gt=0, description="Duration of one unit of work in seconds."
    )


def _read_env(name: str, default: str | None = None) -> str:
    value = os.getenv(name, default)
    if value is None:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def load_settings() -> Settings:
    """Load and validate settings from the environment.

    Required environment variables:
    - TERMINATION_TIMEOUT_SECONDS: Non-negative grace period.

    Optional:
    - TIMEOUT_EXIT_CODE: Exit code on forced exit (default 1).
    - GRACEFUL_EXIT_CODE: Exit code on cooperative exit (default 0).
    - WORK_UNIT_SECONDS: Duration of one unit of work (default 1.0).

    Returns:
        Validated Settings object.

    Raises:
        RuntimeError: If a required env var is missing or not a number.
        ValueError: If configuration is invalid.
    """
    timeout_raw = _read_env("TERMINATION_TIMEOUT_SECONDS")
    timeout_code_raw = _read_env("TIMEOUT_EXIT_CODE", "1")
    graceful_code_raw = _read_env("GRACEFUL_EXIT_CODE", "0")
    work_unit_raw = _read_env("WORK_UNIT_SECONDS", "1.0")

    try:
        termination_timeout_sec = float(timeout_raw)
        if termination_timeout_sec < 0:
            raise ValueError("Must be non-negative")
    except ValueError as e:
        raise RuntimeError(
            f"TERMINATION_TIMEOUT_SECONDS must be a non-negative number (got: {timeout_raw})"
        ) from e

    try:
        timeout_exit_code = int(timeout_code_raw)
        graceful_exit_code = int(graceful_code_raw)
        work_unit_sec = float(work_unit_raw)
    except ValueError as e:
        raise RuntimeError(f"Invalid numeric setting: {e}") from e

    settings = Settings(
        termination_timeout_sec=termination_timeout_sec,
        timeout_exit_code=timeout_exit_code,
        graceful_exit_code=graceful_exit_code,
        work_unit_sec=work_unit_sec,
    )

    logger.info(
        f"Worker configured: timeout={settings.termination_timeout_sec}s, "
        f"timeout_exit_code={settings.timeout_exit_code}, "
        f"graceful_exit_code={settings.graceful_exit_code}, "
        f"work_unit={settings.work_unit_sec}s"
    )

    return settings
