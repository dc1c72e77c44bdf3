"""Termination port definitions (config DTO, listener states, exit boundary)."""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass

__all__ = ["ExitFn", "ListenerState", "TerminationConfig"]

ExitFn = Callable[[int], None]


class ListenerState(enum.Enum):
    """Phases of the background termination listener."""

    IDLE = "idle"
    WAITING = "waiting"
    GRACE_PERIOD = "grace_period"
    FORCE_EXIT = "force_exit"
    CANCELLED = "cancelled"


@dataclass(slots=True, frozen=True)
class TerminationConfig:
    """Immutable graceful termination settings.

    Attributes:
        timeout_sec: Grace period granted after the first termination signal.
        fallback_exit_code: Exit code used when the grace period elapses.
    """

    timeout_sec: float
    fallback_exit_code: int

    def __post_init__(self) -> None:
        # NaN fails the comparison too
        if not self.timeout_sec >= 0:
            raise ValueError(f"Termination timeout must be non-negative (got: {self.timeout_sec})")
        if not 0 <= self.fallback_exit_code <= 255:
            raise ValueError(
                f"Fallback exit code must be within 0..255 (got: {self.fallback_exit_code})"
            )
