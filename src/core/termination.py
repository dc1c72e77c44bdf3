"""Graceful termination guard driven by OS termination signals."""

import logging
import signal
import threading
from types import FrameType
from typing import Any

from src.adapters.driven.process.exit import exit_process
from src.adapters.driving.signals import restore_signal_handlers, subscribe_termination_signals
from src.ports.termination import ExitFn, ListenerState, TerminationConfig

__all__ = ["TerminationGuard", "allow_termination", "enable_graceful_termination"]

logger = logging.getLogger(__name__)


def _signal_name(signum: int | None) -> str:
    if signum is None:
        return "Termination signal"
    try:
        return signal.Signals(signum).name
    except ValueError:
        return str(signum)


class TerminationGuard:
    """Process-lifetime termination state plus its background listener.

    Lifecycle of the listener:
    1. WAITING: blocks until the first SIGTERM/SIGINT/SIGQUIT.
    2. GRACE_PERIOD: the terminating flag is set; application code may
       leave through allow_termination() at a safe checkpoint.
    3. FORCE_EXIT: the grace period elapsed, the process is terminated
       with the fallback exit code.

    close() cancels the listener at any phase, for hosts that stop the
    guard without exiting the process.

    The flag is a threading.Event, so a set flag is visible to every
    thread; readers may still observe it shortly after it was set.
    """

    def __init__(self, *, exit_fn: ExitFn = exit_process) -> None:
        """Initialize a disabled guard.

        Args:
            exit_fn: Called with the exit code to terminate the process.
        """
        self._exit_fn = exit_fn
        self._config: TerminationConfig | None = None
        self._state = ListenerState.IDLE
        self._terminating = threading.Event()
        self._wakeup = threading.Event()
        self._cancelled = threading.Event()
        self._received_signal: int | None = None
        self._previous_handlers: dict[signal.Signals, Any] = {}
        self._listener: threading.Thread | None = None

    @property
    def config(self) -> TerminationConfig | None:
        """Configuration set by enable(), None before that."""
        return self._config

    @property
    def state(self) -> ListenerState:
        """Current listener phase."""
        return self._state

    def enable(self, timeout_sec: float, fallback_exit_code: int) -> None:
        """Start intercepting termination signals.

        Must be called once, from the main thread, before relying on
        allow_termination().

        Args:
            timeout_sec: Grace period after the first signal (>= 0).
            fallback_exit_code: Exit code used when the grace period elapses.

        Raises:
            ValueError: If timeout_sec is negative or fallback_exit_code is
                outside 0..255, or when not called from the main thread.
            RuntimeError: If the guard is already enabled.
        """
        config = self._new_config(timeout_sec, fallback_exit_code)
        self._previous_handlers = subscribe_termination_signals(self._on_signal)
        self._config = config
        self._state = ListenerState.WAITING
        self._listener = threading.Thread(
            target=self._listen, args=(config,), name="termination-listener", daemon=True
        )
        self._listener.start()
        logger.info(
            f"Graceful termination enabled: timeout={config.timeout_sec}s, "
            f"fallback_exit_code={config.fallback_exit_code}"
        )

    def is_terminating(self) -> bool:
        """Return True once a termination signal has been received."""
        return self._terminating.is_set()

    def allow_termination(self, exit_code: int) -> None:
        """Exit with exit_code if a termination signal has been received.

        Call at safe checkpoints, e.g. between units of work. Returns
        without side effects while no signal has arrived.

        Args:
            exit_code: Process exit code to use when terminating now.
        """
        if self._terminating.is_set():
            logger.info(f"Terminating gracefully with exit code {exit_code}")
            self._exit_fn(exit_code)

    def close(self) -> None:
        """Cancel the listener and restore the previous signal handlers.

        The forced exit never fires after this returns. Must be called
        from the main thread. No-op on a guard that is not enabled.
        """
        if self._listener is None:
            return
        self._cancelled.set()
        self._wakeup.set()
        self._listener.join()
        self._listener = None
        restore_signal_handlers(self._previous_handlers)
        self._previous_handlers = {}
        self._mark_cancelled()

    def __enter__(self) -> "TerminationGuard":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _new_config(self, timeout_sec: float, fallback_exit_code: int) -> TerminationConfig:
        # Stored by enable() only once the signals are subscribed
        if self._config is not None:
            raise RuntimeError("Graceful termination is already enabled")
        return TerminationConfig(timeout_sec=timeout_sec, fallback_exit_code=fallback_exit_code)

    def _on_signal(self, signum: int, frame: FrameType | None) -> None:
        # Runs in the main thread between bytecodes: no logging here.
        if self._received_signal is None:
            self._received_signal = signum
        self._wakeup.set()

    def _listen(self, config: TerminationConfig) -> None:
        self._wakeup.wait()
        if self._cancelled.is_set():
            return
        self._begin_grace_period(self._received_signal, config)
        if self._cancelled.wait(config.timeout_sec):
            return
        self._force_exit(config)

    def _begin_grace_period(self, signum: int | None, config: TerminationConfig) -> None:
        self._terminating.set()
        self._state = ListenerState.GRACE_PERIOD
        logger.warning(
            f"{_signal_name(signum)} received, "
            f"forcing exit in {config.timeout_sec}s unless the process terminates first"
        )

    def _force_exit(self, config: TerminationConfig) -> None:
        self._state = ListenerState.FORCE_EXIT
        logger.error(
            f"Grace period of {config.timeout_sec}s elapsed, "
            f"forcing exit with code {config.fallback_exit_code}"
        )
        self._exit_fn(config.fallback_exit_code)

    def _mark_cancelled(self) -> None:
        if self._state is not ListenerState.FORCE_EXIT:
            self._state = ListenerState.CANCELLED
            logger.info("Termination listener cancelled")


_default_guard = TerminationGuard()


def enable_graceful_termination(timeout_sec: float, timeout_exit_code: int) -> None:
    """Enable graceful termination for the whole process.

    Args:
        timeout_sec: Grace period after the first termination signal.
        timeout_exit_code: Exit code used when the grace period elapses.
    """
    _default_guard.enable(timeout_sec, timeout_exit_code)


def allow_termination(exit_code: int) -> None:
    """Exit with exit_code if the process was asked to terminate.

    Args:
        exit_code: Process exit code to use when terminating now.
    """
    _default_guard.allow_termination(exit_code)
