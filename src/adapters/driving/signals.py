"""Signal subscription for graceful termination."""

import asyncio
import signal
from collections.abc import Callable
from types import FrameType
from typing import Any

__all__ = [
    "TERMINATION_SIGNALS",
    "SignalHandler",
    "restore_signal_handlers",
    "subscribe_termination_signals",
    "subscribe_termination_signals_on_loop",
    "unsubscribe_termination_signals_on_loop",
]

# SIGQUIT does not exist on Windows
TERMINATION_SIGNALS: tuple[signal.Signals, ...] = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGINT", "SIGQUIT") if hasattr(signal, name)
)

SignalHandler = Callable[[int, FrameType | None], Any]


def subscribe_termination_signals(handler: SignalHandler) -> dict[signal.Signals, Any]:
    """Register handler for every termination-style signal.

    On Docker/Kubernetes, SIGTERM is sent 30s before SIGKILL, which is
    the window graceful termination works within.

    Must be called from the main thread (Python only runs signal
    handlers there). Registration errors propagate to the caller.

    Args:
        handler: Callable invoked as handler(signum, frame).

    Returns:
        Previously installed handlers, keyed by signal.
    """
    previous: dict[signal.Signals, Any] = {}
    try:
        for sig in TERMINATION_SIGNALS:
            previous[sig] = signal.signal(sig, handler)
    except (ValueError, OSError):
        restore_signal_handlers(previous)
        raise
    return previous


def restore_signal_handlers(previous: dict[signal.Signals, Any]) -> None:
    """Reinstall handlers returned by subscribe_termination_signals.

    Args:
        previous: Handlers to put back, keyed by signal.
    """
    for sig, handler in previous.items():
        # Handlers installed outside Python are reported as None
        signal.signal(sig, signal.SIG_DFL if handler is None else handler)


def subscribe_termination_signals_on_loop(callback: Callable[[int], None]) -> None:
    """Register callback for termination signals on the running event loop.

    Handlers registered before a failing registration are removed
    again before the error propagates.

    Args:
        callback: Called with the signal number, inside the event loop.
    """
    loop = asyncio.get_running_loop()
    registered: list[signal.Signals] = []
    try:
        for sig in TERMINATION_SIGNALS:
            loop.add_signal_handler(sig, callback, sig)
            registered.append(sig)
    except (NotImplementedError, RuntimeError, ValueError):
        for sig in registered:
            loop.remove_signal_handler(sig)
        raise


def unsubscribe_termination_signals_on_loop() -> None:
    """Remove loop handlers installed by subscribe_termination_signals_on_loop."""
    loop = asyncio.get_running_loop()
    for sig in TERMINATION_SIGNALS:
        loop.remove_signal_handler(sig)
