"""Graceful termination guard for asyncio programs."""

import asyncio
import contextlib
import logging

from src.adapters.driven.process.exit import exit_process
from src.adapters.driving.signals import (
    subscribe_termination_signals_on_loop,
    unsubscribe_termination_signals_on_loop,
)
from src.core.termination import TerminationGuard
from src.ports.termination import ExitFn, ListenerState, TerminationConfig

__all__ = ["AsyncTerminationGuard"]

logger = logging.getLogger(__name__)


class AsyncTerminationGuard(TerminationGuard):
    """TerminationGuard whose listener is a task on the running event loop.

    Signals are received through loop.add_signal_handler and the grace
    period is an asyncio.sleep, so the forced exit only fires while the
    loop is not blocked. Use TerminationGuard when work units block.
    """

    def __init__(self, *, exit_fn: ExitFn = exit_process) -> None:
        """Initialize a disabled guard.

        Args:
            exit_fn: Called with the exit code to terminate the process.
        """
        super().__init__(exit_fn=exit_fn)
        self._signals: asyncio.Queue[int] | None = None
        self._task: asyncio.Task[None] | None = None

    def enable(self, timeout_sec: float, fallback_exit_code: int) -> None:
        """Start intercepting termination signals on the running loop.

        Args:
            timeout_sec: Grace period after the first signal (>= 0).
            fallback_exit_code: Exit code used when the grace period elapses.

        Raises:
            ValueError: If timeout_sec is negative or fallback_exit_code is
                outside 0..255.
            RuntimeError: If the guard is already enabled or no loop is running.
            NotImplementedError: If the loop does not support signal handlers.
        """
        loop = asyncio.get_running_loop()
        config = self._new_config(timeout_sec, fallback_exit_code)
        # Holds one pending signal, later ones are dropped
        signals: asyncio.Queue[int] = asyncio.Queue(maxsize=1)
        subscribe_termination_signals_on_loop(self._on_loop_signal)
        self._config = config
        self._signals = signals
        self._state = ListenerState.WAITING
        self._task = loop.create_task(
            self._listen_async(config, signals), name="termination-listener"
        )
        logger.info(
            f"Graceful termination enabled on event loop: timeout={config.timeout_sec}s, "
            f"fallback_exit_code={config.fallback_exit_code}"
        )

    def close(self) -> None:
        """Cancel the listener task and remove the loop signal handlers.

        Must be called from the loop thread. Use aclose() to also wait
        for the task to finish.
        """
        if self._task is None:
            return
        unsubscribe_termination_signals_on_loop()
        self._task.cancel()
        self._mark_cancelled()

    async def aclose(self) -> None:
        """Cancel the listener task and wait for it to finish."""
        task = self._task
        if task is None:
            return
        self.close()
        self._task = None
        await asyncio.gather(task, return_exceptions=True)

    async def __aenter__(self) -> "AsyncTerminationGuard":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _on_loop_signal(self, signum: int) -> None:
        if self._signals is None:
            return
        with contextlib.suppress(asyncio.QueueFull):
            self._signals.put_nowait(signum)

    async def _listen_async(self, config: TerminationConfig, signals: asyncio.Queue[int]) -> None:
        signum = await signals.get()
        self._begin_grace_period(signum, config)
        await asyncio.sleep(config.timeout_sec)
        self._force_exit(config)
