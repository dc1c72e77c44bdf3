"""Work loop that offers a termination checkpoint between units of work."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from src.ports.settings import WorkerSettingsPort

__all__ = ["start_work_loop"]

logger = logging.getLogger(__name__)

WorkFn = Callable[[int], Awaitable[None]]


async def start_work_loop(
    settings: WorkerSettingsPort,
    checkpoint_fn: Callable[[int], None],
    work_fn: WorkFn | None = None,
    stop_fn: Callable[[], bool] | None = None,
) -> int:
    """Run units of work until the process terminates or stop_fn() is True.

    After every unit:
    1. Call checkpoint_fn(graceful_exit_code), which exits the process
       if a termination signal has arrived.
    2. Check stop_fn() and start the next unit.

    A unit is never interrupted by the checkpoint, so termination always
    happens between units.

    Args:
        settings: Runtime configuration (unit duration, exit code).
        checkpoint_fn: Termination checkpoint, e.g. guard.allow_termination.
        work_fn: Async function running one unit, given its index.
            Defaults to sleeping for settings.work_unit_sec.
        stop_fn: Callable that returns True when the loop should exit.

    Returns:
        Number of completed units.
    """

    async def _sleep_unit(index: int) -> None:
        await asyncio.sleep(settings.work_unit_sec)

    run_unit = work_fn or _sleep_unit
    completed = 0

    while stop_fn is None or not stop_fn():
        await run_unit(completed)
        completed += 1
        logger.debug(f"Completed work unit #{completed}")
        checkpoint_fn(settings.graceful_exit_code)

    return completed
