"""Application entrypoint."""

import asyncio
import logging

from src.adapters.driven.config.settings import load_settings
from src.adapters.driven.logging.logging_config import configure_logs
from src.core.async_termination import AsyncTerminationGuard
from src.core.work_loop import start_work_loop
from src.ports.settings import WorkerSettingsPort

__all__ = ["main", "CONFIG_ERROR_EXIT_CODE"]

logger = logging.getLogger(__name__)

CONFIG_ERROR_EXIT_CODE = 2


async def main() -> int:
    """Start the guarded worker.

    Startup sequence:
    1. Configure logging.
    2. Load and validate configuration.
    3. Enable graceful termination on the event loop.
    4. Run units of work, offering a termination checkpoint after each.

    The worker only stops through the process exit paths of the guard:
    the graceful exit code at a checkpoint, or the timeout exit code when
    a unit outlives the grace period.

    Returns:
        Exit status when startup fails.
    """
    configure_logs()
    logger.info("Starting guarded worker...")

    try:
        config = load_settings()
    except (RuntimeError, ValueError) as exc:
        logger.error(
            "Configuration error: %s\n"
            "Hint: check TERMINATION_TIMEOUT_SECONDS, TIMEOUT_EXIT_CODE, "
            "GRACEFUL_EXIT_CODE and WORK_UNIT_SECONDS.",
            exc,
        )
        return CONFIG_ERROR_EXIT_CODE

    settings_port = WorkerSettingsPort(
        work_unit_sec=config.work_unit_sec,
        graceful_exit_code=config.graceful_exit_code,
    )

    async with AsyncTerminationGuard() as guard:
        guard.enable(config.termination_timeout_sec, config.timeout_exit_code)
        await start_work_loop(settings=settings_port, checkpoint_fn=guard.allow_termination)

    logger.info("Guarded worker stopped.")
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
