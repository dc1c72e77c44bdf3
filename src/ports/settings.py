"""Worker settings port definition (DTO)."""

from dataclasses import dataclass

__all__ = ["WorkerSettingsPort"]


@dataclass
class WorkerSettingsPort:
    """Runtime settings for the core work loop.

    Decouples core from concrete configuration sources.

    Attributes:
        work_unit_sec: Duration of one unit of work.
        graceful_exit_code: Exit code passed to the termination checkpoint.
    """

    work_unit_sec: float
    graceful_exit_code: int = 0
