"""Process exit boundary."""

import logging
import os
import sys

__all__ = ["exit_process"]


def exit_process(code: int) -> None:
    """Terminate the whole process immediately.

    Works from any thread and skips interpreter shutdown (atexit hooks,
    finally blocks, other threads). Log handlers and standard streams are
    flushed first so the last messages are not lost.

    Args:
        code: Process exit code.
    """
    for handler in logging.getLogger().handlers:
        handler.flush()
    for stream in (sys.stdout, sys.stderr):
        if stream is not None:
            stream.flush()
    os._exit(code)
