"""Console logging setup for the guarded worker."""

import logging

__all__ = ["configure_logs"]


def configure_logs() -> None:
    """Configure console logging.

    Sets up:
    - Root logger at INFO level.
    - asyncio logger at WARNING level.
    - Application loggers (src) at DEBUG level.
    - Format with timestamp, level, module, and line number.
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s"
    date_format = "%d/%m/%y %H:%M:%S"

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(log_format, date_format))

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.addHandler(handler)

    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("src").setLevel(logging.DEBUG)
