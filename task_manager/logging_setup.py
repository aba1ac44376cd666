"""Logging configuration for the API process."""

import logging
import sys
from pathlib import Path

_NOISY_LOGGERS = ("sqlalchemy.engine", "uvicorn.access")


def setup_logging(level: str | int = logging.INFO, log_file: str | Path | None = None) -> None:
    """Configure the root logger.

    Installs a console handler at ``level`` and, when ``log_file`` is given,
    a file handler that records everything at DEBUG. Safe to call more than
    once: existing root handlers are replaced.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level if isinstance(level, int) else level.upper())
    console.setFormatter(fmt)
    root.addHandler(console)

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(path), encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(fmt)
        root.addHandler(file_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
