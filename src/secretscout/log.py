"""Logging setup: stdlib logging rendered through Rich on stderr."""

from __future__ import annotations

import logging
from typing import Any, MutableMapping, Optional, Tuple, Union

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "secretscout"


def setup_logging(
    verbose: bool = False,
    debug: bool = False,
    console: Optional[Console] = None,
) -> logging.Logger:
    """Configure the package logger. Safe to call more than once."""
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=debug,
        rich_tracebacks=debug,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


class WorkerLogger(logging.LoggerAdapter):
    """Prefix records with the worker id and the unit of work it holds."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = self.extra or {}
        prefix = f"[worker {extra.get('worker_id')}]"
        if extra.get("unit"):
            prefix += f"[{extra['unit']}]"
        kwargs.setdefault("extra", {}).update(extra)
        return f"{prefix} {msg}", kwargs


def worker_logger(logger: logging.Logger, worker_id: Union[int, str], unit: str = "") -> WorkerLogger:
    return WorkerLogger(logger, {"worker_id": worker_id, "unit": unit})
