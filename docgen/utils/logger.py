"""
Logging utilities for the documentation generator.

Every module logs under the ``docgen`` namespace. Console output goes to
stderr so that command output on stdout stays machine-readable.
"""

import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, Optional


DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER = "docgen"

# Chatty client libraries, kept at WARNING unless we run at DEBUG
NOISY_LOGGERS = ("botocore", "boto3", "urllib3", "httpx", "httpcore")

_configured = False


def _handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    log_file: Optional[Path | str] = None,
    console: bool = True,
) -> None:
    """
    Configure the ``docgen`` logger tree.

    Calling it again replaces the previous handlers.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        format_string: Record format (DEFAULT_FORMAT if None)
        log_file: Also write records to this file
        console: Write records to stderr
    """
    global _configured

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT)

    package_logger = logging.getLogger(ROOT_LOGGER)
    package_logger.setLevel(numeric_level)
    package_logger.handlers.clear()

    if console:
        package_logger.addHandler(_handler(logging.StreamHandler(sys.stderr), numeric_level, formatter))

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        package_logger.addHandler(
            _handler(logging.FileHandler(log_path, encoding='utf-8'), numeric_level, formatter)
        )

    library_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, nested under the ``docgen`` namespace."""
    if not _configured:
        setup_logging()

    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


class LogContext:
    """
    Logs the start, duration and outcome of one unit of work.

    Example:
        with LogContext(logger, "Generating document", project_id="p-1"):
            ...

    Pipeline errors are logged with their kind; the exception always
    propagates.
    """

    def __init__(self, logger: logging.Logger, operation: str, **context: Any):
        self.logger = logger
        self.operation = operation
        self.context: Dict[str, Any] = context
        self._started = 0.0

    def __enter__(self) -> 'LogContext':
        self._started = time.monotonic()
        details = ", ".join(f"{k}={v}" for k, v in self.context.items())
        self.logger.info(f"Starting: {self.operation} ({details})")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        elapsed = time.monotonic() - self._started

        if exc_type is None:
            self.logger.info(f"Completed: {self.operation} ({elapsed:.2f}s)")
            return False

        kind = getattr(exc_val, "kind", None)
        label = f"{exc_type.__name__}[{kind}]" if kind else exc_type.__name__
        self.logger.error(f"Failed: {self.operation} ({elapsed:.2f}s) - {label}: {exc_val}")
        return False


def log_exception(logger: logging.Logger, message: str, exc: Exception) -> None:
    """Log an unexpected exception with its traceback."""
    logger.error(f"{message}: {type(exc).__name__}: {exc}", exc_info=exc)


def log_json(logger: logging.Logger, message: str, data: Dict[str, Any], level: int = logging.DEBUG) -> None:
    """Log a JSON-serializable payload, pretty-printed, when ``level`` is enabled."""
    if not logger.isEnabledFor(level):
        return
    logger.log(level, f"{message}:\n{json.dumps(data, indent=2, default=str, ensure_ascii=False)}")
