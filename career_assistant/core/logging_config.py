"""
Logging setup shared by the API, the engine and the stores.

One call to setup_logging() at startup installs two handlers on the root
logger: stdout at the configured level, and a per-day file under logs/
that keeps everything down to DEBUG. Modules then ask for loggers with
get_logger(__name__); gateway classes mix in LoggerMixin.

User text never goes into log lines verbatim: use preview() to log a
short, single-line excerpt.
"""
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that flood DEBUG output
QUIET_LOGGERS = ("urllib3", "requests", "sqlalchemy.engine", "uvicorn.access")

_configured = False


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
    log_to_file: bool = True
) -> logging.Logger:
    """
    Install console and file handlers on the root logger.

    Repeated calls are no-ops, so importing the app twice (tests, reloads)
    does not duplicate output.

    Args:
        log_level: Console level name; unknown names fall back to INFO
        log_dir: Where daily files go. Defaults to logs/ next to the package.
        log_to_file: Set False to log to stdout only

    Returns:
        The root logger
    """
    global _configured

    root = logging.getLogger()
    if _configured:
        return root

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    console.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root.addHandler(console)

    log_file = None
    if log_to_file:
        log_dir = log_dir or Path(__file__).parent.parent.parent / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"assistant_{datetime.now():%Y%m%d}.log"

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.DEBUG)
        root.addHandler(file_handler)

    root.setLevel(logging.DEBUG)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True
    root.debug(f"Logging ready: console={log_level.upper()}, file={log_file or 'disabled'}")
    return root


def get_logger(name: str) -> logging.Logger:
    """Logger for a module; pass __name__."""
    return logging.getLogger(name)


def preview(text: Optional[str], limit: int = 40) -> str:
    """
    Short single-line excerpt of user or provider text for log lines.

    Example:
        >>> preview("I want to become a nurse\\nand work nights", limit=12)
        'I want to be...'
    """
    flat = " ".join((text or "").split())
    if len(flat) <= limit:
        return flat
    return flat[:limit] + "..."


class LoggerMixin:
    """
    Gives a class a `logger` property named after the class.

    Example:
        >>> class MyGateway(LoggerMixin):
        ...     def invoke(self):
        ...         self.logger.info("Calling provider...")
    """

    @property
    def logger(self) -> logging.Logger:
        return get_logger(self.__class__.__name__)
