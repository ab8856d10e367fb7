"""
Logging setup for okta-setup.

Provides:
- Plain or structured (JSON) log output on stderr
- A per-run correlation ID attached to every structured record

Usage:
    from okta_setup.core.observability import configure_logging, start_run

    configure_logging("INFO", structured=True)
    start_run()
"""

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime

# Correlation ID - links all logs for a single CLI invocation
_run_id_ctx: ContextVar[str] = ContextVar("run_id", default="")

_PLAIN_FORMAT = "%(levelname)s %(name)s: %(message)s"

# Attributes every LogRecord has; anything else came in through `extra=`.
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)


def generate_run_id() -> str:
    """Generate a unique ID for one run."""
    return str(uuid.uuid4())


def get_run_id() -> str:
    """Get the current run ID from context."""
    return _run_id_ctx.get()


def set_run_id(run_id: str) -> None:
    """Set the run ID for the current context."""
    _run_id_ctx.set(run_id)


def start_run() -> str:
    """Generate and install a fresh run ID, returning it."""
    run_id = generate_run_id()
    set_run_id(run_id)
    return run_id


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs one JSON object per record with:
    - timestamp: ISO 8601 format
    - level, logger, message
    - run_id: correlation ID (if set)
    - exception: type and message (if present)
    - extra: any additional context from logging.extra
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        run_id = get_run_id()
        if run_id:
            log_entry["run_id"] = run_id

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
            }

        extra = {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}
        if extra:
            log_entry["extra"] = extra

        return json.dumps(log_entry, default=str)


def configure_logging(level: str = "WARNING", structured: bool = False) -> None:
    """
    Configure the root logger.

    Logs go to stderr so they never mix with progress output on stdout.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        structured: Emit JSON records instead of plain text
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    handler = logging.StreamHandler(sys.stderr)
    if structured:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(_PLAIN_FORMAT))

    root_logger.addHandler(handler)

    # httpx logs every request at INFO; keep it quiet unless debugging.
    if root_logger.level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
