# =============================================================================
# core/tracing.py  -  Trace ids and trace-correlated logging
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   1. Mints one trace id per inbound tool call.
#   2. Configures the process logger ONCE (console + JSON-lines files).
#   3. Provides TraceLogger, a LoggerAdapter bound to one trace id.  The
#      dispatcher creates it and hands it to the handler inside ToolContext;
#      handlers never call logging.getLogger() themselves.
#
# WHY STDERR?
#   The MCP server talks to its client over STDOUT.  Anything we print there
#   corrupts the JSON-RPC stream, so the console handler writes to STDERR.
#
# ANSI COLORS (console only, never in the log files):
#     CYAN    incoming tool calls
#     GREEN   responses
#     YELLOW  intermediate status lines
#     RED     errors
# =============================================================================

import json
import logging
import sys
import time
import uuid
from typing import Any, Optional, TextIO

from core.config import Settings

SERVICE_NAME = "content-creator-suite"
LOGGER_NAME = "content_creator"

_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_RESET = "\033[0m"

_EVENT_COLORS = {"request": _CYAN, "response": _GREEN, "status": _YELLOW}


def new_trace_id() -> str:
    """Opaque per-call id: ``<epoch millis>-<9 hex chars>``."""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


class _TraceDefaults(logging.Filter):
    """Give records from third-party loggers the fields our formatters read."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = "-"
        if not hasattr(record, "meta"):
            record.meta = {}
        if not hasattr(record, "event"):
            record.event = "status"
        return True


class ConsoleFormatter(logging.Formatter):
    def __init__(self, color: bool = True):
        super().__init__(
            fmt="%(asctime)s [MCP] %(levelname)s %(trace_id)s %(message)s",
            datefmt="%H:%M:%S",
        )
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        if record.meta:
            line = f"{line} {json.dumps(record.meta, default=str, separators=(',', ':'))}"
        if not self.color:
            return line
        color = _RED if record.levelno >= logging.ERROR else _EVENT_COLORS.get(record.event, "")
        return f"{color}{line}{_RESET}" if color else line


class JsonLineFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, message, traceId, meta."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%d %H:%M:%S"),
            "level": record.levelname.lower(),
            "service": SERVICE_NAME,
            "message": record.getMessage(),
        }
        if record.trace_id != "-":
            entry["traceId"] = record.trace_id
        entry.update(record.meta)
        if record.exc_info:
            entry["stack"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(settings: Settings, stream: Optional[TextIO] = None) -> logging.Logger:
    """Set up the process logger and return it.

    Called once by main.py.  Calling it again replaces the handlers rather
    than stacking duplicates.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(settings.log_level.upper())
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(stream or sys.stderr)
    console.setFormatter(ConsoleFormatter(color=stream is None))
    console.addFilter(_TraceDefaults())
    logger.addHandler(console)

    log_file = settings.log_file
    log_file.parent.mkdir(parents=True, exist_ok=True)
    error_file = log_file.with_name(f"{log_file.stem}-error{log_file.suffix}")

    for path, level in ((error_file, logging.ERROR), (log_file, logging.NOTSET)):
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(JsonLineFormatter())
        file_handler.addFilter(_TraceDefaults())
        logger.addHandler(file_handler)

    return logger


class TraceLogger(logging.LoggerAdapter):
    """Logger bound to one call's trace id.

    Structured fields go in ``meta``::

        ctx.log.info("Ideas generated", meta={"count": 12})
    """

    def __init__(self, logger: logging.Logger, trace_id: str):
        super().__init__(logger, {"trace_id": trace_id})

    @property
    def trace_id(self) -> str:
        return self.extra["trace_id"]

    def process(self, msg, kwargs):
        extra = dict(kwargs.pop("extra", None) or {})
        extra["trace_id"] = self.trace_id
        extra["meta"] = kwargs.pop("meta", None) or {}
        extra.setdefault("event", kwargs.pop("event", "status"))
        kwargs["extra"] = extra
        return msg, kwargs

    def request(self, tool_name: str, arguments: Any) -> None:
        """Log an incoming tool call with its raw arguments."""
        self.info(f"{tool_name} called", meta={"arguments": arguments}, event="request")

    def response(self, tool_name: str, text: str, is_error: bool = False) -> None:
        """Log the serialized reply in compact form."""
        try:
            compact = json.dumps(json.loads(text), separators=(",", ":"))
        except ValueError:
            compact = text
        level = logging.ERROR if is_error else logging.INFO
        self.log(level, f"{tool_name} response: {compact}", event="response")
