"""Centralized logging configuration using Loguru with Pino-compatible output.

stdout is reserved for the JSON audit report, so every handler configured
here writes to stderr or to a file.

Usage:
    from splitaudit.utils.logging import logger
    logger.info("Message")
    logger.debug("Debug message")  # Only shows if SPLITAUDIT_LOG_LEVEL=DEBUG

Environment Variables:
    SPLITAUDIT_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: INFO)
    SPLITAUDIT_LOG_JSON: 0|1 (default: 0, human-readable)
    SPLITAUDIT_LOG_FILE: path to log file (optional)
    SPLITAUDIT_REQUEST_ID: correlation ID for a single audit run
"""

import json
import os
import sys
import uuid

from loguru import logger

# Remove default handler
logger.remove()

# Pino-compatible numeric levels
PINO_LEVELS = {
    "TRACE": 10,
    "DEBUG": 20,
    "INFO": 30,
    "WARNING": 40,
    "ERROR": 50,
    "CRITICAL": 60,
}

_log_level = os.environ.get("SPLITAUDIT_LOG_LEVEL", "INFO").upper()
_json_mode = os.environ.get("SPLITAUDIT_LOG_JSON", "0") == "1"
_log_file = os.environ.get("SPLITAUDIT_LOG_FILE")
_request_id = os.environ.get("SPLITAUDIT_REQUEST_ID") or str(uuid.uuid4())


def _to_pino(record) -> str:
    """Render a loguru record as one Pino NDJSON line."""
    pino_log = {
        "level": PINO_LEVELS.get(record["level"].name, 30),
        "time": int(record["time"].timestamp() * 1000),
        "msg": record["message"],
        "pid": record["process"].id,
        "request_id": record["extra"].get("request_id", _request_id),
    }

    for key, value in record["extra"].items():
        if key != "request_id":
            pino_log[key] = value if isinstance(value, (str, int, float, bool)) else str(value)

    if record["exception"]:
        pino_log["err"] = {
            "type": record["exception"].type.__name__ if record["exception"].type else "Error",
            "message": str(record["exception"].value) if record["exception"].value else "",
        }
    return json.dumps(pino_log)


def pino_compatible_sink(message):
    """Write Pino-compatible NDJSON to stderr.

    Never call logger.* inside a sink - causes infinite recursion.
    """
    sys.stderr.write(_to_pino(message.record) + "\n")
    sys.stderr.flush()


_human_format = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<level>{message}</level>"
)

logger.level("DEBUG", color="<blue>")
logger.level("INFO", color="<white>")
logger.level("WARNING", color="<yellow>")
logger.level("ERROR", color="<red>")
logger.level("CRITICAL", color="<red><bold>")

if _json_mode:
    logger.add(
        pino_compatible_sink,
        level=_log_level,
        colorize=False,
    )
else:
    logger.add(
        sys.stderr,
        level=_log_level,
        format=_human_format,
        colorize=None,  # Auto-detect: colors if TTY, plain if piped
    )

if _log_file:
    def _file_pino_sink(message):
        """Append Pino-format JSON to the configured log file."""
        with open(_log_file, "a", encoding="utf-8") as f:
            f.write(_to_pino(message.record) + "\n")

    logger.add(
        _file_pino_sink,
        level="DEBUG",  # File always captures everything
    )


def get_request_id() -> str:
    """Get the current request ID for correlation."""
    return _request_id


__all__ = [
    "logger",
    "get_request_id",
]
