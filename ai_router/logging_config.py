"""
Structured JSON logging for the router.

One JSON object per line, so an attempt can be followed across providers by
correlation ID and selection method.
"""

import json
import logging
import sys
from datetime import UTC, datetime

# Optional ``extra=`` fields copied into the JSON entry when present
EXTRA_FIELDS = ("correlation_id", "provider", "method", "latency_ms", "reason")

NOISY_LOGGERS = ("httpx", "httpcore")


class JSONFormatter(logging.Formatter):
    """Render records as JSON, adding the router's known ``extra=`` fields.

    Any other extras are left out, so stray values attached to a record
    (credentials in particular) never reach the output.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        log_entry.update(
            {name: getattr(record, name) for name in EXTRA_FIELDS if hasattr(record, name)}
        )
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # default=str covers UUID correlation IDs and other non-JSON extras
        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO"):
    """Send all logs to stdout as JSON.

    Unknown level names fall back to INFO rather than failing at startup.
    Per-request HTTP logs from httpx/httpcore are held at WARNING; the
    invoker already logs each provider attempt.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(f"JSON logging configured at {level.upper()}")
