"""Logging — one root handler, JSON lines in production, plain text locally.

Invariants:
    - Every line carries timestamp, level, logger and message
    - Known `extra=` keys (project/user/session ids, error codes, token counts) become fields
    - setup_logging is idempotent: re-running it replaces our handler instead of stacking

Design Decisions:
    - stdlib logging with a small JSONFormatter; the extras whitelist keeps payloads flat
    - HTTP client loggers (httpx, anthropic) held at WARNING: every model and auth
      call would otherwise log a request line
"""

import logging
import json
from datetime import datetime, timezone

_EXTRA_KEYS = (
    "project_id", "user_id", "operation", "error_code", "attempt",
    "input_tokens", "output_tokens", "schema_name", "session_id",
)
_QUIET_LOGGERS = ("httpx", "httpcore", "anthropic")


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log.update({
            key: record.__dict__[key]
            for key in _EXTRA_KEYS
            if record.__dict__.get(key) is not None
        })
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    for existing in list(logging.root.handlers):
        if getattr(existing, "_ruby_handler", False):
            logging.root.removeHandler(existing)
    handler = logging.StreamHandler()
    handler._ruby_handler = True
    handler.setFormatter(
        JSONFormatter() if fmt == "json"
        else logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"),
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
