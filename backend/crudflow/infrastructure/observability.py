"""Structured Logging — one JSON object per record, CRUD context fields included.

Invariants:
    - Every record carries timestamp, level, logger and message
    - Only whitelisted extras are emitted (resource, action, entity_id, reason,
      error_code, path); anything else passed via extra= is dropped
    - setup_logging() is idempotent: it replaces the handler it installed earlier

Design Decisions:
    - stdlib logging + a small formatter instead of a logging library: the
      dispatcher and adapters only ever pass flat string extras
    - Text format for local development, JSON everywhere else
"""

import json
import logging
from datetime import datetime, timezone

CONTEXT_FIELDS = (
    "resource", "action", "entity_id", "reason", "error_code", "path",
)
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s — %(message)s"
_HANDLER_MARK = "crudflow_handler"


class JSONFormatter(logging.Formatter):
    def __init__(self, fields: tuple[str, ...] = CONTEXT_FIELDS):
        super().__init__()
        self.fields = fields

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, record.__dict__[key]) for key in self.fields
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install (or replace) the crudflow root handler."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    setattr(handler, _HANDLER_MARK, True)
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT),
    )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
