from __future__ import annotations
import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

# structured extras the lexi modules attach to their records
_EXTRA_FIELDS = ("component", "event", "doc_id", "page", "page_count", "pages_scanned", "matched")

class JsonFormatter(logging.Formatter):
    """One JSON object per record, stamped with the record's own creation time."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update({k: getattr(record, k) for k in _EXTRA_FIELDS if hasattr(record, k)})
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)

def configure_logging(level: str | None = None, stream: TextIO | None = None) -> None:
    """Route every record through `JsonFormatter`.

    The pypdf logger is held at ERROR unless LEXI_PYPDF_LOG_LEVEL says
    otherwise; it warns once per malformed object it recovers from.
    """
    lvl = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    root = logging.getLogger()
    root.setLevel(lvl)
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JsonFormatter())
    root.handlers = [handler]
    logging.getLogger("pypdf").setLevel((os.getenv("LEXI_PYPDF_LOG_LEVEL") or "ERROR").upper())
