from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from billing.core.config import get_settings

_EXTRA_FIELDS = ("invoice_id", "item_id", "username", "error_code", "path")
_HANDLER_NAME = "billing"


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    settings = get_settings()
    level = level or settings.log_level
    fmt = fmt or settings.log_format

    root = logging.getLogger()
    handler = next((h for h in root.handlers if h.get_name() == _HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        root.addHandler(handler)

    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s"))
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
