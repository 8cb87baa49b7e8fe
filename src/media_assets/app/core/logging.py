from __future__ import annotations

import json
import logging
import os
from logging.config import dictConfig
from traceback import format_exception
from typing import Optional

from media_assets.app.settings import AppSettings, get_settings

# Extra attributes the service attaches to records via `extra={...}`.
_ASSET_FIELDS = ("asset_id", "storage_key", "batch_size")
_HTTP_FIELDS = {
    "method": "http_method",
    "path": "path",
    "status": "status_code",
}


class JsonFormatter(logging.Formatter):
    """Structured JSON formatter for prod logs."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, object] = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "pid": record.process,
            "message": record.getMessage(),
        }

        asset_ctx = {
            k: getattr(record, k) for k in _ASSET_FIELDS if getattr(record, k, None) is not None
        }
        if asset_ctx:
            payload["asset"] = asset_ctx

        http_ctx = {
            k: getattr(record, attr)
            for k, attr in _HTTP_FIELDS.items()
            if getattr(record, attr, None) is not None
        }
        if http_ctx:
            payload["http"] = http_ctx

        if record.exc_info:
            exc_type = record.exc_info[0].__name__ if record.exc_info[0] else None
            exc_message = str(record.exc_info[1]) if record.exc_info[1] else None
            stack = "".join(format_exception(*record.exc_info))

            err_obj: dict[str, object] = {}
            if exc_type:
                err_obj["type"] = exc_type
            if exc_message:
                err_obj["message"] = exc_message

            # Keep lines readable in hosted log viewers.
            max_stack = int(os.getenv("LOG_STACK_LIMIT", "4000"))
            err_obj["stack"] = stack[:max_stack] + ("...(truncated)" if len(stack) > max_stack else "")
            payload["error"] = err_obj

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(
    settings: Optional[AppSettings] = None,
    *,
    level: Optional[str] = None,
    fmt: Optional[str] = None,
) -> None:
    """Configure root logging once for the process.

    Explicit ``level``/``fmt`` win over settings; settings fall back to
    DEBUG/plain outside prod and INFO/json in prod.
    """
    settings = settings or get_settings()
    level = (level or settings.resolved_log_level).upper()
    formatter_name = "json" if (fmt or settings.resolved_log_format) == "json" else "plain"

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,  # keep uvicorn & friends
            "formatters": {
                "plain": {
                    "format": "%(asctime)s %(levelname)-5s [pid:%(process)d] %(name)s: %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                },
                "json": {
                    "()": JsonFormatter,
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                },
            },
            "handlers": {
                "stream": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": formatter_name,
                }
            },
            "root": {
                "level": level,
                "handlers": ["stream"],
            },
            "loggers": {
                "uvicorn": {"level": "INFO", "handlers": [], "propagate": True},
                "uvicorn.error": {"level": "INFO", "handlers": [], "propagate": True},
                "uvicorn.access": {"level": "INFO", "handlers": [], "propagate": True},
                # botocore is chatty at DEBUG
                "botocore": {"level": "WARNING"},
                "aiobotocore": {"level": "WARNING"},
            },
        }
    )
