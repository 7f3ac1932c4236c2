"""
Logging setup for the user directory API.

Modules log through `logging.getLogger(__name__)` with messages shaped as an
event name followed by `key=value` pairs:

    user_list_failed filters=search,country limit=20 offset=40

Level and output format come from `LOG_LEVEL` and `LOG_JSON` (see
`core.config`). With JSON output the event and its pairs become separate
fields, so log shippers can index them without parsing the message.
"""

from __future__ import annotations

import json
import logging
import logging.config
from typing import Any

from core import config

SERVICE = "user-directory-api"

# Server loggers that would otherwise install their own handlers.
_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def split_event(message: str) -> tuple[str | None, dict[str, str]]:
    """
    "user_fetch_failed user_id=7" -> ("user_fetch_failed", {"user_id": "7"}).
    Messages that do not start with a bare event name yield (None, {}).
    """
    head, _, rest = message.partition(" ")
    if not head or "=" in head:
        return None, {}
    fields: dict[str, str] = {}
    for token in rest.split():
        key, sep, value = token.partition("=")
        if not sep or not key:
            return None, {}
        fields[key] = value
    return head, fields


class ConsoleFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__(
            fmt=f"%(asctime)s %(levelname)-7s [{SERVICE}] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with the event split out of the message."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        message = record.getMessage()
        payload: dict[str, Any] = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "service": SERVICE,
            "level": record.levelname,
            "logger": record.name,
            "message": message,
        }
        event, fields = split_event(message)
        if event is not None:
            payload["event"] = event
            payload["fields"] = fields
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def logging_config(level: str | None = None, json_logs: bool | None = None) -> dict[str, Any]:
    level = (level or config.log_level()).upper()
    if json_logs is None:
        json_logs = config.log_json()

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"()": ConsoleFormatter},
            "json": {"()": JsonFormatter},
        },
        "handlers": {
            "app": {
                "class": "logging.StreamHandler",
                "formatter": "json" if json_logs else "console",
                "level": level,
            }
        },
        "loggers": {
            name: {"handlers": ["app"], "level": level, "propagate": False}
            for name in _SERVER_LOGGERS
        },
        "root": {"handlers": ["app"], "level": level},
    }


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    logging.config.dictConfig(logging_config(level, json_logs))
