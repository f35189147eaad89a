"""Plaintext rendering of structured log records.

Each record becomes a block headed by ``=== <event> ===`` with one
``key: value`` line per field. Every value is passed through
``sanitize_error_message`` so credentials never reach the log file.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from ..time_utils import utc_now_iso
from .sanitization import sanitize_error_message
from .schema import DEFAULT_EVENT_KEY_ORDER, EVENT_KEY_ORDER

_HTTPX_REQUEST_MSG = 'HTTP Request: %s %s "%s %d %s"'


def _json_payload(record: logging.LogRecord) -> Optional[dict[str, Any]]:
    """Return the event dict emitted by ``log_event``, if the record is one."""
    message = record.getMessage()
    if not (message.startswith("{") and message.endswith("}")):
        return None
    try:
        parsed = json.loads(message)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def _httpx_request_fields(record: logging.LogRecord) -> Optional[dict[str, Any]]:
    """Decode httpx's per-request INFO line into fields."""
    if record.name != "httpx" or str(record.msg) != _HTTPX_REQUEST_MSG:
        return None
    if not isinstance(record.args, tuple) or len(record.args) != 5:
        return None
    method, url, version, status, reason = record.args
    return {
        "event": "httpx_request",
        "http_method": str(method),
        "http_url": str(url),
        "http_version": str(version),
        "http_status": status if isinstance(status, int) else str(status),
        "http_reason": str(reason),
    }


def _render_value(value: Any) -> str:
    return sanitize_error_message(str(value)).replace("\n", "\\n")


class StructuredTextFormatter(logging.Formatter):
    """Render records as ``=== event ===`` blocks separated by blank lines."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._entries_written = 0

    def _fields(self, record: logging.LogRecord) -> dict[str, Any]:
        fields: dict[str, Any] = {
            "ts_utc": utc_now_iso(),
            "level": record.levelname,
            "logger": record.name,
        }
        decoded = _json_payload(record) or _httpx_request_fields(record)
        if decoded is None:
            decoded = {"event": record.name, "message": record.getMessage()}
        fields.update(decoded)
        return fields

    def format(self, record: logging.LogRecord) -> str:
        fields = self._fields(record)
        event_name = str(fields.pop("event", record.name))

        present = {k: v for k, v in fields.items() if v is not None}
        preferred = [
            k for k in EVENT_KEY_ORDER.get(event_name, DEFAULT_EVENT_KEY_ORDER) if k in present
        ]
        rest = sorted(k for k in present if k not in preferred)

        lines = [f"=== {event_name} ==="]
        lines.extend(f"{key}: {_render_value(present[key])}" for key in preferred + rest)
        if record.exc_info:
            lines.append("traceback:")
            lines.append(self.formatException(record.exc_info))

        block = "\n".join(lines)
        self._entries_written += 1
        return block if self._entries_written == 1 else "\n" + block
