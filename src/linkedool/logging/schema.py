"""Preferred key order for structured log events."""

from __future__ import annotations

DEFAULT_EVENT_KEY_ORDER: list[str] = ["ts_utc", "level", "logger"]

EVENT_KEY_ORDER: dict[str, list[str]] = {
    "app_start": ["ts_utc", "level", "entry", "ollama_host", "log_file"],
    "app_stop": ["ts_utc", "level", "entry", "reason", "error_type", "error", "uptime_ms"],
    "profile_loaded": ["ts_utc", "level", "source", "chars"],
    "analyze_request": [
        "ts_utc", "level", "endpoint", "provider", "model", "source", "input_chars",
    ],
    "analyze_rejected": ["ts_utc", "level", "endpoint", "status", "error"],
    "ai_request": [
        "ts_utc", "level", "mode", "provider", "model", "host", "input_chars",
    ],
    "ai_response": [
        "ts_utc", "level", "mode", "provider", "model", "latency_ms", "output_chars",
    ],
    "ai_error": [
        "ts_utc", "level", "mode", "provider", "model", "latency_ms",
        "error_type", "error",
    ],
    "stream_start": ["ts_utc", "level", "provider", "model", "state"],
    "stream_complete": [
        "ts_utc", "level", "provider", "model", "state", "latency_ms",
        "token_count", "output_chars", "skipped_frames",
    ],
    "stream_cancelled": [
        "ts_utc", "level", "provider", "model", "state", "latency_ms", "token_count",
    ],
    "stream_error": [
        "ts_utc", "level", "provider", "model", "state", "latency_ms",
        "token_count", "error_type", "error",
    ],
    "stream_relay_error": ["ts_utc", "level", "error_type", "error"],
    "models_request": ["ts_utc", "level", "host", "result", "model_count", "error"],
    "httpx_request": [
        "ts_utc", "level", "logger", "http_method", "http_url",
        "http_version", "http_status", "http_reason",
    ],
}

LOG_PATH_FIELDS = {"log_file"}
