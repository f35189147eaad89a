"""Centralized timeout policy and helpers."""

from __future__ import annotations

import math
from typing import Any

import httpx


# 0 means no internal timeout: a stalled backend blocks until the
# surrounding transport gives up.
DEFAULT_TIMEOUT_SEC = 0

AI_HTTP_CONNECT_TIMEOUT_SEC = 10.0
AI_HTTP_WRITE_TIMEOUT_SEC = 15.0
AI_HTTP_POOL_TIMEOUT_SEC = 5.0

PAGE_FETCH_TIMEOUT_SEC = 15.0


def normalize_timeout_value(value: Any, fallback: int | float) -> int | float:
    """Normalize timeout-like values to non-negative finite int/float."""
    if isinstance(value, bool):
        normalized = float(fallback)
    elif isinstance(value, (int, float)):
        normalized = float(value)
    elif isinstance(value, str):
        try:
            normalized = float(value.strip())
        except ValueError:
            normalized = float(fallback)
    else:
        normalized = float(fallback)
    if not math.isfinite(normalized) or normalized < 0:
        normalized = float(fallback)
    if normalized.is_integer():
        return int(normalized)
    return normalized


def build_ai_httpx_timeout(read_timeout_sec: int | float) -> httpx.Timeout:
    """Build httpx timeout config for provider clients.

    A zero read timeout disables every bucket; httpx would otherwise apply
    its 5 second default and cut long generations short.
    """
    timeout_sec = normalize_timeout_value(read_timeout_sec, DEFAULT_TIMEOUT_SEC)
    if timeout_sec <= 0:
        return httpx.Timeout(None)
    return httpx.Timeout(
        connect=AI_HTTP_CONNECT_TIMEOUT_SEC,
        read=timeout_sec,
        write=AI_HTTP_WRITE_TIMEOUT_SEC,
        pool=AI_HTTP_POOL_TIMEOUT_SEC,
    )
