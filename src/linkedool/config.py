"""Runtime settings resolved once from the environment and passed explicitly."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .constants import DEFAULT_OLLAMA_HOST, DEFAULT_OPENAI_BASE_URL, DEFAULT_PORT
from .timeouts import DEFAULT_TIMEOUT_SEC, normalize_timeout_value


@dataclass(frozen=True, slots=True)
class Settings:
    """Process-wide defaults threaded into clients, CLI and server."""

    ollama_host: str = DEFAULT_OLLAMA_HOST
    openai_base_url: str = DEFAULT_OPENAI_BASE_URL
    timeout: int | float = DEFAULT_TIMEOUT_SEC
    port: int = DEFAULT_PORT
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables.

        Recognized: ``OLLAMA_HOST``, ``OPENAI_BASE_URL``, ``LINKEDOOL_TIMEOUT``,
        ``PORT``, ``LINKEDOOL_LOG``. Empty values fall back to defaults.
        """
        env = os.environ if environ is None else environ

        port_raw = (env.get("PORT") or "").strip()
        try:
            port = int(port_raw) if port_raw else DEFAULT_PORT
        except ValueError:
            port = DEFAULT_PORT

        return cls(
            ollama_host=_strip_slash(env.get("OLLAMA_HOST")) or DEFAULT_OLLAMA_HOST,
            openai_base_url=_strip_slash(env.get("OPENAI_BASE_URL"))
            or DEFAULT_OPENAI_BASE_URL,
            timeout=normalize_timeout_value(
                env.get("LINKEDOOL_TIMEOUT"), DEFAULT_TIMEOUT_SEC
            ),
            port=port,
            log_file=(env.get("LINKEDOOL_LOG") or "").strip() or None,
        )


def _strip_slash(value: Optional[str]) -> str:
    if not value:
        return ""
    return value.strip().rstrip("/")
