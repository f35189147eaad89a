"""Ollama provider implementation for linkedool.

Talks to a local Ollama server: ``/api/generate`` for buffered and NDJSON
streaming generation, ``/api/tags`` for the installed model list.
"""

from __future__ import annotations

from contextlib import aclosing
from typing import Any, AsyncIterator, Optional

import httpx

from ..config import Settings
from ..constants import DEFAULT_OLLAMA_HOST, PROVIDER_OLLAMA
from ..timeouts import DEFAULT_TIMEOUT_SEC
from .framing import parse_ndjson_frame
from .provider_utils import get_json, open_client, post_json, stream_frames
from .types import ProviderConfig, StreamStats


class OllamaProvider:
    """Local Ollama generation API."""

    name = PROVIDER_OLLAMA
    display_name = "Ollama"

    def __init__(
        self,
        host: str = DEFAULT_OLLAMA_HOST,
        timeout: int | float = DEFAULT_TIMEOUT_SEC,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Ollama provider.

        Args:
            host: Base URL of the Ollama server
            timeout: Read timeout in seconds (0 = no timeout)
            transport: Optional httpx transport (tests inject a mock here)
        """
        self.host = host.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_config(
        cls,
        config: ProviderConfig,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "OllamaProvider":
        return cls(
            host=config.host or settings.ollama_host,
            timeout=settings.timeout,
            transport=transport,
        )

    @property
    def host_label(self) -> str:
        return self.host

    def _generate_payload(self, prompt: str, model: str, stream: bool) -> dict[str, Any]:
        return {"model": model, "prompt": prompt, "stream": stream}

    async def get_full_response(self, prompt: str, model: str) -> str:
        """Generate a complete response in one request.

        A missing ``response`` field yields an empty string.
        """
        async with open_client(self.timeout, self.transport) as client:
            data = await post_json(
                client,
                f"{self.host}/api/generate",
                self._generate_payload(prompt, model, stream=False),
                self.display_name,
            )
        response = data.get("response")
        return response if isinstance(response, str) else ""

    async def send_message(
        self,
        prompt: str,
        model: str,
        stats: Optional[StreamStats] = None,
    ) -> AsyncIterator[str]:
        """Stream a response, yielding each non-empty ``response`` fragment."""
        async with open_client(self.timeout, self.transport) as client:
            frames = stream_frames(
                client,
                f"{self.host}/api/generate",
                self._generate_payload(prompt, model, stream=True),
                parse_ndjson_frame,
                self.display_name,
                stats,
            )
            async with aclosing(frames) as tokens:
                async for token in tokens:
                    yield token

    async def list_models(self) -> list[Any]:
        """Return the ``models`` array from ``/api/tags`` (empty if absent)."""
        async with open_client(self.timeout, self.transport) as client:
            data = await get_json(client, f"{self.host}/api/tags", self.display_name)
        models = data.get("models")
        return models if isinstance(models, list) else []
