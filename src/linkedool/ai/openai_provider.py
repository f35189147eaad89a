"""OpenAI provider implementation for linkedool.

Uses the Chat Completions endpoint directly over httpx so that buffered
and event-stream responses go through the same request path.
"""

from __future__ import annotations

from contextlib import aclosing
from typing import Any, AsyncIterator, Optional
from urllib.parse import urlparse

import httpx

from ..config import Settings
from ..constants import DEFAULT_OPENAI_BASE_URL, OPENAI_TEMPERATURE, PROVIDER_OPENAI
from ..errors import ValidationError
from ..timeouts import DEFAULT_TIMEOUT_SEC
from .framing import parse_sse_frame
from .provider_utils import open_client, post_json, stream_frames
from .types import ProviderConfig, StreamStats


class OpenAIProvider:
    """OpenAI (GPT) provider using the Chat Completions API."""

    name = PROVIDER_OPENAI
    display_name = "OpenAI"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_OPENAI_BASE_URL,
        timeout: int | float = DEFAULT_TIMEOUT_SEC,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            base_url: API root, e.g. ``https://api.openai.com/v1``
            timeout: Read timeout in seconds (0 = no timeout)
            transport: Optional httpx transport (tests inject a mock here)

        Raises:
            ValidationError: If no API key is given
        """
        if not api_key or not api_key.strip():
            raise ValidationError("OpenAI API key required.")
        self.api_key = api_key.strip()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_config(
        cls,
        config: ProviderConfig,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "OpenAIProvider":
        return cls(
            api_key=config.api_key or "",
            base_url=settings.openai_base_url,
            timeout=settings.timeout,
            transport=transport,
        )

    def __repr__(self) -> str:
        return f"OpenAIProvider(base_url={self.base_url!r})"

    @property
    def host_label(self) -> str:
        return urlparse(self.base_url).netloc or self.base_url

    @property
    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    def _chat_payload(self, prompt: str, model: str, stream: bool) -> dict[str, Any]:
        return {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": OPENAI_TEMPERATURE,
            "stream": stream,
        }

    async def get_full_response(self, prompt: str, model: str) -> str:
        """Get the full completion text.

        A missing ``choices[0].message.content`` yields an empty string.
        """
        async with open_client(self.timeout, self.transport, self._headers) as client:
            data = await post_json(
                client,
                f"{self.base_url}/chat/completions",
                self._chat_payload(prompt, model, stream=False),
                self.display_name,
            )
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            return ""
        message = choices[0].get("message")
        content = message.get("content") if isinstance(message, dict) else None
        return content if isinstance(content, str) else ""

    async def send_message(
        self,
        prompt: str,
        model: str,
        stats: Optional[StreamStats] = None,
    ) -> AsyncIterator[str]:
        """Stream the completion, yielding each ``delta.content`` fragment."""
        async with open_client(self.timeout, self.transport, self._headers) as client:
            frames = stream_frames(
                client,
                f"{self.base_url}/chat/completions",
                self._chat_payload(prompt, model, stream=True),
                parse_sse_frame,
                self.display_name,
                stats,
            )
            async with aclosing(frames) as tokens:
                async for token in tokens:
                    yield token
