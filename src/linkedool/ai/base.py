"""Base interface for LLM providers in linkedool.

This module defines the Protocol both backends implement. Backends are
selected by provider tag in ``runtime.PROVIDER_CLASSES``; they share no
base class, only this shape.
"""

from __future__ import annotations

from typing import AsyncIterator, Optional, Protocol

from .types import StreamStats


class AIProvider(Protocol):
    """Protocol for LLM provider implementations."""

    name: str
    display_name: str

    @property
    def host_label(self) -> str:
        """Endpoint reported back to API callers."""
        ...

    async def get_full_response(self, prompt: str, model: str) -> str:
        """Send one buffered request and return the complete text.

        Raises:
            UpstreamError: On non-success status
            ProviderConnectionError: On transport failure
        """
        ...

    def send_message(
        self,
        prompt: str,
        model: str,
        stats: Optional[StreamStats] = None,
    ) -> AsyncIterator[str]:
        """Send one streaming request and yield text tokens in arrival order.

        Raises:
            UpstreamError: On non-success status, before any token
            ProviderConnectionError: On transport failure at any point
        """
        ...
