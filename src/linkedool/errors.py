"""Custom exception hierarchy for linkedool."""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base exception for app-specific failures."""


class ValidationError(ValueError, AppError):
    """Missing or unusable caller input (profile content, credentials)."""


class UnknownProviderError(ValidationError):
    def __init__(self, provider: str) -> None:
        super().__init__(f"Unknown provider '{provider}'. Use ollama or openai.")
        self.provider = provider


class UnsupportedFormatError(ValidationError):
    """No extraction strategy could turn a document into text."""


class FetchError(AppError):
    """Fetching a profile page failed."""


class ProviderError(AppError):
    """Base class for LLM backend failures."""


class UpstreamError(ProviderError):
    """A backend answered with a non-success HTTP status."""

    def __init__(
        self,
        provider_label: str,
        status: int,
        status_text: str,
        body: str,
    ) -> None:
        super().__init__(
            f"{provider_label} request failed: {status} {status_text} - {body}"
        )
        self.provider_label = provider_label
        self.status = status
        self.status_text = status_text
        self.body = body


class ProviderConnectionError(ProviderError):
    """Request-level failure talking to a backend (connect, reset, read, decode).

    ``request`` is the httpx request that failed, when httpx attached one.
    """

    def __init__(self, message: str, request: Any = None) -> None:
        super().__init__(message)
        self.request = request
