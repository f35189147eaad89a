"""Shared typed contracts for provider configuration and stream bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """Provider tag, model and endpoint/credential for a single call.

    ``api_key`` is kept out of ``repr`` so configs can be logged safely.
    """

    provider: str
    model: str
    host: Optional[str] = None
    api_key: Optional[str] = field(default=None, repr=False)


class StreamState(str, Enum):
    """Lifecycle of one streaming request."""

    CONNECTING = "connecting"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(slots=True)
class StreamStats:
    """Mutable counters filled in while a stream is consumed."""

    state: StreamState = StreamState.CONNECTING
    token_count: int = 0
    output_chars: int = 0
    skipped_frames: int = 0
