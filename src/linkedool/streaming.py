"""Event-stream relay for streamed audits.

The relay is the point where the streaming sequence meets an HTTP
response whose headers are already committed: failures after that point
can only be reported in-band as an ``error`` event.
"""

from __future__ import annotations

import json
import logging
from contextlib import aclosing
from typing import Any, AsyncGenerator, AsyncIterator

from .errors import ProviderError, ValidationError
from .logging import log_event, sanitize_error_message


def format_sse_event(payload: dict[str, Any]) -> str:
    """Encode one JSON payload as an event-stream ``data:`` frame."""
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


async def relay_as_events(stream: AsyncGenerator[str, None]) -> AsyncIterator[str]:
    """Relay tokens as ``{chunk}`` events, then one ``{done: true}`` event.

    Any failure ends the relay with a single ``{error, details?}`` event
    instead of an exception.
    """
    try:
        async with aclosing(stream) as tokens:
            async for chunk in tokens:
                yield format_sse_event({"chunk": chunk})
    except ValidationError as e:
        yield format_sse_event({"error": str(e)})
        return
    except ProviderError as e:
        yield format_sse_event(
            {"error": "LLM request failed", "details": sanitize_error_message(str(e))}
        )
        return
    except Exception as e:
        log_event(
            "stream_relay_error",
            level=logging.ERROR,
            error_type=type(e).__name__,
            error=sanitize_error_message(str(e)),
        )
        logging.error("Unexpected error while relaying stream: %s", e, exc_info=True)
        yield format_sse_event(
            {"error": "Server error", "details": sanitize_error_message(str(e))}
        )
        return

    yield format_sse_event({"done": True})
