"""Wire framing for streaming backends.

Both backends deliver newline-separated frames over a chunked HTTP body.
``LineDecoder`` turns raw network chunks into complete text lines, and the
``parse_*_frame`` functions turn one line into an optional text token.
Chunk boundaries can fall anywhere, including inside a multi-byte UTF-8
character or in the middle of a JSON object, so decoder state and the
partial-line buffer are carried across chunks.
"""

from __future__ import annotations

import codecs
import json
from typing import Any, Callable, Optional

from ..constants import SSE_DATA_PREFIX, SSE_DONE_SENTINEL

FrameParser = Callable[[str], Optional[str]]


class LineDecoder:
    """Incrementally decode bytes and release only complete lines."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""

    def feed(self, chunk: bytes) -> list[str]:
        """Add a network chunk and return every line it completed."""
        self._buffer += self._decoder.decode(chunk)
        if "\n" not in self._buffer:
            return []
        *lines, self._buffer = self._buffer.split("\n")
        return [line.removesuffix("\r") for line in lines]

    def flush(self) -> list[str]:
        """Return the trailing unterminated line once the transport ends."""
        self._buffer += self._decoder.decode(b"", final=True)
        rest, self._buffer = self._buffer, ""
        rest = rest.removesuffix("\r")
        return [rest] if rest else []


def parse_ndjson_frame(line: str) -> Optional[str]:
    """Parse one Ollama NDJSON line.

    Returns the ``response`` text when present and non-empty, otherwise None.

    Raises:
        ValueError: If the line is not valid JSON
    """
    if not line.strip():
        return None
    payload = json.loads(line)
    if not isinstance(payload, dict):
        return None
    token = payload.get("response")
    if isinstance(token, str) and token:
        return token
    return None


def parse_sse_frame(line: str) -> Optional[str]:
    """Parse one OpenAI event-stream line.

    Only ``data: `` lines are frames. The ``[DONE]`` sentinel and frames
    without ``choices[0].delta.content`` produce no token.

    Raises:
        ValueError: If the frame body is not valid JSON
    """
    if not line.startswith(SSE_DATA_PREFIX):
        return None
    body = line[len(SSE_DATA_PREFIX):]
    if body.strip() == SSE_DONE_SENTINEL:
        return None
    payload = json.loads(body)
    content = _dig(payload, "choices", 0, "delta", "content")
    if isinstance(content, str) and content:
        return content
    return None


def _dig(value: Any, *path: str | int) -> Any:
    for key in path:
        if isinstance(key, int):
            if not isinstance(value, list) or len(value) <= key:
                return None
            value = value[key]
        else:
            if not isinstance(value, dict):
                return None
            value = value.get(key)
    return value
