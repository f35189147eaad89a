"""Shared mock-backend helpers for linkedool tests."""

from __future__ import annotations

import json
from typing import Callable, Optional

import httpx


class ChunkedStream(httpx.AsyncByteStream):
    """Response body delivered as fixed network chunks.

    Records whether the client closed it and can fail before a given chunk
    index to simulate a connection reset.
    """

    def __init__(self, chunks: list[bytes], fail_after: Optional[int] = None):
        self.chunks = chunks
        self.fail_after = fail_after
        self.closed = False
        self.sent = 0

    async def __aiter__(self):
        for index, chunk in enumerate(self.chunks):
            if self.fail_after is not None and index == self.fail_after:
                raise httpx.ReadError("connection reset by peer")
            self.sent += 1
            yield chunk
        if self.fail_after is not None and self.fail_after >= len(self.chunks):
            raise httpx.ReadError("connection reset by peer")

    async def aclose(self) -> None:
        self.closed = True


class RecordingBackend:
    """Mock transport that records requests and replays canned responses."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]):
        self.responder = responder
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


def ndjson(*objects: dict) -> bytes:
    return b"".join(json.dumps(obj, ensure_ascii=False).encode("utf-8") + b"\n" for obj in objects)


def sse(*payloads: dict | str) -> bytes:
    lines = []
    for payload in payloads:
        body = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
        lines.append(f"data: {body}\n\n")
    return "".join(lines).encode("utf-8")


def delta(content: str) -> dict:
    return {"choices": [{"index": 0, "delta": {"content": content}}]}


async def collect(stream) -> list[str]:
    return [token async for token in stream]
