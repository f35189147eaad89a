"""Shared HTTP helpers for provider implementations."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

import httpx

from ..errors import ProviderConnectionError, ProviderError, UpstreamError
from ..timeouts import build_ai_httpx_timeout
from .framing import FrameParser, LineDecoder
from .types import StreamState, StreamStats


@asynccontextmanager
async def open_client(
    timeout: int | float,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    headers: Optional[dict[str, str]] = None,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield a short-lived client scoped to a single backend call."""
    async with httpx.AsyncClient(
        timeout=build_ai_httpx_timeout(timeout),
        transport=transport,
        headers=headers,
    ) as client:
        yield client


def upstream_error(provider_label: str, response: httpx.Response, body: str) -> UpstreamError:
    return UpstreamError(
        provider_label,
        response.status_code,
        response.reason_phrase,
        body,
    )


def connection_error(provider_label: str, error: httpx.RequestError) -> ProviderConnectionError:
    try:
        request = error.request
    except RuntimeError:
        # Raised from inside a response body without request context.
        request = None
    return ProviderConnectionError(f"{provider_label} connection failed: {error}", request)

async def post_json(
    client: httpx.AsyncClient,
    url: str,
    payload: dict[str, Any],
    provider_label: str,
) -> dict[str, Any]:
    """POST a JSON payload and return the decoded JSON object.

    Raises:
        UpstreamError: On non-success status
        ProviderConnectionError: On transport failure
        ProviderError: If a success response is not a JSON object
    """
    try:
        response = await client.post(url, json=payload)
    except httpx.RequestError as e:
        raise connection_error(provider_label, e) from e

    if not response.is_success:
        raise upstream_error(provider_label, response, response.text)

    try:
        data = response.json()
    except ValueError as e:
        raise ProviderError(f"{provider_label} returned invalid JSON: {e}") from e
    return data if isinstance(data, dict) else {}


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    provider_label: str,
) -> dict[str, Any]:
    """GET a URL and return the decoded JSON object."""
    try:
        response = await client.get(url)
    except httpx.RequestError as e:
        raise connection_error(provider_label, e) from e

    if not response.is_success:
        raise upstream_error(provider_label, response, response.text)

    try:
        data = response.json()
    except ValueError as e:
        raise ProviderError(f"{provider_label} returned invalid JSON: {e}") from e
    return data if isinstance(data, dict) else {}


async def stream_frames(
    client: httpx.AsyncClient,
    url: str,
    payload: dict[str, Any],
    parse_frame: FrameParser,
    provider_label: str,
    stats: Optional[StreamStats] = None,
) -> AsyncIterator[str]:
    """Open a chunked POST and yield one token per parsed frame.

    The response is held open by ``client.stream`` for exactly as long as
    this generator runs; closing the generator early releases it. Frames
    that fail to parse are counted and skipped.

    Raises:
        UpstreamError: On non-success status, before any token is yielded
        ProviderConnectionError: On transport or body-decoding failure at any point
    """
    stats = stats if stats is not None else StreamStats()
    try:
        async with client.stream("POST", url, json=payload) as response:
            if not response.is_success:
                body = (await response.aread()).decode("utf-8", errors="replace")
                raise upstream_error(provider_label, response, body)

            stats.state = StreamState.STREAMING
            decoder = LineDecoder()
            async for chunk in response.aiter_bytes():
                for line in decoder.feed(chunk):
                    token = _parse_or_skip(parse_frame, line, stats)
                    if token is not None:
                        yield token
            for line in decoder.flush():
                token = _parse_or_skip(parse_frame, line, stats)
                if token is not None:
                    yield token
    except httpx.RequestError as e:
        stats.state = StreamState.FAILED
        raise connection_error(provider_label, e) from e
    except ProviderError:
        stats.state = StreamState.FAILED
        raise

    stats.state = StreamState.COMPLETED


def _parse_or_skip(parse_frame: FrameParser, line: str, stats: StreamStats) -> Optional[str]:
    try:
        token = parse_frame(line)
    except ValueError:
        stats.skipped_frames += 1
        return None
    if token is not None:
        stats.token_count += 1
        stats.output_chars += len(token)
    return token
