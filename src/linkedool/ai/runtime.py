"""Provider selection and buffered/streaming dispatch with structured logging."""

from __future__ import annotations

import logging
import time
from contextlib import aclosing
from typing import Any, AsyncIterator, Optional

import httpx

from ..config import Settings
from ..constants import DEFAULT_MODELS, DEFAULT_PROVIDER, PROVIDER_OLLAMA
from ..errors import UnknownProviderError
from ..logging import extract_http_error_context, log_event, sanitize_error_message
from .base import AIProvider
from .ollama_provider import OllamaProvider
from .openai_provider import OpenAIProvider
from .types import ProviderConfig, StreamState, StreamStats

PROVIDER_CLASSES: dict[str, type[OllamaProvider] | type[OpenAIProvider]] = {
    "ollama": OllamaProvider,
    "openai": OpenAIProvider,
}


def provider_display_name(provider_name: str) -> str:
    """Human label for a provider tag (``Ollama``, ``OpenAI``)."""
    provider_class = PROVIDER_CLASSES.get(provider_name)
    if provider_class is None:
        return provider_name
    return provider_class.display_name


def resolve_provider_config(
    provider: Optional[str] = None,
    model: Optional[str] = None,
    host: Optional[str] = None,
    api_key: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> ProviderConfig:
    """Fill caller-supplied values with defaults.

    The provider tag is normalized but not validated here; unknown tags
    surface as ``UnknownProviderError`` when an instance is requested.
    """
    settings = settings or Settings()
    provider_name = (provider or DEFAULT_PROVIDER).strip().lower() or DEFAULT_PROVIDER
    model_name = (model or "").strip() or DEFAULT_MODELS.get(
        provider_name, DEFAULT_MODELS[DEFAULT_PROVIDER]
    )
    resolved_host = None
    if provider_name == PROVIDER_OLLAMA:
        resolved_host = (host or "").strip().rstrip("/") or settings.ollama_host
    return ProviderConfig(
        provider=provider_name,
        model=model_name,
        host=resolved_host,
        api_key=(api_key or "").strip() or None,
    )


def get_provider_instance(
    config: ProviderConfig,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AIProvider:
    """Build the provider for ``config.provider`` without touching the network.

    Raises:
        UnknownProviderError: If the tag is not registered
        ValidationError: If a required credential is missing
    """
    provider_class = PROVIDER_CLASSES.get(config.provider)
    if provider_class is None:
        raise UnknownProviderError(config.provider)
    return provider_class.from_config(config, settings or Settings(), transport=transport)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 1)


def _log_ai_error(mode: str, config: ProviderConfig, started: float, error: Exception) -> None:
    log_event(
        "ai_error",
        level=logging.ERROR,
        mode=mode,
        provider=config.provider,
        model=config.model,
        latency_ms=_elapsed_ms(started),
        error_type=type(error).__name__,
        error=sanitize_error_message(str(error)),
        **extract_http_error_context(error),
    )


async def call_provider(
    config: ProviderConfig,
    prompt: str,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    provider_instance: Optional[AIProvider] = None,
) -> str:
    """Send one buffered request and return the complete text.

    Pass ``provider_instance`` to reuse a provider the caller already built.
    """
    if provider_instance is None:
        provider_instance = get_provider_instance(config, settings, transport)
    log_event(
        "ai_request",
        level=logging.INFO,
        mode="buffered",
        provider=config.provider,
        model=config.model,
        host=provider_instance.host_label,
        input_chars=len(prompt),
    )

    started = time.perf_counter()
    try:
        response_text = await provider_instance.get_full_response(prompt, config.model)
    except Exception as e:
        _log_ai_error("buffered", config, started, e)
        raise

    log_event(
        "ai_response",
        level=logging.INFO,
        mode="buffered",
        provider=config.provider,
        model=config.model,
        latency_ms=_elapsed_ms(started),
        output_chars=len(response_text),
    )
    return response_text


async def stream_provider(
    config: ProviderConfig,
    prompt: str,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AsyncIterator[str]:
    """Yield text tokens from one streaming request.

    The sequence is single-pass. Provider lookup and credential checks
    happen on first iteration, before any connection is opened. Closing
    the generator early closes the upstream connection.
    """
    provider_instance = get_provider_instance(config, settings, transport)
    stats = StreamStats()
    log_event(
        "stream_start",
        level=logging.INFO,
        provider=config.provider,
        model=config.model,
        state=stats.state.value,
        host=provider_instance.host_label,
        input_chars=len(prompt),
    )

    started = time.perf_counter()
    completed = False
    try:
        async with aclosing(
            provider_instance.send_message(prompt, config.model, stats)
        ) as tokens:
            async for token in tokens:
                yield token
        completed = True
    except Exception as e:
        stats.state = StreamState.FAILED
        log_event(
            "stream_error",
            level=logging.ERROR,
            provider=config.provider,
            model=config.model,
            state=stats.state.value,
            latency_ms=_elapsed_ms(started),
            token_count=stats.token_count,
            error_type=type(e).__name__,
            error=sanitize_error_message(str(e)),
            **extract_http_error_context(e),
        )
        raise
    finally:
        if not completed and stats.state is not StreamState.FAILED:
            log_event(
                "stream_cancelled",
                level=logging.WARNING,
                provider=config.provider,
                model=config.model,
                state=stats.state.value,
                latency_ms=_elapsed_ms(started),
                token_count=stats.token_count,
            )

    log_event(
        "stream_complete",
        level=logging.INFO,
        provider=config.provider,
        model=config.model,
        state=stats.state.value,
        latency_ms=_elapsed_ms(started),
        token_count=stats.token_count,
        output_chars=stats.output_chars,
        skipped_frames=stats.skipped_frames,
    )


async def list_models(
    host: Optional[str] = None,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> tuple[str, list[Any]]:
    """Return ``(host, models)`` for an Ollama server."""
    settings = settings or Settings()
    target = (host or "").strip().rstrip("/") or settings.ollama_host
    provider_instance = OllamaProvider(host=target, timeout=settings.timeout, transport=transport)
    try:
        models = await provider_instance.list_models()
    except Exception as e:
        log_event(
            "models_request",
            level=logging.ERROR,
            host=target,
            result="error",
            error=sanitize_error_message(str(e)),
        )
        raise
    log_event(
        "models_request",
        level=logging.INFO,
        host=target,
        result="ok",
        model_count=len(models),
    )
    return target, models
