"""HTTP API for linkedool: buffered and streaming profile audits."""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

import httpx
import uvicorn
from fastapi import FastAPI, File, Form, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse

from . import __version__
from .ai.runtime import (
    call_provider,
    get_provider_instance,
    list_models,
    resolve_provider_config,
    stream_provider,
)
from .config import Settings
from .constants import MAX_UPLOAD_BYTES, SERVICE_NAME
from .documents import ProfileDocument, normalize_document
from .errors import ProviderError, ValidationError
from .logging import log_event, sanitize_error_message, setup_logging
from .models import AnalyzeResponse, ErrorResponse, HealthResponse, ModelsResponse
from .prompts import build_prompt
from .streaming import relay_as_events

MISSING_PROFILE_MESSAGE = "Provide profileText, profilePdf, or profileHtml."

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
}


def _error_response(status: int, error: str, details: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        details=sanitize_error_message(details) if details is not None else None,
    )
    return JSONResponse(status_code=status, content=body.model_dump(exclude_none=True))


async def _read_upload(upload: UploadFile) -> bytes:
    data = await upload.read(MAX_UPLOAD_BYTES + 1)
    if len(data) > MAX_UPLOAD_BYTES:
        raise ValidationError(
            f"Uploaded file '{upload.filename}' exceeds the {MAX_UPLOAD_BYTES // (1024 * 1024)} MB limit."
        )
    return data


async def resolve_profile_text(
    profile_text: Optional[str],
    profile_pdf: Optional[UploadFile],
    profile_html: Optional[UploadFile],
) -> tuple[str, str]:
    """Pick profile text from inline text, then PDF, then HTML.

    Returns:
        Tuple of (profile_text, source)

    Raises:
        ValidationError: If no source yields non-blank text
    """
    if profile_text and profile_text.strip():
        return profile_text, "text"

    if profile_pdf is not None:
        text = await normalize_document(ProfileDocument("pdf", await _read_upload(profile_pdf)))
        if text.strip():
            return text, "pdf"

    if profile_html is not None:
        text = await normalize_document(ProfileDocument("html", await _read_upload(profile_html)))
        if text.strip():
            return text, "html"

    raise ValidationError(MISSING_PROFILE_MESSAGE)


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Resolved settings (defaults to the environment)
        transport: Optional httpx transport used for every backend call
    """
    settings = settings or Settings.from_env()

    app = FastAPI(title=SERVICE_NAME, version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings

    @app.get("/", response_model=HealthResponse)
    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(service=SERVICE_NAME)

    @app.post("/api/analyze", response_model=AnalyzeResponse)
    async def analyze(
        profile_text: Optional[str] = Form(None, alias="profileText"),
        provider: Optional[str] = Form(None),
        model: Optional[str] = Form(None),
        host: Optional[str] = Form(None),
        api_key: Optional[str] = Form(None, alias="apiKey"),
        profile_pdf: Optional[UploadFile] = File(None, alias="profilePdf"),
        profile_html: Optional[UploadFile] = File(None, alias="profileHtml"),
    ):
        config = resolve_provider_config(provider, model, host, api_key, settings)
        try:
            text, source = await resolve_profile_text(profile_text, profile_pdf, profile_html)
            log_event(
                "analyze_request",
                level=logging.INFO,
                endpoint="analyze",
                provider=config.provider,
                model=config.model,
                source=source,
                input_chars=len(text),
            )
            prompt = build_prompt(text, config.model)
            provider_instance = get_provider_instance(config, settings, transport)
            llm_report = await call_provider(
                config, prompt, provider_instance=provider_instance
            )
        except ValidationError as e:
            log_event(
                "analyze_rejected",
                level=logging.WARNING,
                endpoint="analyze",
                status=400,
                error=str(e),
            )
            return _error_response(400, str(e))
        except ProviderError as e:
            return _error_response(502, "LLM request failed", str(e))
        except Exception as e:
            logging.error("Unhandled error in /api/analyze: %s", e, exc_info=True)
            return _error_response(500, "Server error", str(e))

        return AnalyzeResponse(
            provider=config.provider,
            model=config.model,
            host=provider_instance.host_label,
            llm_report=llm_report,
        )

    @app.get("/api/models", response_model=ModelsResponse)
    async def models(host: Optional[str] = Query(None)):
        try:
            target, model_list = await list_models(host, settings, transport)
        except ProviderError as e:
            return _error_response(502, "Failed to fetch models", str(e))
        return ModelsResponse(host=target, models=model_list)

    @app.post("/api/analyze-stream")
    async def analyze_stream(
        profile_text: Optional[str] = Form(None, alias="profileText"),
        provider: Optional[str] = Form(None),
        model: Optional[str] = Form(None),
        host: Optional[str] = Form(None),
        api_key: Optional[str] = Form(None, alias="apiKey"),
        profile_pdf: Optional[UploadFile] = File(None, alias="profilePdf"),
        profile_html: Optional[UploadFile] = File(None, alias="profileHtml"),
    ):
        config = resolve_provider_config(provider, model, host, api_key, settings)
        try:
            text, source = await resolve_profile_text(profile_text, profile_pdf, profile_html)
        except ValidationError as e:
            log_event(
                "analyze_rejected",
                level=logging.WARNING,
                endpoint="analyze-stream",
                status=400,
                error=str(e),
            )
            return _error_response(400, str(e))
        except Exception as e:
            logging.error("Unhandled error in /api/analyze-stream: %s", e, exc_info=True)
            return _error_response(500, "Server error", str(e))

        log_event(
            "analyze_request",
            level=logging.INFO,
            endpoint="analyze-stream",
            provider=config.provider,
            model=config.model,
            source=source,
            input_chars=len(text),
        )
        # Provider and credential errors surface on first iteration, after
        # the event-stream headers are sent, so they arrive as error events.
        tokens = stream_provider(config, build_prompt(text, config.model), settings, transport)
        return StreamingResponse(
            relay_as_events(tokens),
            media_type="text/event-stream",
            headers=SSE_HEADERS,
        )

    return app


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Run the HTTP server with uvicorn."""
    settings = Settings.from_env()
    parser = argparse.ArgumentParser(prog=SERVICE_NAME, description="linkedool HTTP API")
    parser.add_argument("--bind", default="127.0.0.1", help="Interface to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=settings.port, help="Port (default: $PORT or 3000)")
    parser.add_argument("-l", "--log", help="Path to log file or directory (optional)")
    args = parser.parse_args(argv)

    log_file = args.log or settings.log_file
    setup_logging(log_file)
    log_event(
        "app_start",
        level=logging.INFO,
        entry="server",
        ollama_host=settings.ollama_host,
        log_file=log_file,
    )
    print(f"[{SERVICE_NAME}] listening on http://{args.bind}:{args.port}")
    uvicorn.run(create_app(settings), host=args.bind, port=args.port, log_level="warning")
