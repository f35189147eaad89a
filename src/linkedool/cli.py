"""CLI entry point for linkedool."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
import time
from typing import Optional, Sequence

from . import __version__
from .ai.runtime import call_provider, provider_display_name, resolve_provider_config
from .config import Settings
from .constants import APP_NAME, DEFAULT_MODELS, DEFAULT_PROVIDER, PROVIDER_OPENAI
from .documents import ProfileDocument, normalize_document, read_file_bytes
from .errors import AppError, ProviderError, ValidationError
from .interaction import ThreadedConsoleInteraction, UserInteractionPort
from .logging import log_event, sanitize_error_message, setup_logging
from .prompts import build_prompt

__all__ = ["build_parser", "main", "run"]


def log_info(message: str) -> None:
    """Print a progress line."""
    print(f"\n[{APP_NAME}] {message}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Audit a LinkedIn profile using a local Ollama model or OpenAI",
    )
    parser.add_argument("--pdf", metavar="PATH", help="Path to LinkedIn PDF export")
    parser.add_argument("--html", metavar="PATH", help="Path to LinkedIn HTML file")
    parser.add_argument("--url", help="LinkedIn profile URL (requires session cookie)")
    parser.add_argument("--cookie", help="Session cookie for fetching profile")
    parser.add_argument("--text", help="Raw profile text")
    parser.add_argument(
        "--model",
        help=f"Model name (default: {DEFAULT_MODELS[DEFAULT_PROVIDER]} for ollama, "
        f"{DEFAULT_MODELS[PROVIDER_OPENAI]} for openai)",
    )
    parser.add_argument(
        "--provider",
        default=DEFAULT_PROVIDER,
        help="LLM provider: ollama or openai (default: ollama)",
    )
    parser.add_argument("--host", help="Ollama host URL (default: $OLLAMA_HOST or localhost)")
    parser.add_argument("--api-key", help="OpenAI API key (default: $OPENAI_API_KEY)")
    parser.add_argument("-l", "--log", help="Path to log file or directory (optional)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


async def load_profile_interactively(interaction: UserInteractionPort) -> str:
    """Ask for a document source and load it."""
    kind = await interaction.choose_source()
    if kind is None:
        return ""

    if kind == "pdf":
        path = (await interaction.prompt_text("Path to LinkedIn PDF: ")).strip()
        document = ProfileDocument("pdf", await read_file_bytes(path))
        return await normalize_document(document)

    if kind == "html":
        path = (await interaction.prompt_text("Path to HTML file: ")).strip()
        document = ProfileDocument("html", await read_file_bytes(path))
        return await normalize_document(document)

    if kind == "url":
        url = (await interaction.prompt_text("Profile URL: ")).strip()
        cookie = (
            await interaction.prompt_text(
                "Session cookie (li_at). Use responsibly; may violate LinkedIn ToS: "
            )
        ).strip()
        return await normalize_document(ProfileDocument("url", url), cookie or None)

    return await interaction.prompt_multiline("Paste profile text")


async def get_profile_text(
    args: argparse.Namespace,
    interaction: Optional[UserInteractionPort] = None,
) -> tuple[str, str]:
    """Return ``(profile_text, source)`` from flags, or by prompting."""
    if args.pdf:
        document = ProfileDocument("pdf", await read_file_bytes(args.pdf))
        return await normalize_document(document), "pdf"
    if args.html:
        document = ProfileDocument("html", await read_file_bytes(args.html))
        return await normalize_document(document), "html"
    if args.url:
        return await normalize_document(ProfileDocument("url", args.url), args.cookie), "url"
    if args.text:
        return args.text, "text"

    interaction = interaction or ThreadedConsoleInteraction()
    return await load_profile_interactively(interaction), "interactive"


async def run(
    args: argparse.Namespace,
    settings: Settings,
    interaction: Optional[UserInteractionPort] = None,
) -> int:
    """Run one audit and return the process exit code."""
    log_info("Loading profile...")
    profile_text, source = await get_profile_text(args, interaction)
    if not profile_text or not profile_text.strip():
        print("No profile content detected.", file=sys.stderr)
        return 1
    log_event("profile_loaded", level=logging.INFO, source=source, chars=len(profile_text))

    api_key = args.api_key or os.environ.get("OPENAI_API_KEY")
    config = resolve_provider_config(
        args.provider, args.model, args.host, api_key, settings
    )
    label = provider_display_name(config.provider)

    log_info(f'Calling {label} model "{config.model}"...')
    prompt = build_prompt(profile_text, config.model)
    try:
        response = await call_provider(config, prompt, settings)
    except ProviderError as e:
        print(sanitize_error_message(str(e)), file=sys.stderr)
        return 1
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"\n=== {label} Audit ===\n")
    print(response)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the linkedool CLI."""
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    log_file = args.log or settings.log_file
    setup_logging(log_file)
    log_event(
        "app_start",
        level=logging.INFO,
        entry="cli",
        ollama_host=settings.ollama_host,
        log_file=log_file,
    )

    started = time.perf_counter()
    reason = "ok"
    exit_code = 1
    try:
        exit_code = asyncio.run(run(args, settings))
        if exit_code != 0:
            reason = "failed"
    except KeyboardInterrupt:
        reason = "interrupted"
        print("\nCancelled.", file=sys.stderr)
    except AppError as e:
        reason = "error"
        print(f"Error: {sanitize_error_message(str(e))}", file=sys.stderr)
    except Exception as e:
        reason = "error"
        logging.error("Fatal error: %s", e, exc_info=True)
        print(f"Fatal error: {sanitize_error_message(str(e))}", file=sys.stderr)
    finally:
        log_event(
            "app_stop",
            level=logging.INFO,
            entry="cli",
            reason=reason,
            uptime_ms=round((time.perf_counter() - started) * 1000, 1),
        )
    sys.exit(exit_code)
