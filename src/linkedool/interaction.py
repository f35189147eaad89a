"""Async console interaction adapters for the CLI."""

from __future__ import annotations

import asyncio
from typing import Optional, Protocol

from prompt_toolkit import prompt as pt_prompt

from .documents import DocumentKind

# (kind, menu label)
SOURCE_CHOICES: list[tuple[DocumentKind, str]] = [
    ("pdf", "LinkedIn PDF download"),
    ("html", "Saved LinkedIn HTML file"),
    ("url", "Fetch LinkedIn profile URL (requires your session cookie, may break ToS)"),
    ("text", "Paste raw profile text"),
]


class UserInteractionPort(Protocol):
    """Minimal async interaction contract used by the CLI flow."""

    async def choose_source(self) -> Optional[DocumentKind]:
        """Ask which kind of profile document to import."""

    async def prompt_text(self, prompt: str) -> str:
        """Prompt for a single line of input."""

    async def prompt_multiline(self, prompt: str) -> str:
        """Prompt for multi-line free-form input."""

    async def notify(self, message: str) -> None:
        """Display one-way informational output."""


def parse_source_choice(answer: str) -> Optional[DocumentKind]:
    """Map a menu answer (number or kind name) to a document kind."""
    value = answer.strip().lower()
    if value.isdigit():
        index = int(value) - 1
        if 0 <= index < len(SOURCE_CHOICES):
            return SOURCE_CHOICES[index][0]
        return None
    for kind, _ in SOURCE_CHOICES:
        if value == kind:
            return kind
    return None


class ThreadedConsoleInteraction:
    """Console adapter that runs blocking prompts in worker threads."""

    async def choose_source(self) -> Optional[DocumentKind]:
        await self.notify("How do you want to import the profile?")
        for i, (_, label) in enumerate(SOURCE_CHOICES, 1):
            await self.notify(f"  {i}. {label}")
        while True:
            try:
                answer = await self.prompt_text("Choice [1-4]: ")
            except (EOFError, KeyboardInterrupt):
                return None
            kind = parse_source_choice(answer)
            if kind is not None:
                return kind
            await self.notify("Please enter a number between 1 and 4.")

    async def prompt_text(self, prompt: str) -> str:
        return await asyncio.to_thread(pt_prompt, prompt)

    async def prompt_multiline(self, prompt: str) -> str:
        await self.notify(f"{prompt} (finish with Esc then Enter)")
        return await asyncio.to_thread(pt_prompt, "> ", multiline=True)

    async def notify(self, message: str) -> None:
        await asyncio.to_thread(print, message)
