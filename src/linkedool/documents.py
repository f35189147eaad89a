"""Profile document normalization: PDF, HTML, fetched pages and raw text."""

from __future__ import annotations

import io
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

import aiofiles  # type: ignore[import-untyped]
import httpx
from bs4 import BeautifulSoup
from charset_normalizer import from_bytes as detect_charset_from_bytes
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from .constants import APP_NAME
from .errors import FetchError, UnsupportedFormatError
from .timeouts import PAGE_FETCH_TIMEOUT_SEC

DocumentKind = Literal["pdf", "html", "url", "text"]

_META_CHARSET_RE = re.compile(
    rb"<meta[^>]+charset\s*=\s*['\"]?\s*([a-zA-Z0-9_\-]+)\s*['\"]?",
    flags=re.IGNORECASE,
)
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class ProfileDocument:
    """Raw profile input and the kind of source it came from."""

    kind: DocumentKind
    data: bytes | str


def extract_charset_from_content_type(content_type: str) -> str | None:
    """Extract charset from HTTP Content-Type header."""
    if not content_type:
        return None
    for part in content_type.lower().split(";"):
        part = part.strip()
        if part.startswith("charset="):
            charset = part[8:].strip().strip('"').strip("'")
            return charset if charset else None
    return None


def decode_html_bytes(raw_bytes: bytes, content_type: str = "") -> str:
    """Decode HTML bytes with multi-stage fallback.

    Priority order:
    1. HTTP Content-Type header charset
    2. HTML meta tag charset
    3. charset_normalizer detection
    4. UTF-8 with error replacement
    """
    candidates: list[str] = []
    header_charset = extract_charset_from_content_type(content_type)
    meta_match = _META_CHARSET_RE.search(raw_bytes)
    meta_charset = meta_match.group(1).decode("ascii", errors="ignore") if meta_match else None

    for item in (header_charset, meta_charset):
        if item and item.lower() not in {c.lower() for c in candidates}:
            candidates.append(item)

    detected = detect_charset_from_bytes(raw_bytes).best()
    encoding = getattr(detected, "encoding", None)
    if isinstance(encoding, str) and encoding.lower() not in {c.lower() for c in candidates}:
        candidates.append(encoding)

    candidates.append("utf-8")
    tried: set[str] = set()
    for enc in candidates:
        enc_key = enc.lower()
        if enc_key in tried:
            continue
        tried.add(enc_key)
        try:
            return raw_bytes.decode(enc)
        except (LookupError, UnicodeDecodeError):
            continue
    return raw_bytes.decode("utf-8", errors="replace")


def extract_text_from_html(markup: str) -> str:
    """Return the visible body text of an HTML page with whitespace collapsed."""
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup(["script", "style", "noscript", "template"]):
        tag.decompose()
    root = soup.body or soup
    return _WHITESPACE_RE.sub(" ", root.get_text(" ")).strip()


def extract_text_from_pdf(data: bytes) -> str:
    """Extract text from PDF bytes, page by page.

    Raises:
        UnsupportedFormatError: If the bytes are not a readable PDF
    """
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PyPdfError, ValueError, KeyError, TypeError) as e:
        raise UnsupportedFormatError(f"Could not extract text from PDF: {e}") from e
    return "\n".join(pages).strip()


async def fetch_profile_html(
    url: str,
    cookie: Optional[str] = None,
    *,
    timeout_sec: float = PAGE_FETCH_TIMEOUT_SEC,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Fetch a profile page, sending the session cookie when given.

    Raises:
        FetchError: On non-success status or transport failure
    """
    headers = {
        "User-Agent": f"{APP_NAME}/1.0 (+profile-audit)",
        "Accept": "text/html,application/xhtml+xml",
    }
    if cookie:
        headers["Cookie"] = cookie
    timeout = httpx.Timeout(connect=5.0, read=timeout_sec, write=5.0, pool=5.0)

    try:
        async with httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers=headers,
            transport=transport,
        ) as client:
            resp = await client.get(url)
    except httpx.HTTPError as e:
        raise FetchError(f"Failed to fetch {url}: {e}") from e

    if not resp.is_success:
        raise FetchError(f"Failed to fetch {url}: {resp.status_code} {resp.reason_phrase}")
    content_type = (resp.headers.get("content-type") or "").lower()
    return decode_html_bytes(resp.content, content_type)


async def read_file_bytes(path: str) -> bytes:
    """Read a local file asynchronously."""
    async with aiofiles.open(Path(path).expanduser(), "rb") as f:
        return await f.read()


async def normalize_document(
    document: ProfileDocument,
    cookie: Optional[str] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Turn any supported profile document into plain text.

    ``url`` documents carry the URL string as data and are fetched first.
    """
    if document.kind == "text":
        return _as_text(document.data)
    if document.kind == "pdf":
        if not isinstance(document.data, bytes):
            raise UnsupportedFormatError("PDF documents must be provided as bytes")
        return extract_text_from_pdf(document.data)
    if document.kind == "html":
        data = document.data
        markup = decode_html_bytes(data) if isinstance(data, bytes) else data
        return extract_text_from_html(markup)
    if document.kind == "url":
        markup = await fetch_profile_html(_as_text(document.data), cookie, transport=transport)
        return extract_text_from_html(markup)
    raise UnsupportedFormatError(f"Unsupported document kind: {document.kind}")


def _as_text(data: bytes | str) -> str:
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
