"""Load the documentation page from a URL, local file, or stdin.

This module handles all I/O for fetching the raw HTML page and turning it into
a :class:`bs4.BeautifulSoup` tree. It never interprets the document's
structure; that is the job of :mod:`vantagegen.parser.extractor`.

The two public functions are:

* :func:`load_document` -- Load and parse a page from any supported source.
* :func:`parse_document` -- Parse an in-memory HTML string.
"""

from __future__ import annotations

import sys
from pathlib import Path

import httpx
from bs4 import BeautifulSoup

from vantagegen.exceptions import ConnectionError_, DocumentError

_PARSER_BACKEND = "html.parser"


def load_document(source: str) -> BeautifulSoup:
    """Load the documentation page from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The parsed document tree.

    Raises:
        DocumentError: If the source cannot be read or is empty.
        ConnectionError_: If a URL cannot be reached.
    """
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


def parse_document(content: str) -> BeautifulSoup:
    """Build a document tree from raw HTML text.

    Raises:
        DocumentError: If *content* is empty or whitespace only.
    """
    if not content.strip():
        raise DocumentError("Document is empty")
    return BeautifulSoup(content, _PARSER_BACKEND)


def _load_from_stdin() -> BeautifulSoup:
    """Read the page from stdin."""
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise DocumentError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise DocumentError("No input received from stdin")

    return parse_document(content)


def _load_from_url(url: str) -> BeautifulSoup:
    """Fetch the page over HTTP(S).

    Raises:
        DocumentError: On an HTTP error status.
        ConnectionError_: On network failures.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DocumentError(
            f"HTTP {exc.response.status_code} fetching document from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise ConnectionError_(f"Failed to fetch document from {url}: {exc}") from exc

    if not response.text.strip():
        raise DocumentError(f"Document at {url} is empty")

    return parse_document(response.text)


def _load_from_file(path: str) -> BeautifulSoup:
    """Load the page from a local file.

    Raises:
        DocumentError: If the file is missing, unreadable, or empty.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise DocumentError(f"Document file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentError(f"Failed to read document {path}: {exc}") from exc

    if not content.strip():
        raise DocumentError(f"Document file is empty: {path}")

    return parse_document(content)
