"""Shared test fixtures for vantagegen.

Provides reusable fixtures for loading HTML documentation fixtures, wrapping
small documents in the page skeleton, creating isolated config environments,
managing output state, and running CLI commands. These fixtures are
discovered by pytest and available to all test modules without explicit
imports.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from vantagegen.models import ApiDocument
from vantagegen.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"
DOCUMENTATION_PAGE = FIXTURES_DIR / "documentation.html"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def documentation_html() -> str:
    """Raw HTML of the sample documentation page."""
    return DOCUMENTATION_PAGE.read_text(encoding="utf-8")


@pytest.fixture
def documentation_soup(documentation_html: str) -> BeautifulSoup:
    """Parsed tree of the sample documentation page."""
    from vantagegen.parser import parse_document

    return parse_document(documentation_html)


@pytest.fixture
def api_document(documentation_soup: BeautifulSoup) -> ApiDocument:
    """Endpoint model extracted from the sample documentation page."""
    from vantagegen.parser import extract_document

    return extract_document(documentation_soup)


@pytest.fixture
def build_soup():
    """Factory that wraps an ``<article>`` body in the page skeleton and parses it.

    Example::

        def test_something(build_soup):
            soup = build_soup("<section><h2>Quotes</h2></section>")
    """
    from vantagegen.parser import parse_document

    def _build(article_body: str) -> BeautifulSoup:
        return parse_document(
            '<html><body><div class="container-fluid"><article>'
            f"{article_body}"
            "</article></div></body></html>"
        )

    return _build


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_DATA_HOME to a subdirectory of tmp_path so that crash logs
    never touch the real user directories. Clears all VANTAGEGEN_*
    environment variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "VANTAGEGEN_DOCUMENT",
        "VANTAGEGEN_OUTPUT",
        "VANTAGEGEN_BASE_URL",
        "VANTAGEGEN_VARIANT",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Set up a quiet output manager for tests that don't care about output.

    Installs a PLAIN-format, quiet OutputManager as the global output
    and resets it after the test completes.
    """
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()
