"""Terminal output for vantagegen: data on stdout, diagnostics on stderr.

Only two kinds of data ever reach stdout, so
``vantagegen generate doc.html -o - > api.py`` always yields an importable
file:

* the generated module, when ``generate`` writes to ``-``
  (:meth:`OutputManager.print_source`);
* the ``inspect`` listings (:meth:`OutputManager.print_records`), rendered as
  a Rich table, tab-separated text (``--plain``) or JSON (``--json``).

Everything a person reads rather than a program (the extraction summary,
duplicate-method warnings, errors, debug traces) goes to stderr through the
module-level helpers, which delegate to the :class:`OutputManager` installed
by :func:`~vantagegen.app.main_callback`.

Colour honours ``NO_COLOR``, ``TERM=dumb`` and ``--no-color``.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, NamedTuple, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table


class OutputFormat(str, Enum):
    """How ``inspect`` listings are rendered.

    ``AUTO`` becomes ``RICH`` on an interactive, colour-capable terminal and
    ``PLAIN`` everywhere else.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class Column(NamedTuple):
    """One column of an ``inspect`` listing.

    ``key`` names the field in each record and in JSON output; ``header`` is
    what tables and TSV show.
    """

    key: str
    header: str


class _Style(NamedTuple):
    markup: str
    prefix: str
    quiet_hides: bool
    prefix_only: bool = False


_STYLES: dict[str, _Style] = {
    "info": _Style("", "", True),
    "success": _Style("green", "", True),
    "warning": _Style("yellow", "Warning: ", False, prefix_only=True),
    "error": _Style("bold red", "Error: ", False, prefix_only=True),
    "suggest": _Style("dim", "→ ", True),
    "progress": _Style("dim", "", True),
    "debug": _Style("dim", "[debug] ", True),
}


class OutputManager:
    """Routes generated source, listings and diagnostics to the right stream.

    Args:
        format: Rendering of ``inspect`` listings. ``AUTO`` is resolved here.
        no_color: Disable colour and Rich markup.
        quiet: Hide the summary, success, suggestion and progress messages.
            Warnings and errors are always shown.
        verbose: Show debug traces from the extractor, emitter and clients.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            rich = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich else OutputFormat.PLAIN
        self._format = format

        self._tables = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(format == OutputFormat.RICH),
        )
        self._messages = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    # ------------------------------------------------------------------ #
    # stdout
    # ------------------------------------------------------------------ #

    def print_source(self, source: str) -> None:
        """Write generated Python source to stdout exactly as rendered."""
        sys.stdout.write(source)
        sys.stdout.flush()

    def print_records(
        self,
        columns: Sequence[Column],
        records: list[dict[str, Any]],
        title: Optional[str] = None,
    ) -> None:
        """Print an ``inspect`` listing in the active format.

        JSON keeps each value's type (lists, booleans, counts, ``null``);
        tables and TSV flatten them with :func:`_cell`. The title is shown
        by Rich tables only.
        """
        if self._format == OutputFormat.JSON:
            selected = [{c.key: record.get(c.key) for c in columns} for record in records]
            self.print_source(json.dumps(selected, indent=2, ensure_ascii=False) + "\n")
            return

        rows = [[_cell(record.get(c.key)) for c in columns] for record in records]
        if self._format == OutputFormat.PLAIN:
            lines = ["\t".join(c.header for c in columns)]
            lines.extend("\t".join(row) for row in rows)
            self.print_source("\n".join(lines) + "\n")
            return

        table = Table(title=title, header_style="bold cyan")
        for column in columns:
            table.add_column(column.header)
        for row in rows:
            table.add_row(*row)
        self._tables.print(table)

    # ------------------------------------------------------------------ #
    # stderr
    # ------------------------------------------------------------------ #

    def summary(self, sections: int, operations: int) -> None:
        """Report what the extractor found, before anything is emitted."""
        self.message("info", f"Found {sections} sections, {operations} operations")

    def message(self, level: str, text: str) -> None:
        """Print a diagnostic at *level* (a key of the style table) to stderr."""
        style = _STYLES[level]
        if level == "debug" and not self._verbose:
            return
        if level == "progress" and not _is_tty():
            return
        if self._quiet and style.quiet_hides:
            return

        if self._no_color:
            print(f"{style.prefix}{text}", file=sys.stderr, flush=True)
            return

        prefix, body = escape(style.prefix), escape(text)
        if not style.markup:
            line = f"{prefix}{body}"
        elif style.prefix_only:
            line = f"[{style.markup}]{prefix}[/{style.markup}]{body}"
        else:
            line = f"[{style.markup}]{prefix}{body}[/{style.markup}]"
        self._messages.print(line, highlight=False)

    def success(self, text: str) -> None:
        self.message("success", text)

    def warning(self, text: str) -> None:
        self.message("warning", text)

    def error(self, text: str) -> None:
        self.message("error", text)

    def suggest(self, text: str) -> None:
        self.message("suggest", text)

    def progress(self, text: str) -> None:
        """Shown only when stdout is a terminal, so piped runs stay silent."""
        self.message("progress", text)

    def debug(self, text: str) -> None:
        self.message("debug", text)


def _cell(value: Any) -> str:
    """Flatten a record value for a table or TSV cell."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value) or "-"
    return str(value)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``NO_COLOR`` set to any value, or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Process-wide manager
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating an ``AUTO`` one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Drop the installed manager; the next :func:`get_output` builds a fresh one."""
    global _output
    _output = None


def summary(sections: int, operations: int) -> None:
    get_output().summary(sections, operations)


def success(text: str) -> None:
    get_output().success(text)


def warning(text: str) -> None:
    get_output().warning(text)


def error(text: str) -> None:
    get_output().error(text)


def suggest(text: str) -> None:
    get_output().suggest(text)


def progress(text: str) -> None:
    get_output().progress(text)


def debug(text: str) -> None:
    get_output().debug(text)
