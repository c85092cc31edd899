"""Inspect commands -- examine what the extractor finds in a document.

Provides the ``vantagegen inspect`` sub-command group with read-only
commands for viewing the endpoint model extracted from a documentation
page: sections, functions and parameters. Nothing is generated or written;
the data goes to stdout as a table, TSV (``--plain``) or JSON (``--json``).
"""

from __future__ import annotations

from typing import Optional

import typer

from vantagegen.exceptions import VantagegenError
from vantagegen.models import ApiDocument
from vantagegen.output import Column, error, get_output


inspect_app = typer.Typer(no_args_is_help=True)


_DOCUMENT_ARGUMENT_HELP = "Documentation page URL or file path (use '-' for stdin)."


def _load_document(document: Optional[str]) -> ApiDocument:
    """Resolve the document source and extract its endpoint model.

    Args:
        document: Explicit source. When ``None``, ``VANTAGEGEN_DOCUMENT`` or
            the project config supplies it.

    Raises:
        typer.Exit: With the error's exit code when the source is missing,
            cannot be loaded, or violates the expected structure.
    """
    from vantagegen.config import resolve_config
    from vantagegen.parser import extract_document, load_document

    try:
        config = resolve_config(cli_document=document)
        return extract_document(load_document(config.document))
    except VantagegenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


_SECTION_COLUMNS = (
    Column("identifier", "Identifier"),
    Column("title", "Title"),
    Column("functions", "Functions"),
)

_FUNCTION_COLUMNS = (
    Column("section", "Section"),
    Column("method", "Method"),
    Column("endpoint", "Endpoint"),
    Column("inputs", "Inputs"),
)

_PARAMETER_COLUMNS = (
    Column("method", "Method"),
    Column("parameter", "Parameter"),
    Column("necessity", "Necessity"),
    Column("default", "Default"),
    Column("synthesized", "Synthesized"),
)


@inspect_app.command("sections")
def inspect_sections(
    document: Optional[str] = typer.Argument(None, help=_DOCUMENT_ARGUMENT_HELP),
) -> None:
    """List the documentation sections and the interface each becomes.

    Example::

        vantagegen inspect sections ./documentation.html
    """
    api = _load_document(document)

    records = [
        {
            "identifier": section.identifier,
            "title": section.title,
            "functions": len(section.functions),
        }
        for section in api.sections
    ]
    get_output().print_records(_SECTION_COLUMNS, records, title=f"Sections ({len(records)})")


@inspect_app.command("functions")
def inspect_functions(
    document: Optional[str] = typer.Argument(None, help=_DOCUMENT_ARGUMENT_HELP),
) -> None:
    """List every documented endpoint with its method name and inputs.

    The endpoint column shows the value sent as ``function=`` in requests;
    the inputs column lists the parameters callers supply.

    Example::

        vantagegen inspect functions ./documentation.html
        vantagegen --json inspect functions ./documentation.html
    """
    api = _load_document(document)

    records = [
        {
            "section": section.identifier,
            "method": function.canonical_name,
            "endpoint": function.raw_endpoint_name,
            "inputs": [p.name for p in function.caller_parameters],
        }
        for section in api.sections
        for function in section.functions
    ]
    get_output().print_records(_FUNCTION_COLUMNS, records, title=f"Functions ({len(records)})")


@inspect_app.command("parameters")
def inspect_parameters(
    document: Optional[str] = typer.Argument(None, help=_DOCUMENT_ARGUMENT_HELP),
    function: Optional[str] = typer.Option(
        None, "--function", "-f", help="Only show this method's parameters."
    ),
) -> None:
    """List the parameters of every endpoint, in document order.

    Synthesized parameters (``apikey`` and ``function``) are included and
    marked, since they are part of every request URL.

    Example::

        vantagegen inspect parameters ./documentation.html --function quote_endpoint
    """
    api = _load_document(document)

    records = [
        {
            "method": fn.canonical_name,
            "parameter": parameter.name,
            "necessity": parameter.necessity.kind,
            "default": parameter.default,
            "synthesized": parameter.is_synthesized,
        }
        for section in api.sections
        for fn in section.functions
        if function is None or fn.canonical_name == function
        for parameter in fn.parameters
    ]

    if function is not None and not records:
        error(f"No function named {function!r} with parameters")
        raise typer.Exit(code=1)

    get_output().print_records(
        _PARAMETER_COLUMNS, records, title=f"Parameters ({len(records)})"
    )
