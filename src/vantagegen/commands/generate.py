"""Generate command -- render a client module from the documentation page.

Implements the ``vantagegen generate`` top-level command, the main entry
point of the tool: it resolves the effective settings, loads and parses the
documentation page (from a URL, local file, or stdin), extracts the endpoint
model, renders the client module and writes it atomically to the
destination (or to stdout for ``-``).

No partial output is ever written: every document error is raised before
the destination is touched.
"""

from __future__ import annotations

from typing import Optional

import typer

from vantagegen.exceptions import VantagegenError
from vantagegen.models import ClientVariant
from vantagegen.output import debug, error, progress, success, suggest, summary


def generate_command(
    document: Optional[str] = typer.Argument(
        None,
        help="Documentation page URL or file path (use '-' for stdin).",
        show_default=False,
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Destination file ('-' for stdout)."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Request URL prefix baked into the module."
    ),
    client_class: Optional[str] = typer.Option(
        None, "--client-class", help="Name of the composite client class."
    ),
    variant: Optional[ClientVariant] = typer.Option(
        None,
        "--variant",
        case_sensitive=False,
        help="'plain' operations raise on failure, 'result' ones return a RequestFailure.",
    ),
    emit_defaults: Optional[bool] = typer.Option(
        None,
        "--defaults/--no-defaults",
        help="Give trailing optional inputs their documented default.",
        show_default=False,
    ),
) -> None:
    """Generate the Python client module for the documented endpoints.

    Args:
        document: URL, local file path, or ``-`` for stdin. Falls back to
            ``VANTAGEGEN_DOCUMENT`` or the project config.
        output: Destination path, ``-`` for stdout.
        base_url: Override for the request URL prefix.
        client_class: Override for the composite client class name.
        variant: Return style of the generated operations.
        emit_defaults: Whether documented defaults become keyword defaults.

    Raises:
        typer.Exit: With the error's exit code when configuration, the
            document, or generation fails.

    Example::

        vantagegen generate https://www.alphavantage.co/documentation/ -o alphavantage_api.py
        vantagegen generate ./documentation.html --variant result -o -
        curl -s https://www.alphavantage.co/documentation/ | vantagegen generate - -o api.py
    """
    from vantagegen.config import resolve_config
    from vantagegen.generator import render_module, write_module
    from vantagegen.parser import extract_document, load_document

    try:
        config = resolve_config(
            cli_document=document,
            cli_output=output,
            cli_base_url=base_url,
            cli_client_class=client_class,
            cli_variant=variant,
            cli_emit_defaults=emit_defaults,
        )
        debug(f"Resolved config: {config.model_dump(mode='json')}")

        progress(f"Loading documentation from: {config.document}")
        api = extract_document(load_document(config.document))
        summary(len(api.sections), api.function_count)

        source = render_module(api, config)
        written = write_module(source, config.output)
    except VantagegenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if written is not None:
        success(f"Wrote {config.client_class} to {written}")
        suggest(f"Import it with: from {written.stem} import {config.client_class}")
