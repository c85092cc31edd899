"""vantagegen -- Generate a typed Python API client from the Alpha Vantage HTML docs.

This package reads the Alpha Vantage documentation page, extracts every
documented endpoint into a structured model (capability groups, operations,
parameters), and emits a Python module exposing one method per endpoint. The
generator runs offline, before the consuming application is built; its output
is source code that is committed or packaged alongside the application.

Typical workflow::

    vantagegen inspect sections documentation.html   # review what was found
    vantagegen generate documentation.html -o alphavantage_api.py

The emitted module depends only on :mod:`vantagegen.client`, which provides
the request clients (a real httpx-backed one and an inert mock).

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: Project config file, environment variables, and precedence.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
