"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~vantagegen.exceptions.VantagegenError` subclass.
Build scripts can inspect the exit code to tell a malformed document apart
from a network problem without parsing stderr.

Example::

    $ vantagegen generate documentation.html -o api.py
    $ echo $?
    7   # EXIT_DOCUMENT_ERROR -- the document broke the expected layout
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required input."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_DOCUMENT_ERROR = 7
"""The documentation page could not be loaded or violates the expected layout."""

EXIT_GENERATION_ERROR = 8
"""The emitted module is not valid Python or could not be written."""

EXIT_MALFORMED_RESPONSE = 9
"""A response body was not a JSON object."""
