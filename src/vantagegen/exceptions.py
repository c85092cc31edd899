"""Exception hierarchy for vantagegen.

All exceptions inherit from :class:`VantagegenError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`vantagegen.exit_codes`.
The top-level error handler in :func:`vantagegen.app.main` catches
``VantagegenError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    VantagegenError (exit 1)
    +-- InvalidUsageError       (exit 2)
    +-- ConnectionError_        (exit 6)
    +-- DocumentError           (exit 7)
    +-- GenerationError         (exit 8)
    +-- MalformedResponseError  (exit 9)
    +-- ConfigError             (exit 1)

:class:`ConnectionError_` and :class:`MalformedResponseError` are also raised
at runtime by the request clients the generated code delegates to; the
generator itself only ever raises the others.
"""

from vantagegen.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_DOCUMENT_ERROR,
    EXIT_GENERATION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MALFORMED_RESPONSE,
)


class VantagegenError(Exception):
    """Base exception for all vantagegen errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`vantagegen.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(VantagegenError):
    """Raised for invalid CLI arguments or a missing document source."""

    exit_code = EXIT_INVALID_USAGE


class ConnectionError_(VantagegenError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class DocumentError(VantagegenError):
    """Raised when the documentation page cannot be loaded or breaks its layout.

    Covers every generation-time schema violation: missing main content,
    a section without a title, a parameter without a name, an unpaired
    definition node, or a default value that cannot be recovered. These are
    fatal; no partial module is ever written.
    """

    exit_code = EXIT_DOCUMENT_ERROR


class GenerationError(VantagegenError):
    """Raised when the emitted module does not parse or cannot be written."""

    exit_code = EXIT_GENERATION_ERROR


class MalformedResponseError(VantagegenError):
    """Raised when an API response body is not a JSON object."""

    exit_code = EXIT_MALFORMED_RESPONSE


class ConfigError(VantagegenError):
    """Raised for configuration problems (invalid project config JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
