"""Turn documented names into names that are safe in emitted Python source.

The documentation's parameter names are used verbatim in request URLs, but
they also become method arguments in the generated module, where they must be
valid, non-reserved Python identifiers. Section identifiers and endpoint names
are already validated by the extractor; parameter names are not, so they pass
through :func:`python_identifier` here.
"""

from __future__ import annotations

import keyword
import re

_INVALID_IDENT_RE = re.compile(r"[^a-zA-Z0-9_]")

# Names taken by the generated methods themselves.
_RESERVED = frozenset({"self", "url"})


def python_identifier(name: str) -> str:
    """Convert a documented parameter name to a valid Python identifier.

    Applies the following transformations in order:

    1. Hyphens, dots and any other invalid characters become underscores.
    2. Consecutive and leading/trailing underscores are collapsed.
    3. An empty result defaults to ``"param"``.
    4. A leading digit gets an underscore prefix.
    5. Python keywords and names used inside generated methods get a
       trailing underscore per PEP 8 convention.

    Example::

        >>> python_identifier("symbol")
        'symbol'
        >>> python_identifier("from")
        'from_'
        >>> python_identifier("time-period")
        'time_period'
    """
    result = _INVALID_IDENT_RE.sub("_", name)
    result = re.sub(r"_+", "_", result).strip("_")
    if not result:
        result = "param"
    if result[0].isdigit():
        result = f"_{result}"
    if keyword.iskeyword(result) or result in _RESERVED:
        result = f"{result}_"
    return result


def unique_identifiers(names: list[str]) -> list[str]:
    """Map each name through :func:`python_identifier`, keeping results distinct.

    A later name that collides with an earlier result gets a numeric suffix
    (``_2``, ``_3``, ...). Order is preserved.
    """
    seen: set[str] = set()
    result: list[str] = []
    for name in names:
        candidate = python_identifier(name)
        base, n = candidate, 2
        while candidate in seen:
            candidate = f"{base}_{n}"
            n += 1
        seen.add(candidate)
        result.append(candidate)
    return result
