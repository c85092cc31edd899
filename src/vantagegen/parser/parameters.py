"""Extract the ordered parameter list of one endpoint.

After an endpoint's description comes an ``<h6>`` marker followed by the
parameter list. Every parameter occupies exactly two visible nodes:

* the *definition* node, e.g. ``<p>&#10004; Required: <code>symbol</code></p>``,
  which names the parameter and states whether it is required;
* the *elaboration* node, which explains the parameter and, for optional
  ones, shows the default as an inline token such as
  ``<code>outputsize=compact</code>``.

The pairing is purely positional, an artifact of the page's layout. It lives
in :func:`pair_definitions` alone so that a layout change only touches that
function.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Iterator

from bs4 import Tag

from vantagegen.exceptions import DocumentError
from vantagegen.models import Necessity, Optional_, Parameter, Required
from vantagegen.parser.traversal import PARAMETER_MARKER, is_tag, visible_nodes

DROPPED_PARAMETERS = frozenset({"datatype"})
"""Only JSON responses are supported, so the format switch is never exposed."""

_REQUIRED_MARK = "Required"
_OPTIONAL_MARK = "Optional"


def extract_parameters(heading: Tag) -> list[Parameter]:
    """Return the parameters documented after an endpoint *heading*.

    Scanning starts after the first ``<h6>`` marker and stops at the next one
    (or at the end of the endpoint). Parameters named ``datatype`` are
    classified like any other and then dropped.

    Args:
        heading: The endpoint's ``<h4>`` element.

    Returns:
        Parameters in document order. Empty when the endpoint documents no
        parameter list.

    Raises:
        DocumentError: If a definition has no elaboration, no name, or an
            unrecoverable necessity.
    """
    nodes = itertools.dropwhile(
        lambda n: not is_tag(n, PARAMETER_MARKER), visible_nodes(heading)
    )
    next(nodes, None)  # the marker itself
    listing = itertools.takewhile(lambda n: not is_tag(n, PARAMETER_MARKER), nodes)

    parameters = [
        parse_parameter(definition, elaboration)
        for definition, elaboration in pair_definitions(listing)
    ]
    return [p for p in parameters if p.name not in DROPPED_PARAMETERS]


def pair_definitions(nodes: Iterable[Tag]) -> Iterator[tuple[Tag, Tag]]:
    """Group the parameter listing into ``(definition, elaboration)`` pairs.

    Raises:
        DocumentError: If the listing ends on a definition with no
            elaboration node after it.
    """
    it = iter(nodes)
    for definition in it:
        elaboration = next(it, None)
        if elaboration is None:
            raise DocumentError(
                f"Parameter definition has no elaboration node: {_snippet(definition)}"
            )
        yield definition, elaboration


def parse_parameter(definition: Tag, elaboration: Tag) -> Parameter:
    """Build one :class:`~vantagegen.models.Parameter` from its two nodes.

    Raises:
        DocumentError: If the definition carries no ``<code>`` name or neither
            "Required" nor "Optional", or an optional parameter's default
            cannot be read from the elaboration.
    """
    code = definition.find("code")
    if code is None:
        raise DocumentError(f"Cannot find parameter name in {_snippet(definition)}")
    name = code.get_text().strip()

    return Parameter(name=name, necessity=_parse_necessity(definition, elaboration))


def _parse_necessity(definition: Tag, elaboration: Tag) -> Necessity:
    """Classify a parameter from the words in its definition node."""
    text = definition.get_text()
    if _REQUIRED_MARK in text:
        return Required()
    if _OPTIONAL_MARK in text:
        return Optional_(default=_parse_default(elaboration))
    raise DocumentError(f"Cannot determine parameter necessity of {_snippet(definition)}")


def _parse_default(elaboration: Tag) -> str:
    """Read ``value`` out of the first ``<code>name=value</code>`` token."""
    code = elaboration.find("code")
    if code is None:
        raise DocumentError(
            f"Cannot find default value for optional parameter in {_snippet(elaboration)}"
        )
    segments = code.get_text().split("=")
    if len(segments) < 2:
        raise DocumentError(
            f"Default value token {code.get_text()!r} has no '=' separator"
        )
    return segments[1]


def _snippet(node: Tag, width: int = 120) -> str:
    """Short single-line rendering of *node* for error messages."""
    text = " ".join(str(node).split())
    return text if len(text) <= width else text[: width - 3] + "..."
