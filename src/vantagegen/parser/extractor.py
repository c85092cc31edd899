"""Extract capability groups, endpoints, and descriptions from the document tree.

This module walks the parsed documentation page and builds an
:class:`~vantagegen.models.ApiDocument` holding every section, endpoint and
parameter, in document order.

The single public entry point is :func:`extract_document`. It delegates to
helpers that each handle one level of the page's structure:

* :func:`find_main_content` -- the ``<article>`` inside ``.container-fluid``.
* :func:`scan_sections` -- the top-level ``<section>`` elements within it.
* :func:`extract_section` -- one capability group and its ``<h4>`` endpoints.
* :func:`extract_function` -- one endpoint's names, description and
  parameters (the parameters come from
  :func:`~vantagegen.parser.parameters.extract_parameters`).

Every structural surprise raises :class:`~vantagegen.exceptions.DocumentError`.
There is no degraded mode: a group that cannot be named or an endpoint that
cannot be bound would make the generated client silently wrong.
"""

from __future__ import annotations

import itertools
import keyword
import re
from collections import Counter

from bs4 import BeautifulSoup, Tag

from vantagegen.exceptions import DocumentError
from vantagegen.models import (
    SYNTHESIZED_PARAMETERS,
    ApiDocument,
    Function,
    Parameter,
    Section,
)
from vantagegen.output import debug
from vantagegen.parser.parameters import extract_parameters
from vantagegen.parser.traversal import (
    FUNCTION_HEADING,
    PARAMETER_MARKER,
    is_tag,
    node_text,
    visible_nodes,
)

MAIN_CONTENT_SELECTOR = ".container-fluid article"

# The page labels two endpoints by their title instead of the value the API
# expects in the ``function`` query parameter.
KNOWN_ENDPOINT_LABELS: dict[str, str] = {
    "Quote Endpoint": "GLOBAL_QUOTE",
    "Search Endpoint": "SYMBOL_SEARCH",
}

_PARENTHESISED_RE = re.compile(r"\(.+?\)")


def extract_document(soup: BeautifulSoup) -> ApiDocument:
    """Build the full :class:`~vantagegen.models.ApiDocument` from a page.

    Example::

        soup = load_document("documentation.html")
        document = extract_document(soup)
        for section in document.sections:
            print(section.identifier, len(section.functions))

    Raises:
        DocumentError: On any violation of the expected page layout.
    """
    main = find_main_content(soup)
    sections = [extract_section(node) for node in scan_sections(main)]
    debug(
        f"Extracted {len(sections)} sections, "
        f"{sum(len(s.functions) for s in sections)} functions"
    )
    return ApiDocument(sections=sections)


def find_main_content(soup: BeautifulSoup) -> Tag:
    """Return the page's main ``<article>``.

    Raises:
        DocumentError: If no ``<article>`` sits inside a ``.container-fluid``
            element.
    """
    main = soup.select_one(MAIN_CONTENT_SELECTOR)
    if main is None:
        raise DocumentError(
            f"Cannot find main content ({MAIN_CONTENT_SELECTOR!r}) in document"
        )
    return main


def scan_sections(main: Tag) -> list[Tag]:
    """Return the top-level ``<section>`` elements of *main*, in document order.

    A section nested inside another section belongs to its parent and is not
    returned on its own.
    """
    return [
        node
        for node in main.find_all("section")
        if _outermost_section(node, main)
    ]


def _outermost_section(node: Tag, main: Tag) -> bool:
    for parent in node.parents:
        if parent is main:
            return True
        if is_tag(parent, "section"):
            return False
    return True


def extract_section(node: Tag) -> Section:
    """Extract one capability group and all of its endpoints.

    Raises:
        DocumentError: If the section has no ``<h2>`` title or any endpoint
            inside it is malformed.
    """
    title_node = node.find("h2")
    if title_node is None:
        raise DocumentError("Section has no <h2> title")
    title = title_node.get_text()
    identifier = section_identifier(title)

    functions = [extract_function(h) for h in node.find_all(FUNCTION_HEADING)]
    debug(f"Section {identifier}: {len(functions)} functions")
    return Section(identifier=identifier, title=title.strip(), functions=functions)


def section_identifier(title: str) -> str:
    """Derive a class name from a section title.

    Parenthesised text is removed, ``&`` becomes ``And``, and the remaining
    words are concatenated::

        >>> section_identifier("Time Series (Daily)")
        'TimeSeries'
        >>> section_identifier("Quotes & Info")
        'QuotesAndInfo'

    Raises:
        DocumentError: If the result is empty, does not start with a letter
            or is a keyword.
    """
    name = _PARENTHESISED_RE.sub("", title)
    name = name.replace("&", "And")
    identifier = "".join(name.split())
    if (
        not identifier
        or not identifier[0].isalpha()
        or not identifier.isidentifier()
        or keyword.iskeyword(identifier)
    ):
        raise DocumentError(f"Section title {title!r} does not yield a valid name")
    return identifier


def extract_function(heading: Tag) -> Function:
    """Extract one endpoint from its ``<h4>`` heading and the nodes after it.

    Raises:
        DocumentError: If the heading is empty, its name is not a valid
            identifier, or its parameter list is malformed.
    """
    canonical = canonical_name(heading)
    parameters = extract_parameters(heading)
    _check_synthesized(canonical, parameters)
    return Function(
        canonical_name=canonical,
        raw_endpoint_name=raw_endpoint_name(heading),
        description=function_description(heading),
        parameters=parameters,
    )


def _heading_text(heading: Tag) -> str:
    """Text of the heading's first child, trimmed."""
    first = next(iter(heading.children), None)
    if first is None:
        raise DocumentError(f"Function heading {heading} is empty")
    return node_text(first).strip()


def canonical_name(heading: Tag) -> str:
    """Method name for an endpoint: ``"Quote Endpoint"`` -> ``"quote_endpoint"``.

    Raises:
        DocumentError: If the result is not a valid Python identifier or is
            a keyword.
    """
    name = "_".join(_heading_text(heading).lower().split())
    if not name.isidentifier() or keyword.iskeyword(name):
        raise DocumentError(f"Function heading {name!r} does not yield a valid name")
    return name


def raw_endpoint_name(heading: Tag) -> str:
    """Value sent as the ``function`` query parameter for this endpoint."""
    name = _heading_text(heading)
    return KNOWN_ENDPOINT_LABELS.get(name, name)


def function_description(heading: Tag) -> str:
    """Space-joined text of the visible nodes between *heading* and the first ``<h6>``."""
    nodes = itertools.takewhile(
        lambda n: not is_tag(n, PARAMETER_MARKER), visible_nodes(heading)
    )
    return " ".join(node_text(n) for n in nodes)


def _check_synthesized(function_name: str, parameters: list[Parameter]) -> None:
    """Every endpoint must take exactly one ``apikey`` and one ``function``."""
    counts = Counter(p.name for p in parameters)
    for name in sorted(SYNTHESIZED_PARAMETERS):
        if counts[name] != 1:
            raise DocumentError(
                f"Function {function_name!r} documents {counts[name]} "
                f"'{name}' parameters, expected exactly 1"
            )
