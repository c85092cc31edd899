"""Lazy forward traversal over sibling nodes of the document tree.

The documentation page lays each endpoint out as a flat run of siblings::

    <h4>Quote Endpoint</h4>
    <p>description ...</p>
    <br>
    <h6>API Parameters</h6>
    <p>Required: <code>function</code></p>
    <p>The function of your choice. ... <code>function=GLOBAL_QUOTE</code></p>
    ...
    <h6>Examples</h6>
    ...
    <h4>Search Endpoint</h4>

The helpers here turn that layout into a finite stream of *visible* nodes
(elements other than ``<br>``; text nodes and comments are skipped) that the
extractor slices with ``itertools.takewhile`` / ``dropwhile``.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterator

from bs4 import NavigableString, PageElement, Tag

FUNCTION_HEADING = "h4"
"""Tag that opens one endpoint; also where the previous endpoint ends."""

PARAMETER_MARKER = "h6"
"""Tag that delimits the parameter list of an endpoint."""


def following_nodes(node: PageElement) -> Iterator[PageElement]:
    """Yield every sibling after *node*, in document order, until none remain."""
    current = node.next_sibling
    while current is not None:
        yield current
        current = current.next_sibling


def is_tag(node: PageElement, name: str) -> bool:
    """Return ``True`` if *node* is an element named *name*."""
    return isinstance(node, Tag) and node.name == name


def is_visible(node: PageElement) -> bool:
    """Return ``True`` for nodes that carry content of their own.

    Text nodes (including comments) and ``<br>`` line-break markers are not
    visible.
    """
    if isinstance(node, NavigableString):
        return False
    return not is_tag(node, "br")


def visible_nodes(heading: Tag) -> Iterator[Tag]:
    """Yield the visible siblings after an endpoint *heading*.

    The stream stops at the next endpoint heading, so one endpoint's scan
    never spills into its neighbour.
    """
    visible = (n for n in following_nodes(heading) if is_visible(n))
    return itertools.takewhile(lambda n: not is_tag(n, FUNCTION_HEADING), visible)


def node_text(node: PageElement) -> str:
    """Return the full text content of *node*."""
    if isinstance(node, Tag):
        return node.get_text()
    return str(node)
