"""Documentation page parser -- load the page and extract the endpoint model.

This sub-package is responsible for the first half of the vantagegen
pipeline: turning the raw HTML documentation page (local file, remote URL or
stdin) into an :class:`~vantagegen.models.ApiDocument` that the emitter can
consume.

Typical usage::

    from vantagegen.parser import load_document, extract_document

    soup = load_document("https://www.alphavantage.co/documentation/")
    document = extract_document(soup)

Sub-modules:

* :mod:`~vantagegen.parser.loader` -- I/O layer (URL, file, stdin).
* :mod:`~vantagegen.parser.traversal` -- Lazy sibling iteration and the
  visible-node filter.
* :mod:`~vantagegen.parser.extractor` -- Sections, endpoints and their
  descriptions.
* :mod:`~vantagegen.parser.parameters` -- The positional
  definition/elaboration parameter listing.
"""

from vantagegen.parser.extractor import extract_document
from vantagegen.parser.loader import load_document, parse_document

__all__ = ["load_document", "parse_document", "extract_document"]
