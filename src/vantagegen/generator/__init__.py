"""Code emitter -- render an extracted endpoint model into a Python module.

This sub-package is responsible for the second half of the vantagegen
pipeline: taking an :class:`~vantagegen.models.ApiDocument` (produced by the
parser) and rendering the source of a client module with one interface,
one implementation per documentation section and a composite client class.

Typical usage::

    from vantagegen.generator import render_module, write_module
    from vantagegen.models import GeneratorConfig

    config = GeneratorConfig(document="documentation.html", output="api.py")
    write_module(render_module(document, config), config.output)

Sub-modules:

* :mod:`~vantagegen.generator.naming` -- Turn documented parameter names
  into valid, non-reserved Python identifiers.
* :mod:`~vantagegen.generator.emitter` -- The Jinja2 rendering, source
  validation and atomic write.
"""

from vantagegen.generator.emitter import render_module, write_module

__all__ = ["render_module", "write_module"]
