"""Built-in CLI sub-commands for vantagegen.

This package groups the Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~vantagegen.commands.generate` -- render the client module from a
  documentation page.
* :mod:`~vantagegen.commands.inspect` -- list the sections, functions and
  parameters the extractor finds, without generating anything.

``generate`` is a plain callback registered directly on the root app;
``inspect`` is a :class:`typer.Typer` sub-application.
"""
