"""Render the extracted endpoint model into a Python client module.

This module is the second half of the vantagegen pipeline. It takes an
:class:`~vantagegen.models.ApiDocument` and produces the source text of a
module containing, for every section:

* an interface -- ``class <Identifier>(ABC)`` with one abstract method per
  endpoint, documented with the endpoint's description;
* an implementation -- ``class <Identifier>Impl(<Identifier>, Generic[ClientT])``
  whose methods build the request URL and delegate it to ``self.client``;

followed by one composite client class inheriting every implementation.

The generation process:

1. A Jinja2 environment is configured with templates from
   ``generator/templates/``.
2. Every endpoint is turned into a plain dict of pre-rendered Python
   fragments (signature, URL template literal, substitution values).
3. The module template is rendered and checked with :func:`ast.parse`.

Output is deterministic: no timestamps, no paths, no unordered iteration.
"""

from __future__ import annotations

import ast
import os
import tempfile
import textwrap
from collections import Counter
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from vantagegen import __version__
from vantagegen.exceptions import GenerationError
from vantagegen.generator.naming import unique_identifiers
from vantagegen.models import (
    ApiDocument,
    ClientVariant,
    Function,
    GeneratorConfig,
    Section,
)
from vantagegen.output import debug, get_output, warning

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``generator/templates/``)."""

MODULE_TEMPLATE = "client_module.py.j2"

_METHOD_INDENT = " " * 8
_LINE_WIDTH = 79

_RETURN_TYPES: dict[ClientVariant, tuple[str, str]] = {
    ClientVariant.PLAIN: ("JsonObject", "fetch"),
    ClientVariant.RESULT: ("RequestResult", "fetch_result"),
}


def render_module(document: ApiDocument, config: GeneratorConfig) -> str:
    """Render the complete client module for *document*.

    Args:
        document: The extracted endpoint model.
        config: Emitter options (base URL, composite class name, variant,
            whether to emit documented defaults).

    Returns:
        Python source text, ending with a newline.

    Raises:
        GenerationError: If two sections share an identifier, a section
            declares the same operation twice, or the rendered text is not
            valid Python.

    Example::

        source = render_module(document, GeneratorConfig(document="doc.html"))
        write_module(source, "alphavantage_api.py")
    """
    _check_names(document)

    env = _create_jinja_env()
    context = _build_context(document, config)
    source = env.get_template(MODULE_TEMPLATE).render(**context)

    try:
        ast.parse(source)
    except SyntaxError as exc:
        raise GenerationError(
            f"Generated module is not valid Python (line {exc.lineno}): {exc.msg}"
        ) from exc

    debug(f"Rendered {len(source.splitlines())} lines")
    return source


def _create_jinja_env() -> Environment:
    """Create and configure the Jinja2 environment for the module template.

    Autoescape stays off: the output is Python source, and every literal is
    escaped by :func:`py_string` or :func:`py_docstring` instead.
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters["py_string"] = py_string
    env.filters["py_docstring"] = py_docstring
    return env


def _check_names(document: ApiDocument) -> None:
    """Reject models that would render into shadowed classes or methods."""
    sections = Counter(s.identifier for s in document.sections)
    duplicated = sorted(name for name, count in sections.items() if count > 1)
    if duplicated:
        raise GenerationError(f"Duplicate section identifiers: {', '.join(duplicated)}")

    for section in document.sections:
        names = Counter(f.canonical_name for f in section.functions)
        duplicated = sorted(name for name, count in names.items() if count > 1)
        if duplicated:
            raise GenerationError(
                f"Section {section.identifier} declares {', '.join(duplicated)} more than once"
            )

    owners: dict[str, str] = {}
    for section in document.sections:
        for function in section.functions:
            previous = owners.setdefault(function.canonical_name, section.identifier)
            if previous != section.identifier:
                warning(
                    f"{function.canonical_name} is declared in both {previous} and "
                    f"{section.identifier}; the composite client uses the one from {previous}"
                )


def _build_context(document: ApiDocument, config: GeneratorConfig) -> dict[str, Any]:
    """Assemble the template variables for the module template."""
    return_type, fetch_method = _RETURN_TYPES[config.variant]
    sections = [_build_section(s, config, fetch_method) for s in document.sections]
    exported = [name for s in sections for name in (s["identifier"], s["impl"])]
    exported.append(config.client_class)

    return {
        "version": __version__,
        "base_url": config.base_url,
        "client_class": config.client_class,
        "return_type": return_type,
        "sections": sections,
        "exported": sorted(exported),
    }


def _build_section(
    section: Section, config: GeneratorConfig, fetch_method: str
) -> dict[str, Any]:
    return {
        "identifier": section.identifier,
        "impl": f"{section.identifier}Impl",
        "title": section.title or section.identifier,
        "operations": [
            build_operation(f, config.base_url, config.emit_defaults, fetch_method)
            for f in section.functions
        ],
    }


def build_operation(
    function: Function,
    base_url: str,
    emit_defaults: bool = True,
    fetch_method: str = "fetch",
) -> dict[str, Any]:
    """Pre-render the Python fragments for one endpoint method.

    Returns:
        A dict with keys ``name``, ``signature`` (the argument list after
        ``self``), ``docstring`` (already a literal, or ``None``),
        ``url_template`` (a string literal), ``arguments`` (substitution
        expressions, one per template placeholder) and ``fetch_method``.
    """
    caller = function.caller_parameters
    py_names = dict(zip((p.name for p in caller), unique_identifiers([p.name for p in caller])))

    # Only the trailing run of optional inputs can carry defaults.
    defaults: dict[str, str] = {}
    if emit_defaults:
        for parameter in reversed(caller):
            if parameter.default is None:
                break
            defaults[parameter.name] = parameter.default

    signature = []
    for parameter in caller:
        arg = f"{py_names[parameter.name]}: str"
        if parameter.name in defaults:
            arg += f" = {py_string(defaults[parameter.name])}"
        signature.append(arg)

    arguments = []
    for parameter in function.parameters:
        if parameter.name == "apikey":
            arguments.append("self.apikey")
        elif parameter.name == "function":
            arguments.append(py_string(function.raw_endpoint_name))
        else:
            arguments.append(py_names[parameter.name])

    description = " ".join(function.description.split())
    return {
        "name": function.canonical_name,
        "signature": "".join(f", {arg}" for arg in signature),
        "docstring": py_docstring(description) if description else None,
        "url_template": py_string(url_template(base_url, [p.name for p in function.parameters])),
        "arguments": arguments,
        "fetch_method": fetch_method,
    }


def url_template(base_url: str, names: list[str]) -> str:
    """Build the ``str.format`` template for a request URL.

    Example::

        >>> url_template("https://example.com/query", ["function", "apikey"])
        'https://example.com/query?function={}&apikey={}'
    """
    query = "&".join(f"{_escape_braces(name)}={{}}" for name in names)
    return f"{_escape_braces(base_url)}?{query}"


def _escape_braces(text: str) -> str:
    return text.replace("{", "{{").replace("}", "}}")


def py_string(value: str) -> str:
    """Return a Python string literal for *value*, double-quoted when possible."""
    literal = repr(value)
    if literal.startswith("'") and '"' not in value:
        literal = f'"{literal[1:-1]}"'
    return literal


def py_docstring(text: str, indent: str = _METHOD_INDENT) -> str:
    """Return a triple-quoted docstring literal for *text*, wrapped for a method body."""
    escaped = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if escaped.endswith('"'):
        escaped = escaped[:-1] + '\\"'
    lines = textwrap.wrap(
        escaped,
        width=_LINE_WIDTH - len(indent) - 3,
        break_long_words=False,
        break_on_hyphens=False,
    ) or [""]
    if len(lines) == 1:
        return f'"""{lines[0]}"""'
    body = f"\n{indent}".join(lines)
    return f'"""{body}\n{indent}"""'


# ------------------------------------------------------------------ #
# Writing
# ------------------------------------------------------------------ #


def write_module(source: str, destination: str) -> Optional[Path]:
    """Write generated source to *destination*, or to stdout for ``-``.

    Returns:
        The written path, or ``None`` when writing to stdout.

    Raises:
        GenerationError: If the file cannot be written.
    """
    if destination == "-":
        get_output().print_source(source)
        return None

    path = Path(destination)
    try:
        _atomic_write(path, source)
    except OSError as exc:
        raise GenerationError(f"Cannot write {path}: {exc}") from exc
    return path


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On any failure the temp file is cleaned up and the previous contents of
    *path* are left untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
            newline="\n",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise
