"""Canonical Pydantic models shared across all vantagegen modules.

This is the single source of truth for data shapes in the project. The models
fall into two groups:

**Document models** -- produced by the parser and consumed by the emitter:
    :class:`Required`, :class:`Optional_` (together the :data:`Necessity`
    variant), :class:`Parameter`, :class:`Function`, :class:`Section`, and
    :class:`ApiDocument`. They are frozen: the whole model is rebuilt from
    scratch on every run and never mutated once built.

**Configuration models** -- resolved from CLI flags, environment variables
and the project config file:
    :class:`ClientVariant`, :class:`GeneratorConfig`, and
    :class:`ProjectConfig`.
"""

from __future__ import annotations

import enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

SYNTHESIZED_PARAMETERS = frozenset({"apikey", "function"})
"""Parameters filled in by the client itself, never by the caller."""

DEFAULT_BASE_URL = "https://www.alphavantage.co/query"


# --- Document Models ---


class Required(BaseModel):
    """The parameter must be supplied on every call."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["required"] = "required"


class Optional_(BaseModel):
    """The parameter may be omitted; the API then uses ``default``.

    Named with a trailing underscore to avoid clashing with
    :data:`typing.Optional`.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["optional"] = "optional"
    default: str


Necessity = Annotated[Union[Required, Optional_], Field(discriminator="kind")]
"""Closed variant: every consumer handles ``required`` and ``optional``."""


class Parameter(BaseModel):
    """A single documented endpoint parameter.

    ``name`` is the literal query-string key used by the remote API, taken
    verbatim from the inline code token of the parameter's definition node.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    necessity: Necessity

    @property
    def is_required(self) -> bool:
        return isinstance(self.necessity, Required)

    @property
    def default(self) -> Optional[str]:
        """The documented default, or ``None`` for required parameters."""
        if isinstance(self.necessity, Optional_):
            return self.necessity.default
        return None

    @property
    def is_synthesized(self) -> bool:
        return self.name in SYNTHESIZED_PARAMETERS


class Function(BaseModel):
    """One documented endpoint, emitted as one method.

    ``canonical_name`` becomes the Python method name; ``raw_endpoint_name``
    is sent as the ``function`` query parameter.
    """

    model_config = ConfigDict(frozen=True)

    canonical_name: str
    raw_endpoint_name: str
    description: str = ""
    parameters: list[Parameter] = Field(default_factory=list)

    @property
    def caller_parameters(self) -> list[Parameter]:
        """Parameters the caller supplies, in document order."""
        return [p for p in self.parameters if not p.is_synthesized]


class Section(BaseModel):
    """A capability group; becomes one interface and one implementation class."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    title: str = Field(default="", description="Raw heading text, for display only")
    functions: list[Function] = Field(default_factory=list)


class ApiDocument(BaseModel):
    """Complete extracted model of the documentation page.

    Produced by :func:`~vantagegen.parser.extractor.extract_document` and
    consumed by :func:`~vantagegen.generator.emitter.render_module`.
    """

    model_config = ConfigDict(frozen=True)

    sections: list[Section] = Field(default_factory=list)

    @property
    def function_count(self) -> int:
        return sum(len(s.functions) for s in self.sections)


# --- Configuration Models ---


class ClientVariant(str, enum.Enum):
    """Shape of the emitted operations' return values.

    ``PLAIN`` methods return the JSON object and let request errors raise.
    ``RESULT`` methods return either the JSON object or a
    :class:`~vantagegen.client.RequestFailure` value.
    """

    PLAIN = "plain"
    RESULT = "result"


class GeneratorConfig(BaseModel):
    """Fully resolved settings for one generation run.

    See :func:`~vantagegen.config.resolve_config` for the precedence chain
    that produces it.
    """

    document: str = Field(description="File path, URL, or '-' for stdin")
    output: str = Field(default="-", description="Destination file, or '-' for stdout")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="API base address")
    client_class: str = Field(
        default="AlphaVantageClient",
        description="Name of the composite client class in the emitted module",
    )
    variant: ClientVariant = ClientVariant.PLAIN
    emit_defaults: bool = Field(
        default=True,
        description="Give trailing optional inputs their documented default",
    )


class ProjectConfig(BaseModel):
    """Project-local settings read from ``./vantagegen.json``.

    Every field is optional; unset fields fall through to the defaults of
    :class:`GeneratorConfig`.
    """

    model_config = ConfigDict(extra="forbid")

    document: Optional[str] = None
    output: Optional[str] = None
    base_url: Optional[str] = None
    client_class: Optional[str] = None
    variant: Optional[ClientVariant] = None
    emit_defaults: Optional[bool] = None
