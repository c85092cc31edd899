"""Request client contract used by the generated API module.

This module defines the foundational types every generated operation relies
on:

- :data:`JsonObject` -- the parsed response body.
- :class:`RequestFailure` / :class:`FailureKind` -- a structured failure
  value, returned instead of raised by the ``result`` client variant.
- :class:`RequestClient` -- the abstract base class every transport extends.
- :class:`ApiClientBase` -- the client-bearing type: it stores the API key
  and a :class:`RequestClient`, and the generated ``*Impl`` classes read both.

To add a transport, subclass :class:`RequestClient` and implement
:meth:`~RequestClient.fetch`.

See Also:
    :mod:`vantagegen.client.http_client` and
    :mod:`vantagegen.client.mock_client` for the shipped transports.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

from vantagegen.exceptions import ConnectionError_, MalformedResponseError

JsonObject = dict[str, Any]


class FailureKind(str, enum.Enum):
    """Why a request produced no JSON object."""

    NETWORK = "network"
    MALFORMED_RESPONSE = "malformed_response"


@dataclass(frozen=True)
class RequestFailure:
    """Structured description of a failed request.

    Attributes:
        kind: The failure category.
        message: Human-readable detail.
        url: The URL that was requested.

    Example::

        result = client.quote_endpoint("IBM")
        if isinstance(result, RequestFailure):
            print(result.kind, result.message)
    """

    kind: FailureKind
    message: str
    url: str


RequestResult = Union[JsonObject, RequestFailure]


class RequestClient(ABC):
    """Abstract transport that turns a fully formed URL into a JSON object.

    Generated operations call :meth:`fetch` (plain variant) or
    :meth:`fetch_result` (result variant) exactly once per invocation and
    return the value unchanged.
    """

    @abstractmethod
    def fetch(self, url: str) -> JsonObject:
        """Request *url* and return the decoded JSON object.

        Raises:
            ConnectionError_: On network-level failures.
            MalformedResponseError: If the body is not a JSON object.
        """
        ...

    def fetch_result(self, url: str) -> RequestResult:
        """Like :meth:`fetch`, but report failures as a :class:`RequestFailure`."""
        try:
            return self.fetch(url)
        except ConnectionError_ as exc:
            return RequestFailure(FailureKind.NETWORK, str(exc), url)
        except MalformedResponseError as exc:
            return RequestFailure(FailureKind.MALFORMED_RESPONSE, str(exc), url)


ClientT = TypeVar("ClientT", bound=RequestClient)


class ApiClientBase(Generic[ClientT]):
    """Holds the credential and the transport for generated operations.

    Args:
        apikey: The API key substituted into every request URL.
        client: The transport that performs the requests.
    """

    def __init__(self, apikey: str, client: ClientT):
        self.apikey = apikey
        self.client = client

    @classmethod
    def from_apikey(cls, apikey: str, client_factory: Callable[[], Any] | None = None):
        """Build a client with a default-constructed transport.

        Args:
            apikey: The API key.
            client_factory: Zero-argument callable returning the transport.
                Defaults to :class:`~vantagegen.client.http_client.HttpxClient`.
        """
        if client_factory is None:
            from vantagegen.client.http_client import HttpxClient

            client_factory = HttpxClient
        return cls(apikey, client_factory())
