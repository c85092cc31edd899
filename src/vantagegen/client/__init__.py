"""Request clients for the generated API module.

Generated operations build a full request URL and hand it to a
:class:`RequestClient`. Two transports ship with vantagegen:

    :class:`HttpxClient` -- blocking client backed by :class:`httpx.Client`.
    :class:`MockClient` -- inert client that records URLs, for tests.

:class:`ApiClientBase` is the client-bearing base of every generated
composite client.

Example::

    from vantagegen.client import MockClient

    api = AlphaVantageClient("demo", MockClient())
"""

from vantagegen.client.base import (
    ApiClientBase,
    ClientT,
    FailureKind,
    JsonObject,
    RequestClient,
    RequestFailure,
    RequestResult,
)
from vantagegen.client.http_client import HttpxClient
from vantagegen.client.mock_client import MockClient

__all__ = [
    "ApiClientBase",
    "ClientT",
    "FailureKind",
    "HttpxClient",
    "JsonObject",
    "MockClient",
    "RequestClient",
    "RequestFailure",
    "RequestResult",
]
