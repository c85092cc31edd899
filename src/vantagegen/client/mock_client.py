"""Inert request client for testing code that consumes the generated module."""

from __future__ import annotations

from vantagegen.client.base import JsonObject, RequestClient
from vantagegen.output import get_output


class MockClient(RequestClient):
    """Records every requested URL and answers with an empty JSON object.

    No network traffic is ever produced.

    Example::

        api = AlphaVantageClient("demo", MockClient())
        api.quote_endpoint("IBM")
        assert api.client.requests == [
            "https://www.alphavantage.co/query?function=GLOBAL_QUOTE&symbol=IBM&apikey=demo"
        ]
    """

    def __init__(self) -> None:
        self.requests: list[str] = []

    def fetch(self, url: str) -> JsonObject:
        get_output().debug(f"MockClient: making request to {url}")
        self.requests.append(url)
        return {}

    @property
    def last_url(self) -> str | None:
        return self.requests[-1] if self.requests else None
