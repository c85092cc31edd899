"""Production request client backed by :mod:`httpx`, with retry.

:class:`HttpxClient` is the transport used by generated API modules in
production. It layers on top of :class:`httpx.Client`:

- **JSON decoding** -- the body must decode to a JSON object, otherwise
  :class:`~vantagegen.exceptions.MalformedResponseError` is raised.
- **Retry with backoff** -- retries on 5xx and network errors with
  exponential delay (1 s, 2 s, 4 s, ...), then raises
  :class:`~vantagegen.exceptions.ConnectionError_`.

It can be used as a context manager, or left open for the lifetime of the
application and closed with :meth:`HttpxClient.close`.
"""

from __future__ import annotations

import time
from typing import Optional

import httpx

from vantagegen.client.base import JsonObject, RequestClient
from vantagegen.exceptions import ConnectionError_, MalformedResponseError
from vantagegen.output import get_output


class HttpxClient(RequestClient):
    """Blocking HTTP transport for generated operations.

    Args:
        timeout: Request timeout in seconds.
        max_retries: Extra attempts after the first one on 5xx or network
            errors.
        client: Optional pre-configured :class:`httpx.Client` (for custom
            transports, proxies or tests). Created on demand when ``None``.

    Example::

        with HttpxClient(timeout=10) as transport:
            api = AlphaVantageClient("demo", transport)
            quote = api.quote_endpoint("IBM")
    """

    def __init__(
        self,
        timeout: float = 30.0,
        max_retries: int = 3,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._timeout = timeout
        self._max_retries = max_retries
        self._client = client

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> HttpxClient:
        self._ensure_client()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying connection pool."""
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # RequestClient
    # ------------------------------------------------------------------ #

    def fetch(self, url: str) -> JsonObject:
        """GET *url* and return the decoded JSON object.

        Raises:
            ConnectionError_: On network errors or 5xx after all retries.
            MalformedResponseError: If the body is not a JSON object.
        """
        response = self._execute_with_retry(url)
        return self._decode(response)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _ensure_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                timeout=self._timeout,
                follow_redirects=True,
                headers={"Accept": "application/json"},
            )
        return self._client

    def _execute_with_retry(self, url: str) -> httpx.Response:
        """Execute the GET request with exponential-backoff retry.

        Retries on 5xx status codes and connection / timeout errors up to
        ``max_retries`` times. The delay doubles each attempt: 1 s, 2 s, 4 s, ...
        """
        client = self._ensure_client()
        output = get_output()

        for attempt in range(self._max_retries + 1):
            try:
                response = client.get(url)
            except httpx.TransportError as exc:
                if attempt < self._max_retries:
                    delay = 2 ** attempt
                    output.debug(
                        f"Connection error: {exc}, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{self._max_retries})"
                    )
                    time.sleep(delay)
                    continue
                raise ConnectionError_(
                    f"Connection failed after {self._max_retries + 1} attempts: {exc}"
                ) from exc
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                # Redirect loops and malformed URLs: retrying cannot help.
                raise ConnectionError_(f"Request to {url} failed: {exc}") from exc

            if response.status_code >= 500:
                if attempt < self._max_retries:
                    delay = 2 ** attempt
                    output.debug(
                        f"Server error {response.status_code}, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{self._max_retries})"
                    )
                    time.sleep(delay)
                    continue
                raise ConnectionError_(
                    f"HTTP {response.status_code} after {self._max_retries + 1} attempts"
                )

            return response

        raise ConnectionError_("Request failed after all retries")  # pragma: no cover

    @staticmethod
    def _decode(response: httpx.Response) -> JsonObject:
        """Decode the body, insisting on a JSON object."""
        try:
            data = response.json()
        except ValueError as exc:
            raise MalformedResponseError(
                f"HTTP {response.status_code}: response is not JSON: {response.text[:200]}"
            ) from exc
        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Expected a JSON object, got {type(data).__name__}"
            )
        return data
