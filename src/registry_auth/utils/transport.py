"""httpx transport for google-auth token refreshes."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import google.auth.exceptions
import google.auth.transport
import httpx

from registry_auth.utils.logging import get_logger

logger = get_logger("utils.transport")


class HttpxResponse(google.auth.transport.Response):
    """google-auth view of an httpx response."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def status(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> Mapping[str, str]:
        return self._response.headers

    @property
    def data(self) -> bytes:
        return self._response.content


class HttpxRequest(google.auth.transport.Request):
    """Callable used by google-auth credentials to make HTTP requests.

    No timeout is applied unless the caller passes one; a hung refresh
    blocks like any other blocking I/O on the calling thread.

    Example:
        request = HttpxRequest()
        credentials.refresh(request)
    """

    def __init__(self, client: httpx.Client | None = None, timeout: float | None = None) -> None:
        self._client = client or httpx.Client(timeout=timeout)

    def __call__(
        self,
        url: str,
        method: str = "GET",
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> HttpxResponse:
        logger.debug(f"{method} {url}")
        request_kwargs: dict[str, Any] = {"content": body, "headers": headers}
        if timeout is not None:
            request_kwargs["timeout"] = timeout
        try:
            response = self._client.request(method, url, **request_kwargs)
        except httpx.HTTPError as e:
            raise google.auth.exceptions.TransportError(e) from e
        return HttpxResponse(response)

    def close(self) -> None:
        self._client.close()
