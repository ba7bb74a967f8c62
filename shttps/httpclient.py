"""A small HTTP client for server scripts.

Only ``GET`` is supported. Redirects are followed, and responses with an
error status are returned like any other response rather than raised.
"""

from __future__ import annotations

import time
import urllib.error
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass, field
from http.client import HTTPException

__all__ = ["HttpError", "HttpResponse", "http_request"]

DEFAULT_TIMEOUT_MS = 2000


class HttpError(Exception):
    """An HTTP request could not be made or completed."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class HttpResponse:
    """The outcome of an HTTP request.

    ``duration`` is the time the request took, in whole milliseconds.
    """

    status_code: int
    body: bytes
    duration: int
    header: dict[str, str] = field(default_factory=dict)


def _collect_headers(message) -> dict[str, str]:
    headers: dict[str, str] = {}
    for name, value in message.items():
        value = value.lstrip(" ").rstrip("\r\n")
        headers[name] = value
    return headers


def http_request(
    method: str,
    url: str,
    headers: Mapping[object, object] | None = None,
    timeout: int = DEFAULT_TIMEOUT_MS,
) -> HttpResponse:
    """Perform an HTTP request and return the response.

    *headers* holds extra request headers; *timeout* is given in
    milliseconds. Raises :class:`HttpError` for an unsupported method or
    when the request fails.
    """
    if method != "GET":
        raise HttpError(
            f"'server.http(method, url, [header])': unknown method {method}"
        )

    request_headers = {str(key): str(value) for key, value in (headers or {}).items()}
    try:
        request = urllib.request.Request(url, headers=request_headers, method="GET")
    except ValueError as exc:
        raise HttpError(f"HTTP GET request to {url} failed: {exc}") from exc

    seconds = timeout / 1000 if timeout and timeout > 0 else None
    start = time.monotonic()
    try:
        try:
            with urllib.request.urlopen(request, timeout=seconds) as response:
                body = response.read()
                status = response.status
                response_headers = _collect_headers(response.headers)
        except urllib.error.HTTPError as exc:
            with exc:
                body = exc.read()
                status = exc.code
                response_headers = _collect_headers(exc.headers)
    except (urllib.error.URLError, HTTPException, OSError, ValueError) as exc:
        reason = getattr(exc, "reason", exc)
        raise HttpError(f"HTTP GET request to {url} failed: {reason}") from exc
    duration = int((time.monotonic() - start) * 1000)

    return HttpResponse(
        status_code=status,
        body=body,
        duration=duration,
        header=response_headers,
    )