"""HTTP transport binding (stdlib urllib, run off the event loop)."""

from __future__ import annotations

import asyncio
import http.client
import json
import logging
import ssl
import urllib.error
import urllib.request
from typing import Any, Mapping, Protocol

from .constants import DEFAULT_TIMEOUT_S
from .errors import APIError, TransportError
from .utils import compact_json, join_url

logger = logging.getLogger(__name__)


class HTTPTransport(Protocol):
    """Minimal protocol for REST transports.

    Headers are supplied per call; implementations must not keep them.
    """

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str],
        params: Mapping[str, str] | None = None,
        body: Any = None,
    ) -> Any:
        """Issue one request and return the decoded JSON body."""


class UrllibTransport:
    """JSON-over-HTTPS transport built on `urllib.request`."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        ssl_context: ssl.SSLContext | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout_s = timeout_s
        self.ssl_context = ssl_context

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str],
        params: Mapping[str, str] | None = None,
        body: Any = None,
    ) -> Any:
        url = join_url(self.base_url, path, dict(params) if params else None)
        request_headers = {"Accept": "application/json", **headers}
        data: bytes | None = None
        if body is not None:
            data = compact_json(body).encode("utf-8")
            request_headers["Content-Type"] = "application/json"

        request = urllib.request.Request(url, data=data, headers=request_headers, method=method)
        logger.debug("%s %s", method, path)
        return await asyncio.to_thread(self._send, request)

    def _send(self, request: urllib.request.Request) -> Any:
        try:
            with urllib.request.urlopen(request, timeout=self.timeout_s, context=self.ssl_context) as response:  # nosec B310
                raw = response.read()
        except urllib.error.HTTPError as exc:
            raw = exc.read()
            payload = _decode_body(raw, strict=False)
            raise APIError(exc.code, str(exc.reason), payload=payload) from exc
        except (OSError, http.client.HTTPException) as exc:
            raise TransportError(f"{request.get_method()} {request.full_url} failed: {exc}") from exc

        return _decode_body(raw, strict=True)


def _decode_body(raw: bytes, *, strict: bool) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        if strict:
            raise TransportError(f"response is not valid JSON: {exc}") from exc
        return raw.decode("utf-8", errors="replace")
