"""JSON-over-HTTP transport for the printer control daemon."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from printsync.config import PrinterConfig
from printsync.exceptions import PrinterTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, endpoint: str) -> Any: ...

    async def post_json(self, endpoint: str, payload: Mapping[str, Any] | None = None) -> Any: ...


class HttpTransport:
    """aiohttp transport returning decoded JSON bodies."""

    def __init__(self, config: PrinterConfig, http_session: aiohttp.ClientSession) -> None:
        self._base_url = config.base_url.rstrip("/")
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def get_json(self, endpoint: str) -> Any:
        return await self._request("GET", endpoint)

    async def post_json(self, endpoint: str, payload: Mapping[str, Any] | None = None) -> Any:
        return await self._request("POST", endpoint, payload=payload)

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        url = f"{self._base_url}{endpoint}"
        headers = {"accept": "application/json"}
        body: str | None = None
        if method == "POST":
            headers["content-type"] = "application/json"
            body = json.dumps(dict(payload or {}), separators=(",", ":"))

        _logger.debug("%s %s", method, url)

        try:
            async with self._http.request(method, url, data=body, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if not 200 <= resp.status < 300:
                    raise PrinterTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except PrinterTransportError:
            raise
        except TimeoutError as exc:
            raise PrinterTransportError(
                f"Request to {endpoint} timed out",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise PrinterTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise PrinterTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc
