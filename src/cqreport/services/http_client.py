"""HTTP client used to post reports."""

from __future__ import annotations

from typing import Mapping, Optional

import httpx

from cqreport.core.errors import TransportError
from cqreport.utils.logging import get_logger


CONTENT_TYPE = "application/json; charset=utf-8"


class DeliveryClient:
    """Shared client posting JSON bodies to the report endpoint.

    Connection attempts are retried by the transport (``retries``); a
    response that arrives, whatever its status, is never retried.
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        retries: int = 3,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        self.retries = retries
        self.logger = get_logger("cqreport.DeliveryClient")
        self._client = httpx.AsyncClient(
            transport=transport or httpx.AsyncHTTPTransport(retries=retries),
            timeout=timeout,
            follow_redirects=False,
        )

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def deliver(self, url: str, body: bytes, headers: Mapping[str, str]) -> str:
        """POST ``body`` and return the response text, possibly empty."""
        if self._client.is_closed:
            raise TransportError(url, "client is closed")

        request_headers = {"Content-Type": CONTENT_TYPE, **headers}
        try:
            response = await self._client.post(url, content=body, headers=request_headers)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(url, str(exc) or exc.__class__.__name__) from exc

        if response.is_error:
            self.logger.warning("Report endpoint %s answered HTTP %d", url, response.status_code)
        return response.text

    async def aclose(self) -> None:
        await self._client.aclose()
