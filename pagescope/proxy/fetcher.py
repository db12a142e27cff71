"""Redirect-following page fetcher with an outbound address guard."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urljoin

import httpx

from ..constants import (
    DEFAULT_ACCEPT,
    DEFAULT_ACCEPT_LANGUAGE,
    DEFAULT_USER_AGENT,
    FETCH_TIMEOUT_SECONDS,
    MAX_REDIRECTS,
)
from ..errors import (
    FetchTimeoutError,
    ForbiddenHostError,
    InvalidUrlError,
    TooManyRedirectsError,
    TransportError,
)
from .guard import is_forbidden, parse_http_url

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Body and final location of one logical fetch."""

    text: str
    url: str
    status: int
    redirects: int = 0


class PageFetcher:
    """Fetches a page through zero or more redirects.

    Redirects are followed by hand so every hop is parsed and guarded again,
    and the depth limit is enforced before the next request goes out. No
    caching and no retries: each ``fetch()`` is a fresh attempt.
    """

    def __init__(
        self,
        *,
        max_redirects: int = MAX_REDIRECTS,
        timeout: float = FETCH_TIMEOUT_SECONDS,
        headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.max_redirects = int(max_redirects)
        self.timeout = float(timeout)
        self.headers = headers or {
            "User-Agent": DEFAULT_USER_AGENT,
            "Accept": DEFAULT_ACCEPT,
            "Accept-Language": DEFAULT_ACCEPT_LANGUAGE,
        }
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers=self.headers,
                follow_redirects=False,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def fetch(self, url: str, redirect_count: int = 0) -> FetchResult:
        """GET ``url``, following redirects up to ``max_redirects`` hops."""
        current = url
        count = int(redirect_count)
        while True:
            if count > self.max_redirects:
                raise TooManyRedirectsError()

            parsed = parse_http_url(current)
            if is_forbidden(parsed.hostname):
                logger.info("Blocked fetch of local address: %s", parsed.hostname)
                raise ForbiddenHostError()

            response = await self._get_once(current)
            location = response.headers.get("location")
            if 300 <= response.status_code < 400 and location:
                next_url = urljoin(current, location)
                logger.debug("Redirect %s %s -> %s", response.status_code, current, next_url)
                current = next_url
                count += 1
                continue

            return FetchResult(
                text=response.text,
                url=current,
                status=response.status_code,
                redirects=count - int(redirect_count),
            )

    async def _get_once(self, url: str) -> httpx.Response:
        client = await self._get_client()
        try:
            # wait_for cancels the request on expiry, which aborts the connection
            return await asyncio.wait_for(client.get(url), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise FetchTimeoutError() from exc
        except httpx.InvalidURL as exc:
            raise InvalidUrlError() from exc
        except httpx.HTTPError as exc:
            raise TransportError(str(exc) or exc.__class__.__name__) from exc
