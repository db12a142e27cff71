"""Fetch-and-rewrite facade used by the HTTP handlers."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .fetcher import PageFetcher
from .instrumenter import InstrumentedDocument, instrument_document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProxiedPage:
    requested_url: str
    final_url: str
    document: InstrumentedDocument

    @property
    def html(self) -> str:
        return self.document.html


class PageProxy:
    """Fetches a remote page and instruments it for observation."""

    def __init__(self, fetcher: PageFetcher):
        self.fetcher = fetcher

    async def load(self, url: str) -> ProxiedPage:
        result = await self.fetcher.fetch(url)
        if result.redirects:
            logger.info("Fetched %s after %d redirect(s) -> %s", url, result.redirects, result.url)
        # Base URL is the final hop so relative links survive redirects.
        document = instrument_document(result.text, result.url)
        return ProxiedPage(requested_url=url, final_url=result.url, document=document)

    async def close(self) -> None:
        await self.fetcher.close()
