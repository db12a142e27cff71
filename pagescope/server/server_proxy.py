"""Fetch-and-rewrite proxy handlers."""

from __future__ import annotations

import logging

from aiohttp import web

from ..errors import PageScopeError
from .server_helpers import _json, _render_error_page

logger = logging.getLogger(__name__)


class PageScopeServerProxyMixin:
    """Proxy handlers."""

    async def _api_proxy(self, request: web.Request) -> web.Response:
        """Fetch a page and return its instrumented HTML in a JSON envelope."""
        _, url = await self._require_field(request, "url", label="URL")
        logger.info("[Proxy] Fetching: %s", url)
        page = await self.proxy.load(url)
        return _json(
            {
                "success": True,
                "html": page.html,
                "url": page.requested_url,
                "finalUrl": page.final_url,
            }
        )

    async def _proxy_page(self, request: web.Request) -> web.Response:
        """Serve the instrumented page directly, for embedding in a frame."""
        url = (request.query.get("url") or "").strip()
        if not url:
            return web.Response(status=400, text="Missing url parameter")

        logger.info("[Proxy] Loading: %s", url)
        try:
            page = await self.proxy.load(url)
        except PageScopeError as exc:
            logger.warning("[Proxy] Error loading %s: %s", url, exc.message)
            return web.Response(
                status=exc.status,
                text=_render_error_page(exc.message, url),
                content_type="text/html",
                charset="utf-8",
            )

        return web.Response(
            text=page.html,
            content_type="text/html",
            charset="utf-8",
            headers={"X-Proxied-From": page.final_url},
        )
