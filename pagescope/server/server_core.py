"""Core server initialization and lifecycle."""

from __future__ import annotations

import logging
from typing import Optional

from aiohttp import web

from ..proxy.service import PageProxy
from ..sessions.manager import SessionManager
from .server_config import ServerConfig
from .server_helpers import _json

logger = logging.getLogger(__name__)


class PageScopeServerCoreMixin:
    """Core server lifecycle."""

    def __init__(
        self,
        *,
        config: ServerConfig,
        proxy: PageProxy,
        sessions: Optional[SessionManager] = None,
    ):
        self.config = config
        self.proxy = proxy
        self.sessions = sessions

        self._runner: web.AppRunner | None = None
        self._site: web.TCPSite | None = None

        self._app = web.Application(
            middlewares=[
                self._cors_middleware,
                self._error_middleware,
            ]
        )
        self._register_routes()

    @property
    def app(self) -> web.Application:
        return self._app

    async def start(self) -> None:
        if self._runner:
            return
        if self.sessions is not None and self.config.sessions_enabled:
            self.sessions.start_reaper()
        self._runner = web.AppRunner(self._app)
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, host=self.config.host, port=int(self.config.port))
        await self._site.start()
        logger.info("Server listening on http://%s:%s", self.config.host, self.config.port)

    async def stop(self) -> None:
        if self._runner:
            await self._runner.cleanup()
        self._runner = None
        self._site = None
        if self.sessions is not None:
            await self.sessions.stop()
        await self.proxy.close()

    async def _healthz(self, request: web.Request) -> web.Response:
        return _json(
            {
                "ok": True,
                "sessions": len(self.sessions) if self.sessions is not None else 0,
                "sessionsEnabled": self._sessions_available(),
            }
        )

    def _sessions_available(self) -> bool:
        return self.sessions is not None and self.config.sessions_enabled
