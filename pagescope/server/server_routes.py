"""Route registration for the HTTP server."""

from __future__ import annotations


class PageScopeServerRoutesMixin:
    """Route registration helper."""

    def _register_routes(self) -> None:
        # Health check
        self._app.router.add_get("/healthz", self._healthz)

        # Fetch-and-rewrite proxy
        self._app.router.add_post("/api/proxy", self._api_proxy)
        self._app.router.add_get("/proxy", self._proxy_page)

        # Browser sessions
        self._app.router.add_post("/api/session/start", self._api_session_start)
        self._app.router.add_post("/api/session/screenshot", self._api_session_screenshot)
        self._app.router.add_post("/api/session/logs", self._api_session_logs)
        self._app.router.add_post("/api/session/execute", self._api_session_execute)
        self._app.router.add_post("/api/session/dom", self._api_session_dom)
        self._app.router.add_post("/api/session/close", self._api_session_close)
