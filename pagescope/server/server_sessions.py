"""Browser session API handlers."""

from __future__ import annotations

from aiohttp import web

from ..errors import SessionsDisabledError
from .server_helpers import _data_uri, _json
from .server_security import _bad_request


class PageScopeServerSessionsMixin:
    """Session start/screenshot/logs/execute/dom/close handlers."""

    def _require_sessions(self):
        if not self._sessions_available():
            raise SessionsDisabledError()
        return self.sessions

    async def _api_session_start(self, request: web.Request) -> web.Response:
        sessions = self._require_sessions()
        _, url = await self._require_field(request, "url", label="URL")
        snapshot = await sessions.start(url)
        return _json(
            {
                "success": True,
                "sessionId": snapshot.session_id,
                "screenshot": _data_uri(snapshot.screenshot),
                "consoleLogs": [record.to_dict() for record in snapshot.console_logs],
                "networkRequests": [record.to_dict() for record in snapshot.network_log],
                "html": snapshot.html,
            }
        )

    async def _api_session_screenshot(self, request: web.Request) -> web.Response:
        sessions = self._require_sessions()
        data, session_id = await self._require_field(request, "sessionId")
        png = await sessions.screenshot(session_id, full_page=bool(data.get("fullPage")))
        return _json({"success": True, "screenshot": _data_uri(png)})

    async def _api_session_logs(self, request: web.Request) -> web.Response:
        sessions = self._require_sessions()
        _, session_id = await self._require_field(request, "sessionId")
        console_logs, network_log = sessions.get_logs(session_id)
        return _json(
            {
                "success": True,
                "consoleLogs": [record.to_dict() for record in console_logs],
                "networkRequests": [record.to_dict() for record in network_log],
            }
        )

    async def _api_session_execute(self, request: web.Request) -> web.Response:
        sessions = self._require_sessions()
        data, session_id = await self._require_field(request, "sessionId")
        script = data.get("script")
        if not isinstance(script, str) or not script.strip():
            raise _bad_request("script is required")
        result = await sessions.execute(session_id, script)
        return _json({"success": True, "result": result})

    async def _api_session_dom(self, request: web.Request) -> web.Response:
        sessions = self._require_sessions()
        _, session_id = await self._require_field(request, "sessionId")
        dom = await sessions.dom(session_id)
        return _json({"success": True, "dom": dom})

    async def _api_session_close(self, request: web.Request) -> web.Response:
        """Close a session. Always succeeds, even for unknown ids."""
        if self.sessions is not None:
            try:
                data = await request.json()
            except Exception:
                data = {}
            session_id = data.get("sessionId") if isinstance(data, dict) else None
            if isinstance(session_id, str) and session_id:
                await self.sessions.close(session_id)
        return _json({"success": True})
