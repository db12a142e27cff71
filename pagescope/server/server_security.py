"""CORS, error translation and request parsing helpers."""

from __future__ import annotations

import json
import logging

from aiohttp import web

from ..errors import PageScopeError, SessionNotFoundError
from .server_helpers import _error_json

logger = logging.getLogger(__name__)


def _bad_request(message: str) -> web.HTTPBadRequest:
    return web.HTTPBadRequest(
        text=json.dumps({"error": message}),
        content_type="application/json",
    )


class PageScopeServerSecurityMixin:
    """Middlewares and input helpers."""

    @web.middleware
    async def _cors_middleware(self, request: web.Request, handler):  # type: ignore[override]
        origin = self.config.cors_origin
        if request.method == "OPTIONS" and request.headers.get("Access-Control-Request-Method"):
            return web.Response(
                status=204,
                headers={
                    "Access-Control-Allow-Origin": origin,
                    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
                    "Access-Control-Allow-Headers": "Content-Type",
                    "Access-Control-Max-Age": "600",
                },
            )
        try:
            response = await handler(request)
        except web.HTTPException as exc:
            exc.headers["Access-Control-Allow-Origin"] = origin
            raise
        response.headers["Access-Control-Allow-Origin"] = origin
        return response

    @web.middleware
    async def _error_middleware(self, request: web.Request, handler):  # type: ignore[override]
        try:
            return await handler(request)
        except web.HTTPException:
            raise
        except SessionNotFoundError as exc:
            logger.debug("%s %s: %s", request.method, request.path, exc.message)
            return _error_json(exc)
        except PageScopeError as exc:
            logger.warning("%s %s failed: %s", request.method, request.path, exc.message)
            return _error_json(exc)
        except Exception as exc:
            logger.exception("Unhandled error in %s %s", request.method, request.path)
            return web.json_response({"error": str(exc) or "Internal server error"}, status=500)

    async def _read_json(self, request: web.Request) -> dict:
        try:
            data = await request.json()
        except Exception:
            raise _bad_request("Invalid JSON payload")
        if not isinstance(data, dict):
            raise _bad_request("Invalid JSON payload")
        return data

    async def _require_field(self, request: web.Request, name: str, *, label: str | None = None) -> tuple[dict, str]:
        data = await self._read_json(request)
        value = data.get(name)
        if not isinstance(value, str) or not value.strip():
            raise _bad_request(f"{label or name} is required")
        return data, value.strip()
