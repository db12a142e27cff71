"""Shared helpers for the HTTP server."""

from __future__ import annotations

import base64
import html
import json
from typing import Any

from aiohttp import web

from ..errors import PageScopeError


def _escape(value: object) -> str:
    return html.escape("" if value is None else str(value), quote=True)


def _data_uri(png: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png or b"").decode("ascii")


def _json_default(value: Any) -> str:
    return str(value)


def _dumps(payload: Any) -> str:
    return json.dumps(payload, default=_json_default)


def _json(payload: dict, *, status: int = 200) -> web.Response:
    return web.json_response(payload, status=status, dumps=_dumps)


def _error_json(exc: PageScopeError) -> web.Response:
    return _json({"error": exc.message}, status=exc.status)


def _render_error_page(message: str, url: str) -> str:
    """Error document for the iframe proxy route; every value is escaped."""
    return f"""<!doctype html>
<html>
<head><meta charset="utf-8"><title>Failed to load page</title></head>
<body style="font-family: sans-serif; padding: 40px; background: #1e1e1e; color: #ccc;">
    <h2>Failed to load page</h2>
    <p style="color: #f48771;">{_escape(message)}</p>
    <p>URL: {_escape(url)}</p>
</body>
</html>
"""
