"""Composed HTTP server class."""

from __future__ import annotations

from .server_config import ServerConfig
from .server_core import PageScopeServerCoreMixin
from .server_proxy import PageScopeServerProxyMixin
from .server_routes import PageScopeServerRoutesMixin
from .server_security import PageScopeServerSecurityMixin
from .server_sessions import PageScopeServerSessionsMixin


class PageScopeServer(
    PageScopeServerCoreMixin,
    PageScopeServerSecurityMixin,
    PageScopeServerProxyMixin,
    PageScopeServerSessionsMixin,
    PageScopeServerRoutesMixin,
):
    """HTTP server composed from mixins."""


__all__ = ["PageScopeServer", "ServerConfig"]
