"""HTTP surface for the proxy and browser sessions."""

from .server import PageScopeServer, ServerConfig

__all__ = ["PageScopeServer", "ServerConfig"]
