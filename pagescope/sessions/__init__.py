"""Headless browser sessions."""

from .manager import SessionManager
from .models import BrowserSession, SessionSnapshot

__all__ = ["BrowserSession", "SessionManager", "SessionSnapshot"]
