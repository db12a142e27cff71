"""Fetch-and-rewrite proxy components."""

from .fetcher import FetchResult, PageFetcher
from .guard import is_forbidden, parse_http_url
from .instrumenter import InstrumentedDocument, instrument, instrument_document
from .protocol import PageMonitor, parse_message
from .service import PageProxy, ProxiedPage

__all__ = [
    "FetchResult",
    "InstrumentedDocument",
    "PageFetcher",
    "PageMonitor",
    "PageProxy",
    "ProxiedPage",
    "instrument",
    "instrument_document",
    "is_forbidden",
    "parse_http_url",
    "parse_message",
]
