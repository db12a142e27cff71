"""Rewrite fetched HTML so it reports console and network activity to its host."""

from __future__ import annotations

import html as html_lib
import re
from dataclasses import dataclass

from .monitor_script import MONITOR_SCRIPT_TAG

_HEAD_OPEN_RE = re.compile(r"<head(?:\s[^>]*)?>", re.IGNORECASE)
_HEAD_CLOSE_RE = re.compile(r"</head\s*>", re.IGNORECASE)
_BODY_OPEN_RE = re.compile(r"<body(?:\s[^>]*)?>", re.IGNORECASE)
_BASE_RE = re.compile(r"<base[\s>/]", re.IGNORECASE)


@dataclass(frozen=True)
class InstrumentedDocument:
    """Rewritten HTML and the base URL its relative references resolve against."""

    html: str
    base_url: str


def _insert_base(document: str, base_url: str) -> str:
    if _BASE_RE.search(document):
        return document
    tag = f'<base href="{html_lib.escape(base_url, quote=True)}">'
    return _HEAD_OPEN_RE.sub(lambda m: f"{m.group(0)}\n{tag}", document, count=1)


def _insert_script(document: str, script_tag: str) -> str:
    # Callables keep re.sub from interpreting backslashes in the script.
    if _HEAD_CLOSE_RE.search(document):
        return _HEAD_CLOSE_RE.sub(lambda m: f"{script_tag}\n{m.group(0)}", document, count=1)
    if _BODY_OPEN_RE.search(document):
        return _BODY_OPEN_RE.sub(lambda m: f"{m.group(0)}\n{script_tag}", document, count=1)
    return script_tag + document


def instrument(html: str, base_url: str, *, script_tag: str = MONITOR_SCRIPT_TAG) -> str:
    """Add a base URL declaration and the monitoring script to ``html``.

    The base tag goes right after the opening head tag, unless the document
    already declares one. The script goes before ``</head>``, else right after
    the opening body tag, else at the very start of the document. This is a
    regex rewrite rather than a parse, so scripts that run before the
    insertion point are not observed.
    """
    document = _insert_base(html or "", base_url)
    return _insert_script(document, script_tag)


def instrument_document(html: str, base_url: str) -> InstrumentedDocument:
    return InstrumentedDocument(html=instrument(html, base_url), base_url=base_url)
