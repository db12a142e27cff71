"""Headless browser session manager.

Each session owns one Chromium process launched through Playwright. Sessions
live in a process-wide table keyed by a random id and are evicted by a
background reaper once they are older than the session timeout.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from typing import Any, Awaitable, Callable, Optional

from playwright.async_api import (
    Browser,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from ..constants import (
    DEFAULT_LAUNCH_ARGS,
    DOM_MAX_DEPTH,
    NAVIGATION_TIMEOUT_SECONDS,
    REAPER_INTERVAL_SECONDS,
    SESSION_TIMEOUT_SECONDS,
    ConsoleLevel,
)
from ..errors import (
    ExecutionError,
    LaunchError,
    NavigationError,
    SessionError,
    SessionNotFoundError,
)
from ..proxy.guard import parse_http_url
from ..records import ConsoleRecord, NetworkRecord
from .models import BrowserSession, SessionSnapshot

logger = logging.getLogger(__name__)

BrowserLauncher = Callable[[], Awaitable[Browser]]

DOM_TREE_SCRIPT = """
(maxDepth) => {
    function serializeNode(node, depth) {
        if (depth > maxDepth) return null;
        let className = null;
        if (typeof node.className === 'string') {
            className = node.className || null;
        } else if (node.getAttribute) {
            className = node.getAttribute('class');
        }
        const result = {
            tagName: node.tagName ? node.tagName.toLowerCase() : '#text',
            id: node.id || null,
            className: className,
            children: []
        };
        for (const child of node.childNodes || []) {
            if (child.nodeType === 1) {
                const serialized = serializeNode(child, depth + 1);
                if (serialized) result.children.push(serialized);
            }
        }
        return result;
    }
    return serializeNode(document.documentElement, 0);
}
"""


def _find_pending(records: list[NetworkRecord], url: str) -> Optional[NetworkRecord]:
    """Most recent pending record for ``url``.

    Correlation is by URL only, so concurrent requests to the same URL can be
    attributed to the wrong record.
    """
    for record in reversed(records):
        if record.pending and record.url == url:
            return record
    return None


class SessionManager:
    """Launches, queries and tears down headless browser sessions."""

    def __init__(
        self,
        *,
        headless: bool = True,
        launch_args: Optional[list[str]] = None,
        viewport: Optional[dict[str, int]] = None,
        navigation_timeout: float = NAVIGATION_TIMEOUT_SECONDS,
        session_timeout: float = SESSION_TIMEOUT_SECONDS,
        reaper_interval: float = REAPER_INTERVAL_SECONDS,
        launcher: Optional[BrowserLauncher] = None,
    ):
        self.headless = headless
        self.launch_args = list(DEFAULT_LAUNCH_ARGS if launch_args is None else launch_args)
        self.viewport = viewport
        self.navigation_timeout = float(navigation_timeout)
        self.session_timeout = float(session_timeout)
        self.reaper_interval = float(reaper_interval)
        self._launcher = launcher or self._launch_chromium

        self._sessions: dict[str, BrowserSession] = {}
        self._lock = asyncio.Lock()
        self._playwright: Optional[Playwright] = None
        self._playwright_lock = asyncio.Lock()
        self._running = False
        self._reaper_task: Optional[asyncio.Task] = None

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def _launch_chromium(self) -> Browser:
        async with self._playwright_lock:
            if self._playwright is None:
                self._playwright = await async_playwright().start()
                logger.info("Playwright driver started")
        return await self._playwright.chromium.launch(headless=self.headless, args=self.launch_args)

    def start_reaper(self) -> None:
        """Start the periodic reaper (idempotent)."""
        if self._reaper_task and not self._reaper_task.done():
            return
        self._running = True
        self._reaper_task = asyncio.create_task(self._reaper_loop())

    async def stop(self) -> None:
        """Stop the reaper, close every session and stop the Playwright driver."""
        self._running = False
        if self._reaper_task:
            self._reaper_task.cancel()
            try:
                await self._reaper_task
            except asyncio.CancelledError:
                pass
            self._reaper_task = None

        closed = await self.close_all()
        if closed:
            logger.info("Closed %d remaining session(s) on shutdown", closed)

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None
            logger.info("Playwright driver stopped")

    async def _reaper_loop(self) -> None:
        logger.info("Session reaper started (interval %ss, timeout %ss)", self.reaper_interval, self.session_timeout)
        while self._running:
            try:
                await asyncio.sleep(self.reaper_interval)
                await self.reap_expired()
            except asyncio.CancelledError:
                break
            except Exception as exc:
                logger.error("Session reaper error: %s", exc)
        logger.info("Session reaper stopped")

    async def reap_expired(self, now: Optional[float] = None) -> list[str]:
        """Close every session older than the session timeout; returns their ids."""
        now = time.time() if now is None else now
        async with self._lock:
            expired = [
                session
                for session in self._sessions.values()
                if session.is_expired(self.session_timeout, now)
            ]
            for session in expired:
                self._sessions.pop(session.session_id, None)

        for session in expired:
            logger.info("Closing stale session: %s", session.session_id)
            await self._close_browser(session.browser, session.session_id)
        return [session.session_id for session in expired]

    # ------------------------------------------------------------------
    # Session operations
    # ------------------------------------------------------------------

    async def start(self, url: str) -> SessionSnapshot:
        """Launch a browser, navigate to ``url`` and register the session."""
        url = parse_http_url(url).geturl()
        session_id = uuid.uuid4().hex
        while session_id in self._sessions:
            session_id = uuid.uuid4().hex
        logger.info("Starting session %s for %s", session_id, url)

        try:
            browser = await self._launcher()
        except Exception as exc:
            raise LaunchError(f"Failed to launch browser: {exc}") from exc

        console_logs: list[ConsoleRecord] = []
        network_log: list[NetworkRecord] = []
        stored = False
        try:
            try:
                page = await (browser.new_page(viewport=self.viewport) if self.viewport else browser.new_page())
                self._attach_listeners(page, console_logs, network_log)
            except Exception as exc:
                raise LaunchError(f"Failed to open page: {exc}") from exc

            try:
                try:
                    await page.goto(
                        url,
                        wait_until="networkidle",
                        timeout=self.navigation_timeout * 1000,
                    )
                except PlaywrightTimeoutError:
                    logger.warning(
                        "Navigation to %s did not settle within %ss; keeping session %s",
                        url,
                        self.navigation_timeout,
                        session_id,
                    )
                html = await page.content()
                screenshot = await page.screenshot(full_page=False)
            except Exception as exc:
                raise NavigationError(f"Failed to load {url}: {exc}") from exc

            session = BrowserSession(
                session_id=session_id,
                url=url,
                browser=browser,
                page=page,
                console_logs=console_logs,
                network_log=network_log,
            )
            async with self._lock:
                self._sessions[session_id] = session
            stored = True
        finally:
            if not stored:
                await self._close_browser(browser, session_id)

        console_snapshot, network_snapshot = session.snapshot_logs()
        return SessionSnapshot(
            session_id=session_id,
            screenshot=screenshot,
            console_logs=console_snapshot,
            network_log=network_snapshot,
            html=html,
        )

    @staticmethod
    def _attach_listeners(
        page: Page,
        console_logs: list[ConsoleRecord],
        network_log: list[NetworkRecord],
    ) -> None:
        def on_console(msg) -> None:
            console_logs.append(ConsoleRecord(level=ConsoleLevel.from_string(msg.type), message=msg.text))

        def on_request(request) -> None:
            try:
                payload = request.post_data
            except Exception:
                payload = None
            network_log.append(
                NetworkRecord(
                    id=uuid.uuid4().hex[:12],
                    method=request.method,
                    url=request.url,
                    payload=payload,
                )
            )

        def on_response(response) -> None:
            record = _find_pending(network_log, response.url)
            if record:
                record.complete(
                    status=response.status,
                    status_text=response.status_text,
                    headers=response.headers,
                )

        def on_request_failed(request) -> None:
            record = _find_pending(network_log, request.url)
            if record:
                record.fail(request.failure)

        page.on("console", on_console)
        page.on("request", on_request)
        page.on("response", on_response)
        page.on("requestfailed", on_request_failed)

    def get(self, session_id: str) -> BrowserSession:
        session = self._sessions.get(session_id or "")
        if session is None:
            raise SessionNotFoundError()
        return session

    def _ensure_live(self, session_id: str, session: BrowserSession) -> None:
        """Raise SessionNotFound if ``session`` was closed or evicted meanwhile."""
        if self._sessions.get(session_id) is not session:
            raise SessionNotFoundError()

    async def screenshot(self, session_id: str, *, full_page: bool = False) -> bytes:
        session = self.get(session_id)
        try:
            return await session.page.screenshot(full_page=full_page)
        except Exception as exc:
            self._ensure_live(session_id, session)
            raise SessionError(f"Screenshot failed: {exc}") from exc

    def get_logs(self, session_id: str) -> tuple[list[ConsoleRecord], list[NetworkRecord]]:
        return self.get(session_id).snapshot_logs()

    async def execute(self, session_id: str, script: str) -> Any:
        session = self.get(session_id)
        try:
            return await session.page.evaluate(script)
        except Exception as exc:
            self._ensure_live(session_id, session)
            raise ExecutionError(str(exc) or "Script execution failed") from exc

    async def dom(self, session_id: str, *, max_depth: int = DOM_MAX_DEPTH) -> Optional[dict]:
        session = self.get(session_id)
        try:
            return await session.page.evaluate(DOM_TREE_SCRIPT, max_depth)
        except Exception as exc:
            self._ensure_live(session_id, session)
            raise SessionError(f"DOM snapshot failed: {exc}") from exc

    async def close(self, session_id: str) -> bool:
        """Close a session; unknown ids are a no-op. Returns True if one was closed."""
        async with self._lock:
            session = self._sessions.pop(session_id or "", None)
        if session is None:
            return False
        await self._close_browser(session.browser, session_id)
        logger.info("Closed session %s", session_id)
        return True

    async def close_all(self) -> int:
        async with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        await asyncio.gather(
            *(self._close_browser(s.browser, s.session_id) for s in sessions)
        )
        return len(sessions)

    @staticmethod
    async def _close_browser(browser: Browser, session_id: str) -> None:
        try:
            await browser.close()
        except Exception as exc:
            logger.warning("Failed to close browser for session %s: %s", session_id, exc)
