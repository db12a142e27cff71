"""Standalone pagescope process.

Run:
  python -m pagescope.main
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys

from .config import load_config, validate_config
from .proxy import PageFetcher, PageProxy
from .server import PageScopeServer, ServerConfig
from .sessions import SessionManager

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


async def run_server() -> None:
    config = load_config()
    logging.getLogger().setLevel(config.log_level)

    errors = validate_config(config)
    if errors:
        for error in errors:
            logger.error("Config error: %s", error)
        raise SystemExit(1)

    fetcher = PageFetcher(
        max_redirects=config.max_redirects,
        timeout=config.fetch_timeout,
        headers=config.request_headers,
    )
    proxy = PageProxy(fetcher)

    sessions = None
    if config.sessions_enabled:
        sessions = SessionManager(
            headless=config.headless,
            launch_args=config.launch_args,
            viewport=config.viewport,
            navigation_timeout=config.navigation_timeout,
            session_timeout=config.session_timeout,
            reaper_interval=config.reaper_interval,
        )
    else:
        logger.info("Browser sessions disabled")

    server = PageScopeServer(
        config=ServerConfig(
            host=config.host,
            port=config.port,
            sessions_enabled=config.sessions_enabled,
        ),
        proxy=proxy,
        sessions=sessions,
    )

    stop_event = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # Windows event loop does not support add_signal_handler.
            pass

    await server.start()
    logger.info("pagescope running on http://%s:%s", config.host, config.port)
    try:
        await stop_event.wait()
    finally:
        logger.info("Shutting down...")
        await server.stop()


def main() -> None:
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
