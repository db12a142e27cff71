"""Configuration management for pagescope."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from dotenv import load_dotenv

from .constants import (
    DEFAULT_ACCEPT,
    DEFAULT_ACCEPT_LANGUAGE,
    DEFAULT_LAUNCH_ARGS,
    DEFAULT_USER_AGENT,
    FETCH_TIMEOUT_SECONDS,
    MAX_REDIRECTS,
    NAVIGATION_TIMEOUT_SECONDS,
    REAPER_INTERVAL_SECONDS,
    SESSION_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """Application configuration loaded from environment."""

    # HTTP server
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"

    # Proxy
    max_redirects: int = MAX_REDIRECTS
    fetch_timeout: float = FETCH_TIMEOUT_SECONDS
    user_agent: str = DEFAULT_USER_AGENT
    accept: str = DEFAULT_ACCEPT
    accept_language: str = DEFAULT_ACCEPT_LANGUAGE

    # Browser sessions
    sessions_enabled: bool = True
    headless: bool = True
    navigation_timeout: float = NAVIGATION_TIMEOUT_SECONDS
    session_timeout: float = SESSION_TIMEOUT_SECONDS
    reaper_interval: float = REAPER_INTERVAL_SECONDS
    launch_args: list[str] = field(default_factory=lambda: list(DEFAULT_LAUNCH_ARGS))
    viewport: dict[str, int] | None = None

    config_dir: Path = field(default_factory=lambda: Path("./config"))

    def __post_init__(self):
        self.config_dir = Path(self.config_dir)

    @property
    def request_headers(self) -> dict[str, str]:
        """Headers sent by the proxy so the fetch looks like a desktop browser visit."""
        return {
            "User-Agent": self.user_agent,
            "Accept": self.accept,
            "Accept-Language": self.accept_language,
        }


def _load_overrides(config_dir: Path) -> dict:
    """Load header and browser overrides from config/pagescope.yaml (optional)."""
    path = Path(config_dir or ".") / "pagescope.yaml"
    if not path.exists():
        return {}

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except Exception as exc:
        logger.warning("Failed to parse pagescope.yaml: %s", exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring pagescope.yaml: expected a mapping at top level")
        return {}

    fetch_cfg = data.get("fetch") or {}
    browser_cfg = data.get("browser") or {}
    if not isinstance(fetch_cfg, dict):
        fetch_cfg = {}
    if not isinstance(browser_cfg, dict):
        browser_cfg = {}

    overrides: dict = {}
    for key in ("user_agent", "accept", "accept_language"):
        value = str(fetch_cfg.get(key) or "").strip()
        if value:
            overrides[key] = value

    launch_args = browser_cfg.get("launch_args")
    if isinstance(launch_args, list):
        overrides["launch_args"] = [str(arg) for arg in launch_args if str(arg).strip()]

    viewport = browser_cfg.get("viewport")
    if isinstance(viewport, dict):
        try:
            overrides["viewport"] = {
                "width": int(viewport["width"]),
                "height": int(viewport["height"]),
            }
        except (KeyError, TypeError, ValueError):
            logger.warning("Ignoring browser.viewport override: width/height must be integers")

    return overrides


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def load_config() -> Config:
    """Load configuration from environment variables."""
    load_dotenv()

    config_dir = Path(os.getenv("CONFIG_DIR", "./config"))
    overrides = _load_overrides(config_dir)

    return Config(
        host=os.getenv("PAGESCOPE_HOST", "127.0.0.1"),
        port=int(os.getenv("PAGESCOPE_PORT", "3000")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        max_redirects=int(os.getenv("MAX_REDIRECTS", str(MAX_REDIRECTS))),
        fetch_timeout=float(os.getenv("FETCH_TIMEOUT", str(FETCH_TIMEOUT_SECONDS))),
        sessions_enabled=_env_bool("SESSIONS_ENABLED", "true"),
        headless=_env_bool("BROWSER_HEADLESS", "true"),
        navigation_timeout=float(os.getenv("NAVIGATION_TIMEOUT", str(NAVIGATION_TIMEOUT_SECONDS))),
        session_timeout=float(os.getenv("SESSION_TIMEOUT_MINUTES", "30")) * 60,
        reaper_interval=float(os.getenv("REAPER_INTERVAL", str(REAPER_INTERVAL_SECONDS))),
        config_dir=config_dir,
        **overrides,
    )


def validate_config(config: Config) -> list[str]:
    """Validate configuration and return list of error messages."""
    errors: list[str] = []
    if not (0 < int(config.port) < 65536):
        errors.append(f"PAGESCOPE_PORT out of range: {config.port}")
    if config.max_redirects < 0:
        errors.append("MAX_REDIRECTS must be >= 0")
    if config.fetch_timeout <= 0:
        errors.append("FETCH_TIMEOUT must be positive")
    if config.navigation_timeout <= 0:
        errors.append("NAVIGATION_TIMEOUT must be positive")
    if config.session_timeout <= 0:
        errors.append("SESSION_TIMEOUT_MINUTES must be positive")
    if config.reaper_interval <= 0:
        errors.append("REAPER_INTERVAL must be positive")
    return errors
