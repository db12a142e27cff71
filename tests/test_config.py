from pathlib import Path

import pytest

from pagescope import config as config_module
from pagescope.config import Config, load_config, validate_config


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    monkeypatch.setattr(config_module, "load_dotenv", lambda: None)
    for name in (
        "PAGESCOPE_HOST",
        "PAGESCOPE_PORT",
        "MAX_REDIRECTS",
        "FETCH_TIMEOUT",
        "NAVIGATION_TIMEOUT",
        "SESSION_TIMEOUT_MINUTES",
        "REAPER_INTERVAL",
        "SESSIONS_ENABLED",
        "BROWSER_HEADLESS",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CONFIG_DIR", str(tmp_path))
    return tmp_path


def test_defaults(clean_env):
    cfg = load_config()

    assert cfg.port == 3000
    assert cfg.max_redirects == 10
    assert cfg.fetch_timeout == 15.0
    assert cfg.session_timeout == 1800
    assert cfg.sessions_enabled is True
    assert cfg.request_headers["User-Agent"].startswith("Mozilla/5.0")
    assert validate_config(cfg) == []


def test_env_overrides(clean_env, monkeypatch):
    monkeypatch.setenv("PAGESCOPE_PORT", "8081")
    monkeypatch.setenv("SESSION_TIMEOUT_MINUTES", "5")
    monkeypatch.setenv("SESSIONS_ENABLED", "no")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    cfg = load_config()

    assert cfg.port == 8081
    assert cfg.session_timeout == 300
    assert cfg.sessions_enabled is False
    assert cfg.log_level == "DEBUG"


def test_yaml_overrides(clean_env):
    (clean_env / "pagescope.yaml").write_text(
        "fetch:\n"
        "  user_agent: custom-agent\n"
        "browser:\n"
        "  launch_args: ['--headless=new']\n"
        "  viewport: {width: 800, height: 600}\n"
    )

    cfg = load_config()

    assert cfg.user_agent == "custom-agent"
    assert cfg.launch_args == ["--headless=new"]
    assert cfg.viewport == {"width": 800, "height": 600}


def test_malformed_yaml_is_ignored(clean_env):
    (clean_env / "pagescope.yaml").write_text("fetch: [unclosed\n")
    cfg = load_config()
    assert cfg.user_agent == Config().user_agent


def test_validate_config_reports_bad_values():
    cfg = Config(port=70000, fetch_timeout=0, max_redirects=-1, config_dir=Path("."))
    errors = validate_config(cfg)

    assert any("PAGESCOPE_PORT" in e for e in errors)
    assert any("FETCH_TIMEOUT" in e for e in errors)
    assert any("MAX_REDIRECTS" in e for e in errors)
