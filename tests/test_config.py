"""Tests for configuration loading and the logger."""

from __future__ import annotations

import pytest

from agentg.utils import config as config_module
from agentg.utils.config import ConfigError, get_config, load_config, reset_config
from agentg.utils.logger import LogLevel, Logger, configure_logging, format_fields, parse_log_level

REQUIRED = {
    "GITHUB_APP_ID": "12345",
    "GITHUB_PRIVATE_KEY": "-----BEGIN KEY-----\\nabc\\n-----END KEY-----",
    "GITHUB_WEBHOOK_SECRET": "s3cret",
    "OPENAI_API_KEY": "sk-test",
}
OPTIONAL = (
    "GITHUB_API_URL",
    "OPENAI_MODEL",
    "OPENAI_TEMPERATURE",
    "OPENAI_MAX_OUTPUT_TOKENS",
    "HOST",
    "PORT",
    "ENVIRONMENT",
    "LOG_LEVEL",
)


@pytest.fixture
def env(monkeypatch):
    # keep a developer's .env out of the picture
    monkeypatch.setattr(config_module, "load_dotenv", lambda: None)
    for name in OPTIONAL:
        monkeypatch.delenv(name, raising=False)
    for name, value in REQUIRED.items():
        monkeypatch.setenv(name, value)
    reset_config()
    yield monkeypatch
    reset_config()


class TestLoadConfig:
    def test_defaults(self, env):
        config = load_config()

        assert config.github.app_id == "12345"
        assert config.github.private_key == "-----BEGIN KEY-----\nabc\n-----END KEY-----"
        assert config.github.api_url == "https://api.github.com"
        assert config.openai.model == "gpt-4o"
        assert config.openai.temperature == 0.3
        assert config.openai.max_output_tokens == 4096
        assert config.server.port == 3000
        assert config.server.environment == "development"
        assert not config.server.is_production
        assert config.log_level == "info"

    def test_overrides(self, env):
        env.setenv("OPENAI_MODEL", "gpt-4o-mini")
        env.setenv("OPENAI_TEMPERATURE", "0")
        env.setenv("PORT", "8080")
        env.setenv("ENVIRONMENT", "Production")
        env.setenv("GITHUB_API_URL", "https://ghe.example.com/api/v3/")

        config = load_config()

        assert config.openai.model == "gpt-4o-mini"
        assert config.openai.temperature == 0.0
        assert config.server.port == 8080
        assert config.server.is_production
        assert config.github.api_url == "https://ghe.example.com/api/v3"

    @pytest.mark.parametrize("name", sorted(REQUIRED))
    def test_missing_required(self, env, name):
        env.delenv(name)
        with pytest.raises(ConfigError, match=name):
            load_config()

    def test_bad_integer(self, env):
        env.setenv("PORT", "eighty")
        with pytest.raises(ConfigError, match="PORT"):
            load_config()

    def test_bad_environment(self, env):
        env.setenv("ENVIRONMENT", "staging")
        with pytest.raises(ConfigError, match="ENVIRONMENT"):
            load_config()

    def test_singleton(self, env):
        assert get_config() is get_config()
        reset_config()
        env.setenv("PORT", "9000")
        assert get_config().server.port == 9000


class TestLogger:
    @pytest.mark.parametrize("value,level", [
        ("debug", LogLevel.DEBUG),
        ("WARN", LogLevel.WARNING),
        ("error", LogLevel.ERROR),
        ("nonsense", LogLevel.INFO),
        (None, LogLevel.INFO),
    ])
    def test_parse_log_level(self, value, level):
        assert parse_log_level(value) is level

    def test_format_fields(self):
        assert format_fields({"iterations": 3, "repo": "acme/api"}) == "iterations=3 repo=acme/api"

    def test_level_filtering(self, capsys):
        log = Logger("Test")
        configure_logging("warning")
        try:
            log.info("hidden")
            log.warning("shown", {"n": 1})
        finally:
            configure_logging("info")

        out = capsys.readouterr()
        text = out.out + out.err
        assert "hidden" not in text
        assert "shown" in text
        assert "n=1" in text

    def test_child_context(self, capsys):
        Logger("Agent").child("IssueOrganizerAgent").info("hello")

        out = capsys.readouterr()
        assert "[Agent:IssueOrganizerAgent]" in out.out + out.err

    def test_plain_format(self):
        line = Logger("GitHubClient").format(LogLevel.WARNING, "slow", {"ms": 900})

        assert "\033" not in line
        assert line.endswith("[WARN] [GitHubClient] slow ms=900")
