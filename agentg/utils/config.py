"""
Configuration Management
========================

Centralized configuration for the webhook server. All environment
variables are read, validated and typed here.

Only the composition root (agentg.main) calls get_config(). Everything
below it receives plain values through constructors, so the agent loop
and the tools never touch the environment.

Usage:
    from agentg.utils.config import get_config

    config = get_config()
    print(config.github.app_id)
    print(config.openai.model)
"""

import os
from dataclasses import dataclass
from typing import Callable, TypeVar

from dotenv import load_dotenv

NumberT = TypeVar("NumberT", int, float)


class ConfigError(ValueError):
    """Raised when a required setting is missing or malformed."""


def _required(name: str) -> str:
    """
    Get a required environment variable.

    Raises:
        ConfigError: If the variable is not set or empty
    """
    value = os.getenv(name)
    if not value:
        raise ConfigError(
            f"Missing required environment variable: {name}\n"
            f"Please ensure {name} is set in your .env file."
        )
    return value


def _optional(name: str, default: str) -> str:
    return os.getenv(name) or default


def _optional_number(name: str, default: NumberT, cast: Callable[[str], NumberT]) -> NumberT:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        kind = "an integer" if cast is int else "a number"
        raise ConfigError(f"{name} must be {kind}, got {raw!r}") from None


def _optional_int(name: str, default: int) -> int:
    return _optional_number(name, default, int)


def _optional_float(name: str, default: float) -> float:
    return _optional_number(name, default, float)


ENVIRONMENTS = ("development", "production", "test")


# ==============================================================================
# Configuration Dataclasses
# ==============================================================================

@dataclass(frozen=True)
class GitHubAppConfig:
    """GitHub App credentials."""
    app_id: str          # Numeric App ID, kept as a string for the JWT "iss" claim
    private_key: str     # PEM-encoded RSA key
    webhook_secret: str  # Shared secret for X-Hub-Signature-256
    api_url: str         # REST API root


@dataclass(frozen=True)
class OpenAIConfig:
    """Language model provider configuration."""
    api_key: str
    model: str
    temperature: float
    max_output_tokens: int


@dataclass(frozen=True)
class ServerConfig:
    """HTTP server configuration."""
    host: str
    port: int
    environment: str  # development | production | test

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@dataclass(frozen=True)
class Config:
    """
    Root configuration object.

    Access via:
        config = get_config()
        config.github.webhook_secret
        config.server.port
    """
    github: GitHubAppConfig
    openai: OpenAIConfig
    server: ServerConfig
    log_level: str


def load_config() -> Config:
    """
    Load and validate all configuration from the environment.

    Reads .env first (existing environment variables win), then builds a
    fully typed Config.

    Raises:
        ConfigError: If required configuration is missing or malformed
    """
    load_dotenv()

    environment = _optional("ENVIRONMENT", "development").lower()
    if environment not in ENVIRONMENTS:
        raise ConfigError(
            f"ENVIRONMENT must be one of {', '.join(ENVIRONMENTS)}, got {environment!r}"
        )

    return Config(
        github=GitHubAppConfig(
            app_id=_required("GITHUB_APP_ID"),
            # Keys stored in a single-line env var carry literal "\n" sequences
            private_key=_required("GITHUB_PRIVATE_KEY").replace("\\n", "\n"),
            webhook_secret=_required("GITHUB_WEBHOOK_SECRET"),
            api_url=_optional("GITHUB_API_URL", "https://api.github.com").rstrip("/"),
        ),
        openai=OpenAIConfig(
            api_key=_required("OPENAI_API_KEY"),
            model=_optional("OPENAI_MODEL", "gpt-4o"),
            temperature=_optional_float("OPENAI_TEMPERATURE", 0.3),
            max_output_tokens=_optional_int("OPENAI_MAX_OUTPUT_TOKENS", 4096),
        ),
        server=ServerConfig(
            host=_optional("HOST", "0.0.0.0"),
            port=_optional_int("PORT", 3000),
            environment=environment,
        ),
        log_level=_optional("LOG_LEVEL", "info"),
    )


# ==============================================================================
# Singleton Pattern
# ==============================================================================

_config_instance: Config | None = None


def get_config() -> Config:
    """
    Get the configuration, loading it on first access.

    Returns:
        Config: The application configuration
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = load_config()
    return _config_instance


def reset_config() -> None:
    """Forget the cached configuration so the next get_config() reloads it."""
    global _config_instance
    _config_instance = None
