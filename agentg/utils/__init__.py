"""
Utilities Module
================

Common utilities shared across the application:
- logger: Context-aware logging with levels
- config: Centralized configuration management
"""

from agentg.utils.config import Config, ConfigError, get_config
from agentg.utils.logger import Logger, configure_logging, logger

__all__ = ["Logger", "logger", "configure_logging", "get_config", "Config", "ConfigError"]
