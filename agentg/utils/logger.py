"""
Logger Utility
==============

Context-aware logging for the webhook server and the agent loop.

Every component creates its own Logger with a short context name, so a
single run can be followed through the log:

    [2026-01-31T10:30:00] [INFO] [Agent:IssueOrganizerAgent] Iteration 1 budget=5
    [2026-01-31T10:30:02] [INFO] [ToolExecutor] Executing tool: add_label id=call_1
    [2026-01-31T10:30:02] [DEBUG] [GitHubClient] POST /repos/acme/api/issues/7/labels -> 200

Structured data is rendered inline as key=value pairs, which keeps one
event on one line and makes the output easy to grep. Colors are only
used when the stream is a terminal, so container logs stay plain.

Usage:
    from agentg.utils.logger import Logger

    logger = Logger("AgentRunner")
    logger.info("Run finished", {"iterations": 3, "actions": 4})

    run_logger = logger.child("IssueOrganizerAgent")
    run_logger.debug("LLM response", {"tool_uses": 2})
"""

import os
import sys
from datetime import datetime
from enum import IntEnum
from typing import Any, TextIO


class LogLevel(IntEnum):
    """Log levels, ordered by severity."""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40


# ANSI escape codes
RESET = "\033[0m"
DIM = "\033[2m"

# level -> (label, color)
_STYLES = {
    LogLevel.DEBUG: ("DEBUG", "\033[36m"),    # cyan
    LogLevel.INFO: ("INFO", "\033[32m"),      # green
    LogLevel.WARNING: ("WARN", "\033[33m"),   # yellow
    LogLevel.ERROR: ("ERROR", "\033[31m"),    # red
}

_LEVEL_NAMES = {
    "DEBUG": LogLevel.DEBUG,
    "INFO": LogLevel.INFO,
    "WARNING": LogLevel.WARNING,
    "WARN": LogLevel.WARNING,
    "ERROR": LogLevel.ERROR,
}


def parse_log_level(value: str | None) -> LogLevel:
    """
    Parse a level name such as "debug" or "WARN".

    Unknown or empty values fall back to INFO.
    """
    if not value:
        return LogLevel.INFO
    return _LEVEL_NAMES.get(value.upper(), LogLevel.INFO)


# Process-wide minimum level. Read from the environment at import time and
# replaced by configure_logging() once the configuration is loaded.
_min_level = parse_log_level(os.getenv("LOG_LEVEL"))


def configure_logging(level: str) -> None:
    """Set the minimum level for every Logger in the process."""
    global _min_level
    _min_level = parse_log_level(level)


def _format_value(value: Any) -> str:
    text = str(value)
    if " " in text or not text:
        return repr(text)
    return text


def format_fields(data: dict[str, Any]) -> str:
    """Render structured data as space-separated key=value pairs."""
    return " ".join(f"{key}={_format_value(value)}" for key, value in data.items())


def _paint(text: str, color: str, enabled: bool) -> str:
    return f"{color}{text}{RESET}" if enabled else text


class Logger:
    """
    A context-aware logger.

    Example:
        logger = Logger("GitHubClient")
        logger.info("Request sent", {"method": "POST", "status": 201})

        child = logger.child("installation-42")
        child.debug("Token refreshed")
    """

    def __init__(self, context: str = ""):
        """
        Args:
            context: Prefix for every message (e.g. "AgentRunner")
        """
        self.context = context

    def child(self, child_context: str) -> "Logger":
        """
        Logger("Agent").child("PRReviewerAgent") logs as [Agent:PRReviewerAgent].
        """
        if not self.context:
            return Logger(child_context)
        return Logger(f"{self.context}:{child_context}")

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level >= _min_level

    def format(self, level: LogLevel, message: str, data: dict[str, Any] | None = None,
               color: bool = False) -> str:
        """Build one log line; `color` wraps the parts in ANSI codes."""
        label, level_color = _STYLES[level]
        parts = [
            _paint(f"[{datetime.now().isoformat(timespec='seconds')}]", DIM, color),
            _paint(f"[{label}]", level_color, color),
        ]
        if self.context:
            parts.append(f"[{self.context}]")
        parts.append(message)
        if data:
            parts.append(_paint(format_fields(data), DIM, color))
        return " ".join(parts)

    def _emit(self, level: LogLevel, message: str, data: dict[str, Any] | None) -> None:
        if not self.is_enabled_for(level):
            return

        stream: TextIO = sys.stderr if level >= LogLevel.ERROR else sys.stdout
        color = hasattr(stream, "isatty") and stream.isatty()
        print(self.format(level, message, data, color=color), file=stream)

    def debug(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Only shown when LOG_LEVEL=debug."""
        self._emit(LogLevel.DEBUG, message, data)

    def info(self, message: str, data: dict[str, Any] | None = None) -> None:
        self._emit(LogLevel.INFO, message, data)

    def warning(self, message: str, data: dict[str, Any] | None = None) -> None:
        self._emit(LogLevel.WARNING, message, data)

    def error(
        self,
        message: str,
        error: BaseException | None = None,
        data: dict[str, Any] | None = None
    ) -> None:
        """
        Log an error, optionally with the exception that caused it.

        The exception's type and message are added to the structured data
        as error_type and error_message.
        """
        fields = dict(data or {})
        if error is not None:
            fields["error_type"] = type(error).__name__
            fields["error_message"] = str(error)
        self._emit(LogLevel.ERROR, message, fields or None)


# Shared instance for modules that don't need their own context
logger = Logger("AgentG")
