"""
Observability - structured logging for configuration events.
"""

from .logging import (
    LogLevel, LogEvent, LogFormatter, LogHandler, JSONLogFormatter,
    HumanReadableFormatter, ConsoleLogHandler, StructuredLogger,
    ConfigEventLogger, DEFAULT_LOG_LEVELS, create_default_logger
)

__all__ = [
    "LogLevel",
    "LogEvent",
    "LogFormatter",
    "LogHandler",
    "JSONLogFormatter",
    "HumanReadableFormatter",
    "ConsoleLogHandler",
    "StructuredLogger",
    "ConfigEventLogger",
    "DEFAULT_LOG_LEVELS",
    "create_default_logger",
]
