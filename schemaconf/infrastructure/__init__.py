"""
Infrastructure Layer - cross-cutting technical services

Error hierarchy and structured logging shared by the configuration framework.
"""

from .exceptions import (
    SchemaConfException, ConfigurationError, NotLoadedError, AdapterError,
    AdapterNotSetError, AdapterMismatchError, ReadError, ParseError
)
from .observability import (
    LogLevel, LogEvent, LogFormatter, LogHandler, StructuredLogger,
    ConfigEventLogger, create_default_logger
)

__all__ = [
    "SchemaConfException",
    "ConfigurationError",
    "NotLoadedError",
    "AdapterError",
    "AdapterNotSetError",
    "AdapterMismatchError",
    "ReadError",
    "ParseError",
    "LogLevel",
    "LogEvent",
    "LogFormatter",
    "LogHandler",
    "StructuredLogger",
    "ConfigEventLogger",
    "create_default_logger",
]
