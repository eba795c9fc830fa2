"""
Structured Exception Hierarchy

Every error raised by schemaconf carries an error code, a context dictionary
and a correlation ID so it can be logged or serialized without losing detail.
"""

from typing import Dict, List, Any, Optional
import uuid
from datetime import datetime, timezone


class SchemaConfException(Exception):
    """
    Base exception class for all schemaconf exceptions.

    Provides structured error information including error codes,
    context data, and correlation IDs for tracing.
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        correlation_id: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "correlation_id": self.correlation_id,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None
        }


class ConfigurationError(SchemaConfException):
    """Raised when configuration-related errors occur."""

    def __init__(
        self,
        message: str,
        error_code: str = "CONFIG_ERROR",
        config_path: Optional[str] = None,
        validation_errors: Optional[List[Dict[str, Any]]] = None,
        **kwargs
    ):
        context = kwargs.pop('context', {})
        if config_path:
            context['config_path'] = config_path
        if validation_errors:
            context['validation_errors'] = validation_errors

        super().__init__(
            message=message,
            error_code=error_code,
            context=context,
            **kwargs
        )


class NotLoadedError(ConfigurationError):
    """Raised when the configuration is read or written before a successful load."""

    def __init__(self, message: str = "Config not loaded.", **kwargs):
        super().__init__(message, "CONFIG_NOT_LOADED", **kwargs)


class AdapterError(ConfigurationError):
    """Raised when a configuration source cannot serve a load."""

    def __init__(
        self,
        message: str = "Adapter cannot handle this input type.",
        error_code: str = "ADAPTER_ERROR",
        source_type: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.pop('context', {})
        if source_type:
            context['source_type'] = source_type
        super().__init__(message, error_code, context=context, **kwargs)


class AdapterNotSetError(AdapterError):
    """Raised when no source is assigned and none can be selected from the reference."""

    def __init__(self, message: str = "Adapter not set.", **kwargs):
        super().__init__(message, "ADAPTER_NOT_SET", **kwargs)


class AdapterMismatchError(AdapterError):
    """Raised when a source receives a reference of the wrong shape."""

    def __init__(
        self,
        message: str = "Adapter cannot handle this input type.",
        reference_type: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.pop('context', {})
        if reference_type:
            context['reference_type'] = reference_type
        super().__init__(message, "ADAPTER_MISMATCH", context=context, **kwargs)


class ReadError(ConfigurationError):
    """Raised when a configuration file cannot be read, for whatever reason."""

    def __init__(self, message: str = "Could not read file.", **kwargs):
        super().__init__(message, "CONFIG_READ_ERROR", **kwargs)


class ParseError(ConfigurationError):
    """Raised when configuration file content cannot be decoded."""

    def __init__(self, message: str = "Could not parse configuration.", **kwargs):
        super().__init__(message, "CONFIG_PARSE_ERROR", **kwargs)
