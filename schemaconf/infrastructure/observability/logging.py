"""
Structured Logging System for schemaconf

Provides a small structured logger with pluggable formatters and handlers, and
the event logger used by configuration instances. Every configuration event
(load, get, set, ...) is mapped to a severity; users choose the mapping and
the sink.
"""

import json
import sys
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, TextIO, Union


class LogLevel(Enum):
    """Log levels for configuration events"""
    SILENT = "silent"
    DEBUG = "debug"
    INFO = "info"
    ERROR = "error"


class LogEvent(Enum):
    """Configuration lifecycle events that produce a log line"""
    GET = "get"
    SET = "set"
    LOAD = "load"
    RELOAD = "reload"
    COMPILED_SCHEMA = "compiled_schema"
    COMPILED_ENV_SCHEMA = "compiled_env_schema"
    START_RELOAD_INTERVAL = "start_reload_interval"
    STOP_RELOAD_INTERVAL = "stop_reload_interval"
    ERROR = "error"
    RUN_LISTENERS = "run_listeners"
    REGISTERED_LISTENER = "registered_listener"
    ADAPTER_SET = "adapter_set"


DEFAULT_LOG_LEVELS: Dict[LogEvent, LogLevel] = {
    # debug
    LogEvent.GET: LogLevel.DEBUG,
    LogEvent.RUN_LISTENERS: LogLevel.DEBUG,
    LogEvent.SET: LogLevel.DEBUG,
    LogEvent.START_RELOAD_INTERVAL: LogLevel.DEBUG,
    LogEvent.STOP_RELOAD_INTERVAL: LogLevel.DEBUG,
    LogEvent.REGISTERED_LISTENER: LogLevel.DEBUG,
    LogEvent.COMPILED_ENV_SCHEMA: LogLevel.DEBUG,
    # info
    LogEvent.COMPILED_SCHEMA: LogLevel.INFO,
    LogEvent.LOAD: LogLevel.INFO,
    LogEvent.RELOAD: LogLevel.INFO,
    LogEvent.ADAPTER_SET: LogLevel.INFO,
    # error
    LogEvent.ERROR: LogLevel.ERROR,
}

LogFunction = Callable[[str, LogLevel], None]


class LogFormatter(ABC):
    """Abstract base class for log formatters"""

    @abstractmethod
    def format(self, record: Dict[str, Any]) -> str:
        """Format a log record into a string"""
        pass


class JSONLogFormatter(LogFormatter):
    """JSON formatter for structured logging"""

    def format(self, record: Dict[str, Any]) -> str:
        return json.dumps(record, default=str, ensure_ascii=False)


class HumanReadableFormatter(LogFormatter):
    """Human-readable formatter for development/debugging"""

    def format(self, record: Dict[str, Any]) -> str:
        timestamp = record.get('timestamp', '')
        level = record.get('level', '').upper()
        message = record.get('message', '')

        base_msg = f"[{timestamp}] {level}: {message}"

        if record.get('extra'):
            extra_str = ', '.join(f"{k}={v}" for k, v in record['extra'].items())
            base_msg += f" [{extra_str}]"

        return base_msg


class LogHandler(ABC):
    """Abstract base class for log handlers"""

    def __init__(self, formatter: LogFormatter):
        self.formatter = formatter

    @abstractmethod
    def emit(self, record: Dict[str, Any]) -> None:
        """Emit a log record"""
        pass


class ConsoleLogHandler(LogHandler):
    """Console log handler that writes to a text stream (stderr by default)"""

    def __init__(self, formatter: LogFormatter, stream: Optional[TextIO] = None):
        super().__init__(formatter)
        self.stream = stream

    def emit(self, record: Dict[str, Any]) -> None:
        # Resolve late so pytest's capsys and redirected streams are honoured.
        stream = self.stream or sys.stderr
        stream.write(self.formatter.format(record) + '\n')
        stream.flush()


class StructuredLogger:
    """
    Structured logger writing dictionary records to a list of handlers.

    Records below the logger's level are discarded; a failing handler never
    breaks the caller.
    """

    _LEVEL_ORDER = {
        LogLevel.DEBUG: 0,
        LogLevel.INFO: 1,
        LogLevel.ERROR: 2,
    }

    def __init__(self, name: str, level: LogLevel = LogLevel.DEBUG):
        self.name = name
        self.level = level
        self.handlers: list[LogHandler] = []

    def add_handler(self, handler: LogHandler) -> None:
        self.handlers.append(handler)

    def _should_log(self, level: LogLevel) -> bool:
        if level is LogLevel.SILENT or self.level is LogLevel.SILENT:
            return False
        return self._LEVEL_ORDER[level] >= self._LEVEL_ORDER[self.level]

    def _create_log_record(self, level: LogLevel, message: str, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        record = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': level.value,
            'logger': self.name,
            'message': message,
        }
        if extra:
            record['extra'] = extra
        return record

    def log(self, level: LogLevel, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        if not self._should_log(level):
            return

        record = self._create_log_record(level, message, extra)

        for handler in self.handlers:
            try:
                handler.emit(record)
            except Exception as e:
                # Fallback to stderr if handler fails
                sys.stderr.write(f"Logging handler failed: {e}\n")


def create_default_logger(name: str = "schemaconf", use_json: bool = False) -> StructuredLogger:
    """Create the console logger behind ``logger=True`` and ``logger="json"``."""
    formatter = JSONLogFormatter() if use_json else HumanReadableFormatter()
    logger = StructuredLogger(name, LogLevel.DEBUG)
    logger.add_handler(ConsoleLogHandler(formatter))
    return logger


def _coerce_level_map(levels: Mapping[Union[LogEvent, str], Union[LogLevel, str]]) -> Dict[LogEvent, LogLevel]:
    coerced: Dict[LogEvent, LogLevel] = {}
    for event, level in levels.items():
        coerced[LogEvent(event)] = LogLevel(level)
    return coerced


class ConfigEventLogger:
    """
    Event logger shared by a configuration instance and its sources.

    ``logger`` may be ``True`` (human readable console output through a
    StructuredLogger), ``"json"`` (one JSON record per line on the console), a
    callable receiving ``(message, level)``, or falsy to disable output.
    ``log_levels`` overrides the severity of individual events; events mapped
    to ``LogLevel.SILENT`` are never emitted.
    """

    def __init__(
        self,
        logger: Union[LogFunction, bool, str, None] = None,
        log_levels: Optional[Mapping[Union[LogEvent, str], Union[LogLevel, str]]] = None
    ):
        self._structured: Optional[StructuredLogger] = None
        self._log_function: Optional[LogFunction] = None
        if logger is True or logger == "json":
            self._structured = create_default_logger(use_json=logger == "json")
        elif callable(logger):
            self._log_function = logger
        elif isinstance(logger, str):
            raise ValueError(f"Unknown logger option: {logger!r}")

        self._levels = dict(DEFAULT_LOG_LEVELS)
        if log_levels:
            self._levels.update(_coerce_level_map(log_levels))

    @property
    def enabled(self) -> bool:
        return self._structured is not None or self._log_function is not None

    def level_for(self, event: LogEvent) -> LogLevel:
        return self._levels[event]

    def log(self, message: str, event: LogEvent) -> None:
        """Log ``message`` at the severity configured for ``event``."""
        level = self.level_for(event)
        if level is LogLevel.SILENT:
            return
        if self._structured is not None:
            self._structured.log(level, message, {'event': event.value})
        elif self._log_function is not None:
            self._log_function(message, level)
