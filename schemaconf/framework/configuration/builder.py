"""
Configuration builder for creating SchemaConfiguration instances.
"""

from typing import Any, Callable, Dict, Mapping, Optional, Union

from ...infrastructure.observability.logging import LogFunction
from .core import SchemaConfiguration
from .schema import ConfigField, SchemaFactory, SchemaMap, UNSET
from .sources import ConfigurationSource


class ConfigurationBuilder:
    """
    Fluent builder for SchemaConfiguration.

    Fields can be declared one by one or given as a whole schema map; both
    can be combined, later declarations win.
    """

    def __init__(self):
        self._fields: Dict[str, Any] = {}
        self._schema_factory: Optional[SchemaFactory] = None
        self._source: Optional[ConfigurationSource] = None
        self._reload_interval_ms: Optional[float] = None
        self._logger: Union[LogFunction, bool, str, None] = None
        self._log_levels: Optional[Mapping] = None
        self._on_reload_error: Optional[Callable[[Exception], None]] = None
        self._environ: Optional[Mapping[str, str]] = None

    def with_schema(self, schema: Union[SchemaMap, SchemaFactory]) -> 'ConfigurationBuilder':
        """Add every field of a schema map, or defer to a schema factory."""
        if callable(schema) and not isinstance(schema, Mapping):
            self._schema_factory = schema
        else:
            self._fields.update(schema)
        return self

    def with_field(
        self,
        name: str,
        annotation: Any,
        env: Optional[str] = None,
        default: Any = UNSET,
        description: Optional[str] = None
    ) -> 'ConfigurationBuilder':
        """
        Declare a single field.

        Args:
            name: Field name
            annotation: Type validated by pydantic
            env: Environment variable overriding the field
            default: Value used when no source supplies one
        """
        self._fields[name] = ConfigField(annotation, env=env, default=default, description=description)
        return self

    def with_source(self, source: ConfigurationSource) -> 'ConfigurationBuilder':
        """Use ``source`` instead of picking one from the reference."""
        self._source = source
        return self

    def with_reload_interval(self, interval_ms: float) -> 'ConfigurationBuilder':
        if interval_ms <= 0:
            raise ValueError(f"Reload interval must be positive, got {interval_ms}")
        self._reload_interval_ms = interval_ms
        return self

    def with_logger(self, logger: Union[LogFunction, bool, str] = True) -> 'ConfigurationBuilder':
        self._logger = logger
        return self

    def with_log_levels(self, log_levels: Mapping) -> 'ConfigurationBuilder':
        self._log_levels = log_levels
        return self

    def on_reload_error(self, callback: Callable[[Exception], None]) -> 'ConfigurationBuilder':
        self._on_reload_error = callback
        return self

    def with_environ(self, environ: Mapping[str, str]) -> 'ConfigurationBuilder':
        """Read environment overrides from ``environ`` instead of os.environ."""
        self._environ = environ
        return self

    def _resolve_schema(self) -> SchemaMap:
        fields: Dict[str, Any] = {}
        if self._schema_factory is not None:
            fields.update(self._schema_factory(ConfigField))
        fields.update(self._fields)
        if not fields:
            raise ValueError("Cannot build a configuration without fields")
        return fields

    def build(self) -> SchemaConfiguration:
        """
        Build the configuration instance. Nothing is loaded yet.

        Returns:
            SchemaConfiguration instance
        """
        return SchemaConfiguration(
            schema=self._resolve_schema(),
            reload_interval_ms=self._reload_interval_ms,
            logger=self._logger,
            log_levels=self._log_levels,
            source=self._source,
            on_reload_error=self._on_reload_error,
            environ=self._environ
        )
