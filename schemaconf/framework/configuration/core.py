"""
Core configuration management class.
"""

import threading
from collections.abc import Mapping
from typing import Any, Callable, Dict, Optional, Tuple, Union

from ...infrastructure.exceptions import AdapterNotSetError, NotLoadedError
from ...infrastructure.observability.logging import ConfigEventLogger, LogEvent, LogFunction
from .changes import changed_fields, clone
from .environment import EnvironmentResolver
from .listeners import ListenerFunction, ListenerRegistry
from .reload import ReloadTimer
from .schema import CompiledSchema, ConfigField, SchemaFactory, SchemaMap
from .sources import ConfigurationSource, SourceReference, select_source
from .validation import ConfigurationValidationError

ReferenceFactory = Callable[[Dict[str, Any]], SourceReference]
ReferenceParam = Union[SourceReference, ReferenceFactory]


class SchemaConfiguration:
    """
    Typed configuration validated against a declarative schema.

    Values come from a mapping or a JSON/YAML file, environment variables
    bound to fields override them, and the merged result is validated as a
    whole. Reads and writes always copy, listeners are told about changed
    fields, and an optional timer reloads the last source periodically.

    Example:
        config = SchemaConfiguration(schema={
            "port": ConfigField(int, env="PORT"),
            "host": ConfigField(str, env="HOST"),
        })
        config.load_sync("config.yaml")
        config.get("port")
    """

    def __init__(
        self,
        schema: Union[SchemaMap, SchemaFactory],
        reload_interval_ms: Optional[float] = None,
        logger: Union[LogFunction, bool, str, None] = None,
        log_levels: Optional[Mapping] = None,
        source: Optional[ConfigurationSource] = None,
        on_reload_error: Optional[Callable[[Exception], None]] = None,
        environ: Optional[Mapping[str, str]] = None
    ):
        if reload_interval_ms is not None and reload_interval_ms <= 0:
            raise ValueError(f"Reload interval must be positive, got {reload_interval_ms}")

        self._logger = ConfigEventLogger(logger, log_levels)
        self._source: Optional[ConfigurationSource] = None
        if source is not None:
            self._assign_source(source)

        self._compiled = CompiledSchema.compile(schema)
        self._logger.log('Compiled schema successfully.', LogEvent.COMPILED_SCHEMA)
        self._logger.log('Compiled env schema successfully.', LogEvent.COMPILED_ENV_SCHEMA)
        self._environment = EnvironmentResolver(self._compiled, environ)

        self._reference: Optional[SourceReference] = None
        self._has_reference = False
        # Loads are numbered as they start; a result older than the applied one is dropped.
        self._load_generation = 0
        self._applied_generation = 0
        self._snapshot: Optional[Dict[str, Any]] = None
        self._listeners = ListenerRegistry()
        self._config_lock = threading.RLock()

        self._reload_interval_ms = reload_interval_ms
        self._reload_timer: Optional[ReloadTimer] = None
        self._on_reload_error = on_reload_error

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def schema(self) -> Mapping[str, ConfigField]:
        """Read-only view of the declared fields."""
        return self._compiled.fields

    @property
    def adapter(self) -> Optional[ConfigurationSource]:
        return self._source

    @property
    def source_reference(self) -> Optional[SourceReference]:
        """Copy of the reference the last load resolved to."""
        return clone(self._reference)

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def is_reload_running(self) -> bool:
        return self._reload_timer is not None and self._reload_timer.is_running

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    async def load(self, reference: ReferenceParam) -> None:
        """
        Load configuration from a mapping or a file path.

        The raw values are merged with the environment overlay (environment
        wins) and validated; on success the snapshot is replaced and listeners
        of changed fields are notified. On failure nothing changes. A result
        that finishes after a later-started load or reload was applied is
        discarded, so a slow reload tick never reverts a newer load.

        Args:
            reference: A mapping, a file path, or a callable receiving the
                environment overlay and returning one of those

        Raises:
            ConfigurationValidationError: If the environment or merged values are invalid
            AdapterError: If no source fits the reference
            ReadError, ParseError: If a file source fails
        """
        overlay, reference, generation = self._pre_load(reference)
        raw = await self._require_source().load(clone(reference))
        self._post_load(overlay, raw, LogEvent.LOAD, generation)

    def load_sync(self, reference: ReferenceParam) -> None:
        """Blocking variant of :meth:`load`."""
        overlay, reference, generation = self._pre_load(reference)
        raw = self._require_source().load_sync(clone(reference))
        self._post_load(overlay, raw, LogEvent.LOAD, generation)

    async def reload(self) -> None:
        """Load again from the last resolved reference."""
        overlay, reference, generation = self._pre_reload()
        raw = await self._require_source().load(clone(reference))
        self._post_load(overlay, raw, LogEvent.RELOAD, generation)

    def reload_sync(self) -> None:
        """Blocking variant of :meth:`reload`."""
        overlay, reference, generation = self._pre_reload()
        raw = self._require_source().load_sync(clone(reference))
        self._post_load(overlay, raw, LogEvent.RELOAD, generation)

    def _pre_load(self, reference: ReferenceParam) -> Tuple[Dict[str, Any], SourceReference, int]:
        overlay = self._resolve_environment()
        if callable(reference):
            reference = reference(clone(overlay))
        with self._config_lock:
            self._reference = reference
            self._has_reference = True
            self._load_generation += 1
            generation = self._load_generation
            self.set_adapter()
        return overlay, reference, generation

    def _pre_reload(self) -> Tuple[Dict[str, Any], SourceReference, int]:
        with self._config_lock:
            reference = self._require_reference()
            self._load_generation += 1
            generation = self._load_generation
        return self._resolve_environment(), reference, generation

    def _resolve_environment(self) -> Dict[str, Any]:
        try:
            return self._environment.resolve()
        except ConfigurationValidationError as e:
            self._logger.log(f"Environment validation failed: {e.fields}", LogEvent.ERROR)
            raise

    def _post_load(self, overlay: Dict[str, Any], raw: Dict[str, Any], event: LogEvent, generation: int) -> None:
        merged = {**raw, **overlay}
        try:
            validated = self._compiled.validate(merged)
        except ConfigurationValidationError as e:
            self._logger.log(f"Configuration validation failed: {e.fields}", LogEvent.ERROR)
            raise

        with self._config_lock:
            if generation < self._applied_generation:
                self._logger.log('Discarded configuration superseded by a newer load.', event)
                return
            self._applied_generation = generation
            previous = self._snapshot
            self._snapshot = validated
            if previous is not None:
                for field in changed_fields(previous, validated):
                    self._run_listeners(field, clone(validated[field]), clone(previous[field]))

        if previous is None:
            self.start_reload_interval()

        if event is LogEvent.RELOAD:
            self._logger.log('Reloaded configuration successfully.', LogEvent.RELOAD)
        else:
            self._logger.log('Loaded configuration successfully.', LogEvent.LOAD)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def get(self, field: str) -> Any:
        """Return a deep copy of the current value of ``field``."""
        with self._config_lock:
            snapshot = self._require_snapshot()
            self._require_field(field)
            value = clone(snapshot[field])

        self._logger.log(f"Retrieved configuration value for key: {field}", LogEvent.GET)
        return value

    def set(self, field: str, value: Any) -> None:
        """
        Store a deep copy of ``value`` and notify the field's listeners.

        Listeners always run on ``set``, even when the value is unchanged.
        """
        with self._config_lock:
            snapshot = self._require_snapshot()
            self._require_field(field)
            old_value = clone(snapshot[field])
            snapshot[field] = clone(value)

            self._logger.log(f"Set configuration value for key: {field}", LogEvent.SET)
            self._run_listeners(field, clone(value), old_value)

    def as_dict(self) -> Dict[str, Any]:
        """Deep copy of the whole current snapshot."""
        with self._config_lock:
            return clone(self._require_snapshot())

    def _require_snapshot(self) -> Dict[str, Any]:
        if self._snapshot is None:
            self._logger.log('Config not loaded.', LogEvent.ERROR)
            raise NotLoadedError()
        return self._snapshot

    def _require_field(self, field: str) -> None:
        if field not in self._compiled.fields:
            self._logger.log(f"Unknown configuration key: {field}", LogEvent.ERROR)
            raise KeyError(f"Unknown configuration key: {field}")

    def _require_reference(self) -> SourceReference:
        if not self._has_reference:
            self._logger.log('Config not loaded.', LogEvent.ERROR)
            raise NotLoadedError()
        return self._reference

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------
    def add_listener(self, field: str, listener: ListenerFunction) -> None:
        """Call ``listener(new_value, old_value)`` whenever ``field`` changes."""
        self._require_field(field)
        self._listeners.add(field, listener)
        self._logger.log(f"Registered listener for key: {field}", LogEvent.REGISTERED_LISTENER)

    def remove_listener(self, field: str, listener: ListenerFunction) -> bool:
        """Remove one registration of ``listener``."""
        return self._listeners.remove(field, listener)

    def _run_listeners(self, field: str, new_value: Any, old_value: Any) -> None:
        self._logger.log(f"Running listeners for key: {field}", LogEvent.RUN_LISTENERS)
        self._listeners.dispatch(field, new_value, old_value)

    # ------------------------------------------------------------------
    # Reloading
    # ------------------------------------------------------------------
    def start_reload_interval(self, interval_ms: Optional[float] = None) -> None:
        """
        Reload periodically from the last reference.

        Does nothing if a timer is already running, even when a different
        interval is requested, or when no interval is known.
        """
        with self._config_lock:
            if self._reload_timer is not None:
                return

            interval = interval_ms or self._reload_interval_ms
            if not interval:
                return

            timer = ReloadTimer(interval, self._reload_tick)
            self._reload_timer = timer
            timer.start()

        self._logger.log('Started reload interval.', LogEvent.START_RELOAD_INTERVAL)

    def stop_reload_interval(self) -> None:
        """Cancel future reload ticks; a tick already running completes."""
        with self._config_lock:
            timer = self._reload_timer
            self._reload_timer = None
        if timer is not None:
            timer.stop()

        self._logger.log('Stopped reload interval.', LogEvent.STOP_RELOAD_INTERVAL)

    def _reload_tick(self) -> None:
        try:
            self.reload_sync()
        except Exception as e:
            self._logger.log(f"Failed to reload configuration: {e}", LogEvent.ERROR)
            if self._on_reload_error is not None:
                self._on_reload_error(e)

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------
    def set_adapter(self, source: Optional[ConfigurationSource] = None) -> None:
        """
        Assign ``source`` explicitly, or pick one from the stored reference
        when none has been assigned yet.
        """
        if source is not None:
            self._assign_source(source)
        if self._source is not None:
            return

        selected = select_source(self._require_reference())
        if selected is not None:
            self._assign_source(selected)

    def _assign_source(self, source: ConfigurationSource) -> None:
        self._source = source
        source.logger = self._logger
        self._logger.log('Adapter set.', LogEvent.ADAPTER_SET)

    def _require_source(self) -> ConfigurationSource:
        if self._source is None:
            self._logger.log('Adapter not set.', LogEvent.ERROR)
            raise AdapterNotSetError()
        return self._source

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def close(self) -> None:
        """Stop background reloading."""
        if self._reload_timer is not None:
            self.stop_reload_interval()

    def __enter__(self) -> "SchemaConfiguration":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
