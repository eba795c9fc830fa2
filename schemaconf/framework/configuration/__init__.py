"""
Configuration Management System

Schema-driven configuration with mapping, JSON and YAML sources, environment
variable overrides, per-field change listeners and periodic reloading.
"""

from .schema import (
    ConfigField,
    CompiledSchema,
    AggregateValidator,
    normalize_schema,
    UNSET
)

from .sources import (
    ConfigurationSource,
    ObjectConfigurationSource,
    FileConfigurationSource,
    JSONConfigurationSource,
    YAMLConfigurationSource,
    select_source
)

from .validation import ConfigurationValidationError

from .environment import EnvironmentResolver

from .listeners import ListenerRegistry

from .changes import changed_fields

from .reload import ReloadTimer

from .core import SchemaConfiguration

from .builder import ConfigurationBuilder

from .utils import (
    load_configuration_from_file,
    load_configuration_from_object,
    create_configuration_builder
)

__all__ = [
    # Schema
    'ConfigField',
    'CompiledSchema',
    'AggregateValidator',
    'normalize_schema',
    'UNSET',

    # Sources
    'ConfigurationSource',
    'ObjectConfigurationSource',
    'FileConfigurationSource',
    'JSONConfigurationSource',
    'YAMLConfigurationSource',
    'select_source',

    # Validation
    'ConfigurationValidationError',

    # Engine parts
    'EnvironmentResolver',
    'ListenerRegistry',
    'changed_fields',
    'ReloadTimer',

    # Core
    'SchemaConfiguration',

    # Builder
    'ConfigurationBuilder',

    # Utilities
    'load_configuration_from_file',
    'load_configuration_from_object',
    'create_configuration_builder'
]
