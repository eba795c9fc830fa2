"""
schemaconf - typed configuration validated against a declarative schema

Loads values from a mapping or a JSON/YAML file, lets environment variables
override individual fields, validates the result with pydantic, and keeps it
current with change listeners and periodic reloading.
"""

__version__ = "1.0.0"
__author__ = "schemaconf Development Team"

from .framework.configuration import (
    SchemaConfiguration,
    ConfigurationBuilder,
    ConfigField,
    ConfigurationSource,
    ObjectConfigurationSource,
    FileConfigurationSource,
    JSONConfigurationSource,
    YAMLConfigurationSource,
    ConfigurationValidationError,
    load_configuration_from_file,
    load_configuration_from_object,
    create_configuration_builder,
)
from .infrastructure.exceptions import (
    SchemaConfException,
    ConfigurationError,
    NotLoadedError,
    AdapterError,
    AdapterNotSetError,
    AdapterMismatchError,
    ReadError,
    ParseError,
)
from .infrastructure.observability import LogLevel, LogEvent

__all__ = [
    "SchemaConfiguration",
    "ConfigurationBuilder",
    "ConfigField",
    "ConfigurationSource",
    "ObjectConfigurationSource",
    "FileConfigurationSource",
    "JSONConfigurationSource",
    "YAMLConfigurationSource",
    "ConfigurationValidationError",
    "load_configuration_from_file",
    "load_configuration_from_object",
    "create_configuration_builder",
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
]
