"""
Utility functions for common configuration patterns.
"""

import os
from typing import Mapping, Optional, Union

from .builder import ConfigurationBuilder
from .core import SchemaConfiguration
from .schema import SchemaFactory, SchemaMap


def load_configuration_from_file(
    schema: Union[SchemaMap, SchemaFactory],
    file_path: Union[str, "os.PathLike[str]"],
    reload_interval_ms: Optional[float] = None
) -> SchemaConfiguration:
    """
    Load configuration from a JSON or YAML file with environment variable overrides.

    Args:
        schema: Schema map or factory
        file_path: Path to a ``.json``, ``.yaml`` or ``.yml`` file
        reload_interval_ms: If given, reload the file at this interval

    Returns:
        Loaded SchemaConfiguration instance
    """
    builder = ConfigurationBuilder().with_schema(schema)
    if reload_interval_ms:
        builder.with_reload_interval(reload_interval_ms)
    config = builder.build()
    config.load_sync(file_path)
    return config


def load_configuration_from_object(
    schema: Union[SchemaMap, SchemaFactory],
    data: Mapping
) -> SchemaConfiguration:
    """
    Load configuration from an in-memory mapping with environment variable overrides.

    Returns:
        Loaded SchemaConfiguration instance
    """
    config = ConfigurationBuilder().with_schema(schema).build()
    config.load_sync(data)
    return config


def create_configuration_builder() -> ConfigurationBuilder:
    """
    Create a new configuration builder.

    Returns:
        ConfigurationBuilder instance
    """
    return ConfigurationBuilder()
