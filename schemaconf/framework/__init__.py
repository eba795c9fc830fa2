"""
Framework Layer - configuration lifecycle
"""

from .configuration import SchemaConfiguration, ConfigurationBuilder, ConfigField

__all__ = [
    "SchemaConfiguration",
    "ConfigurationBuilder",
    "ConfigField",
]
