"""
Schema declaration and compilation.

A schema maps field names to :class:`ConfigField` entries (or bare type
annotations). Compiling it yields one aggregate validator for the whole
configuration and one for the environment overlay, where only fields bound to
an environment variable take part and every one of them is optional.
"""

import copy
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Union

from pydantic import TypeAdapter, ValidationError

from .validation import ConfigurationValidationError, field_errors, missing_field_error


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


@dataclass(frozen=True)
class ConfigField:
    """
    Declaration of a single configuration field.

    Args:
        annotation: Any type pydantic can validate, e.g. ``int``,
            ``list[str]`` or ``Annotated[int, Field(gt=0)]``
        env: Name of the environment variable overriding this field
        default: Value used when neither source nor environment supply one
        description: Free text, for documentation only
    """
    annotation: Any
    env: Optional[str] = None
    default: Any = UNSET
    description: Optional[str] = None

    @property
    def has_default(self) -> bool:
        return self.default is not UNSET


SchemaMap = Mapping[str, Union[ConfigField, Any]]
SchemaFactory = Callable[[type], SchemaMap]


def normalize_schema(schema: Union[SchemaMap, SchemaFactory]) -> Dict[str, ConfigField]:
    """Resolve a schema factory and wrap bare annotations in ConfigField."""
    if callable(schema) and not isinstance(schema, Mapping):
        schema = schema(ConfigField)
    if not isinstance(schema, Mapping):
        raise TypeError(f"Schema must be a mapping of field names, got {type(schema).__name__}")

    fields: Dict[str, ConfigField] = {}
    for name, entry in schema.items():
        if not isinstance(name, str):
            raise TypeError(f"Schema field names must be strings, got {name!r}")
        fields[name] = entry if isinstance(entry, ConfigField) else ConfigField(entry)
    return fields


class AggregateValidator:
    """
    Validates a mapping field by field and reports every failure at once.

    Keys that are not part of the schema are dropped. With ``optional=True``
    absent fields are skipped instead of reported.
    """

    def __init__(self, fields: Mapping[str, ConfigField], optional: bool = False):
        self._fields = dict(fields)
        self._optional = optional
        self._adapters = {name: TypeAdapter(field.annotation) for name, field in self._fields.items()}

    @property
    def field_names(self) -> list:
        return list(self._fields)

    @property
    def optional(self) -> bool:
        return self._optional

    def validate(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Validate ``data`` against every field.

        Returns:
            A new dictionary with one validated value per present field

        Raises:
            ConfigurationValidationError: If any field is missing or invalid
        """
        if not isinstance(data, Mapping):
            raise ConfigurationValidationError(
                "Configuration validation failed",
                [{'loc': [], 'msg': 'Input should be a valid dictionary', 'type': 'dict_type'}]
            )

        result: Dict[str, Any] = {}
        errors = []

        for name, adapter in self._adapters.items():
            field = self._fields[name]
            if name in data:
                raw = data[name]
            elif self._optional:
                continue
            elif field.has_default:
                raw = copy.deepcopy(field.default)
            else:
                errors.append(missing_field_error(name))
                continue

            try:
                result[name] = adapter.validate_python(raw)
            except ValidationError as e:
                errors.extend(field_errors(name, e))

        if errors:
            raise ConfigurationValidationError("Configuration validation failed", errors)

        return result


class CompiledSchema:
    """Read-only result of compiling a schema map; built once per configuration."""

    def __init__(self, fields: Mapping[str, ConfigField]):
        self._fields = MappingProxyType(dict(fields))
        self.validator = AggregateValidator(self._fields)
        self.env_validator = AggregateValidator(
            {name: field for name, field in self._fields.items() if field.env},
            optional=True
        )

    @classmethod
    def compile(cls, schema: Union[SchemaMap, SchemaFactory]) -> "CompiledSchema":
        return cls(normalize_schema(schema))

    @property
    def fields(self) -> Mapping[str, ConfigField]:
        return self._fields

    @property
    def env_bindings(self) -> Dict[str, str]:
        """Field name to environment variable name, for env-bound fields only."""
        return {name: field.env for name, field in self._fields.items() if field.env}

    def validate(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        return self.validator.validate(data)

    def validate_env(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        return self.env_validator.validate(data)
