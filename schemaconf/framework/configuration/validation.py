"""
Configuration validation errors.
"""

from typing import Dict, Any, List
from pydantic import ValidationError

from ...infrastructure.exceptions import ConfigurationError


class ConfigurationValidationError(ConfigurationError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, validation_errors: List[Dict[str, Any]]):
        super().__init__(
            message,
            "CONFIGURATION_VALIDATION_ERROR",
            validation_errors=validation_errors
        )
        self.validation_errors = validation_errors

    @property
    def fields(self) -> List[str]:
        """Names of the offending fields, in report order, without duplicates."""
        names: List[str] = []
        for error in self.validation_errors:
            loc = error.get('loc') or []
            if loc and loc[0] not in names:
                names.append(loc[0])
        return names

    def get_detailed_message(self) -> str:
        """Get a detailed error message with all validation errors."""
        lines = [self.message]
        lines.append("Validation errors:")

        for error in self.validation_errors:
            location = " -> ".join(str(loc) for loc in error.get('loc', []))
            msg = error.get('msg', 'Unknown error')
            lines.append(f"- {location}: {msg}")

        return "\n".join(lines)

    def __str__(self) -> str:
        return self.get_detailed_message()


def field_errors(field_name: str, error: ValidationError) -> List[Dict[str, Any]]:
    """Flatten a pydantic error for one field, prefixing each location with the field name."""
    return [
        {
            'loc': [field_name] + list(item['loc']),
            'msg': item['msg'],
            'type': item['type'],
        }
        for item in error.errors()
    ]


def missing_field_error(field_name: str) -> Dict[str, Any]:
    return {'loc': [field_name], 'msg': 'Field required', 'type': 'missing'}
