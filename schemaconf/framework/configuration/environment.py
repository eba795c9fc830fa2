"""
Environment variable overlay.
"""

import os
from typing import Any, Dict, Mapping, Optional

from .schema import CompiledSchema


class EnvironmentResolver:
    """
    Reads the environment variables bound to schema fields.

    Only variables that are set and non-empty end up in the overlay; the
    overlay is validated against the schema's environment validator, so a
    mis-typed variable fails the same way a mis-typed file value does.
    """

    def __init__(self, schema: CompiledSchema, environ: Optional[Mapping[str, str]] = None):
        self._schema = schema
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        # os.environ is looked up per call so patch.dict and late exports apply.
        return self._environ if self._environ is not None else os.environ

    def read(self) -> Dict[str, str]:
        """Collect raw string values keyed by field name."""
        environ = self.environ
        values: Dict[str, str] = {}
        for field_name, variable in self._schema.env_bindings.items():
            value = environ.get(variable)
            if value:
                values[field_name] = value
        return values

    def resolve(self) -> Dict[str, Any]:
        """
        Read and validate the overlay.

        Raises:
            ConfigurationValidationError: If a bound variable fails its field's validation
        """
        return self._schema.validate_env(self.read())
