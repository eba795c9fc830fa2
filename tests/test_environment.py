"""
Tests for the environment variable overlay.
"""

import os
from unittest.mock import patch

import pytest

from schemaconf.framework.configuration import (
    CompiledSchema, ConfigField, ConfigurationValidationError, EnvironmentResolver
)


@pytest.fixture
def compiled():
    return CompiledSchema.compile({
        'port': ConfigField(int, env='PORT'),
        'host': ConfigField(str, env='HOST'),
        'debug': bool,
    })


class TestEnvironmentResolver:
    """Test reading and validating bound environment variables."""

    def test_reads_bound_variables(self, compiled):
        with patch.dict(os.environ, {'PORT': '8080', 'HOST': 'remotehost', 'DEBUG': 'true'}):
            resolver = EnvironmentResolver(compiled)

            assert resolver.read() == {'port': '8080', 'host': 'remotehost'}
            assert resolver.resolve() == {'port': 8080, 'host': 'remotehost'}

    def test_unset_variables_are_omitted(self, compiled):
        with patch.dict(os.environ, {'PORT': '8080'}):
            assert EnvironmentResolver(compiled).resolve() == {'port': 8080}

    def test_empty_variables_are_omitted(self, compiled):
        with patch.dict(os.environ, {'PORT': '', 'HOST': ''}):
            assert EnvironmentResolver(compiled).resolve() == {}

    def test_mistyped_variable_fails_validation(self, compiled):
        """Test a bad variable is reported, not dropped."""
        with patch.dict(os.environ, {'PORT': 'not-a-number', 'HOST': 'ok'}):
            with pytest.raises(ConfigurationValidationError) as exc_info:
                EnvironmentResolver(compiled).resolve()

        assert exc_info.value.fields == ['port']

    def test_explicit_environ_mapping(self, compiled):
        resolver = EnvironmentResolver(compiled, environ={'HOST': 'from-mapping'})

        assert resolver.environ == {'HOST': 'from-mapping'}
        assert resolver.resolve() == {'host': 'from-mapping'}

    def test_process_environment_is_read_on_each_call(self, compiled):
        resolver = EnvironmentResolver(compiled)
        assert resolver.resolve() == {}

        with patch.dict(os.environ, {'HOST': 'late'}):
            assert resolver.resolve() == {'host': 'late'}
