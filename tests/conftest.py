"""
Shared fixtures for the schemaconf test suite.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from schemaconf.framework.configuration import ConfigField, SchemaConfiguration
from tests.fixtures.helpers import LogRecorder

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def schema():
    return {
        'port': ConfigField(int, env='PORT'),
        'host': ConfigField(str, env='HOST'),
    }


@pytest.fixture(autouse=True)
def clean_env():
    """Keep variables bound by the test schemas out of the process environment."""
    with patch.dict(os.environ, clear=False):
        for name in ('PORT', 'HOST', 'APP_ENV', 'TAGS'):
            os.environ.pop(name, None)
        yield


@pytest.fixture
def log_recorder() -> LogRecorder:
    return LogRecorder()


@pytest.fixture
def config(schema):
    configuration = SchemaConfiguration(schema=schema)
    yield configuration
    configuration.close()
