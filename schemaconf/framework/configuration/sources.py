"""
Configuration sources for loading raw configuration data.

A source turns a reference (a mapping or a file path) into a plain
dictionary. Validation happens later, in the configuration instance.
"""

import asyncio
import json
import os
import yaml
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ...infrastructure.exceptions import AdapterMismatchError, ParseError, ReadError
from ...infrastructure.observability.logging import ConfigEventLogger, LogEvent

SourceReference = Union[Mapping, str, "os.PathLike[str]"]


class ConfigurationSource(ABC):
    """Abstract base class for configuration sources."""

    def __init__(self, logger: Optional[ConfigEventLogger] = None):
        # Replaced by the owning configuration's logger once assigned to it.
        self.logger = logger or ConfigEventLogger()

    @abstractmethod
    async def load(self, reference: SourceReference) -> Dict[str, Any]:
        """Load configuration data from the source."""
        pass

    @abstractmethod
    def load_sync(self, reference: SourceReference) -> Dict[str, Any]:
        """Load configuration data from the source, blocking."""
        pass

    def _mismatch(self, reference: Any) -> AdapterMismatchError:
        self.logger.log('Adapter cannot handle this input type.', LogEvent.ERROR)
        return AdapterMismatchError(
            reference_type=type(reference).__name__,
            source_type=type(self).__name__
        )


class ObjectConfigurationSource(ConfigurationSource):
    """In-memory mapping source; the mapping is passed through as a dict."""

    async def load(self, reference: SourceReference) -> Dict[str, Any]:
        return self.load_sync(reference)

    def load_sync(self, reference: SourceReference) -> Dict[str, Any]:
        if not isinstance(reference, Mapping):
            raise self._mismatch(reference)
        return dict(reference)


class FileConfigurationSource(ConfigurationSource):
    """
    Base class for file sources: read text, then decode it.

    Any failure to read the file (missing, permissions, I/O, bad encoding) is
    reported as ReadError; any decoder failure as ParseError.
    """

    format_name = "file"

    def __init__(self, encoding: str = "utf-8", logger: Optional[ConfigEventLogger] = None):
        super().__init__(logger)
        self.encoding = encoding

    @abstractmethod
    def parse_content(self, content: str) -> Any:
        """Decode file content into Python data."""
        pass

    async def load(self, reference: SourceReference) -> Dict[str, Any]:
        path = self._check_reference(reference)
        content = await asyncio.to_thread(self._read_file, path)
        return self._parse(content, path)

    def load_sync(self, reference: SourceReference) -> Dict[str, Any]:
        path = self._check_reference(reference)
        return self._parse(self._read_file(path), path)

    def _check_reference(self, reference: SourceReference) -> Path:
        if isinstance(reference, Mapping) or not isinstance(reference, (str, os.PathLike)):
            raise self._mismatch(reference)
        return Path(reference)

    def _read_file(self, path: Path) -> str:
        try:
            with open(path, 'r', encoding=self.encoding) as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            self.logger.log(f"Could not read file at {path}.", LogEvent.ERROR)
            raise ReadError(
                f"Could not read file at {path}.",
                config_path=str(path),
                cause=e
            ) from e

    def _parse(self, content: str, path: Path) -> Dict[str, Any]:
        try:
            data = self.parse_content(content)
        except Exception as e:
            self.logger.log(f"Could not parse {self.format_name}.", LogEvent.ERROR)
            raise ParseError(
                f"Could not parse {self.format_name} file.",
                config_path=str(path),
                cause=e
            ) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            self.logger.log(f"Could not parse {self.format_name}.", LogEvent.ERROR)
            raise ParseError(
                f"Could not parse {self.format_name} file: top level must be a mapping, "
                f"got {type(data).__name__}.",
                config_path=str(path)
            )
        return data


class JSONConfigurationSource(FileConfigurationSource):
    """JSON file configuration source."""

    format_name = "JSON"

    def parse_content(self, content: str) -> Any:
        return json.loads(content)


class YAMLConfigurationSource(FileConfigurationSource):
    """YAML file configuration source."""

    format_name = "YAML"

    def parse_content(self, content: str) -> Any:
        return yaml.safe_load(content)


def select_source(reference: Any) -> Optional[ConfigurationSource]:
    """
    Pick a source for ``reference``: by suffix for paths, the object source
    for mappings, nothing otherwise.
    """
    if isinstance(reference, Mapping):
        return ObjectConfigurationSource()
    if isinstance(reference, (str, os.PathLike)):
        name = os.fspath(reference)
        if name.endswith('.json'):
            return JSONConfigurationSource()
        if name.endswith(('.yaml', '.yml')):
            return YAMLConfigurationSource()
    return None
