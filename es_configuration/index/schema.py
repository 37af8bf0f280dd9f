"""
Index mapping configuration, keyed by index type and Elasticsearch version
"""

import json
import logging
from pathlib import Path
from typing import Callable, Optional

from ..errors import ConfigurationNotFoundError

logger = logging.getLogger(__name__)

# Bundled mappings live in data/<major>.x/<type>.json
DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def get_configuration_file(type: str, version: str, path: Optional[str] = None) -> Path:
    """
    Resolve the mapping file for an index type.

    Args:
        type: Index type (users, contacts, ...)
        version: Elasticsearch major version (e.g. "7")
        path: Directory overriding the bundled, versioned mappings
    """
    directory = Path(path) if path else DATA_DIR / f"{version}.x"
    return (directory / f"{type}.json").resolve()


class SchemaLoader:
    """
    Loads index configuration (settings + mappings) for a type.

    The Elasticsearch version is only asked for when a configuration is
    actually loaded.
    """

    def __init__(self, version_provider: Callable[[], str], path: Optional[str] = None):
        self._version_provider = version_provider
        self.path = path

    def load(self, type: str) -> dict:
        """
        Load the configuration body for an index type

        Raises:
            ConfigurationNotFoundError: no file for this type/version
        """
        version = self._version_provider()
        file = get_configuration_file(type, version, self.path)
        logger.debug("Loading %s index configuration from %s", type, file)

        try:
            with open(file, encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError as e:
            raise ConfigurationNotFoundError(type, version) from e
