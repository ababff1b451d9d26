"""
JSON-file implementation of runtime properties.

The file holds the initial property values; decisions taken during the run
are kept in memory and written back by ``save``.
"""

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema

from versionflow.domain.exceptions import UserConfigurationError
from versionflow.infrastructure.persistence.memory import InMemoryRuntimeProperties
from versionflow.schemas import validate_runtime_properties

logger = logging.getLogger(__name__)

FILE_FORMAT_VERSION = "1.0"


class JsonFileRuntimeProperties(InMemoryRuntimeProperties):
    """
    Runtime properties loaded from (and saved to) a JSON file.

    A missing file is treated as empty. The content is validated against
    ``runtime-properties.schema.json``.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)
        super().__init__(self._load())

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            logger.debug("Runtime properties file %s not found, starting empty", self._path)
            return {}

        try:
            with open(self._path) as f:
                data: Any = json.load(f)
        except json.JSONDecodeError as e:
            raise UserConfigurationError(
                f"Runtime properties file {self._path} is not valid JSON: {e}"
            ) from e

        try:
            validate_runtime_properties(data)
        except jsonschema.ValidationError as e:
            raise UserConfigurationError(
                f"Invalid runtime properties file {self._path}: {e.message}"
            ) from e

        properties: dict[str, str] = data["properties"]
        logger.info("Loaded %d runtime properties from %s", len(properties), self._path)
        return properties

    def save(self) -> None:
        """Atomically write the merged properties using write-to-temp + rename."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "version": FILE_FORMAT_VERSION,
            "properties": dict(sorted(self.merged_properties().items())),
        }
        temp_path = self._path.with_suffix(".tmp")
        with open(temp_path, "w") as f:
            json.dump(data, f, indent=2)
        temp_path.replace(self._path)
        logger.debug("Saved runtime properties to %s", self._path)
