"""versionflow JSON Schema definitions and validation utilities.

Schemas:
    - runtime-properties.schema.json: Runtime properties file
      (``{"properties": {"NAME": "value", "a.b.NAME": "value"}}``)

Usage:
    from versionflow.schemas import validate_runtime_properties

    with open("runtime-properties.json") as f:
        data = json.load(f)
    validate_runtime_properties(data)  # Raises jsonschema.ValidationError if invalid
"""

from __future__ import annotations

import json
from importlib.resources import files
from typing import Any

import jsonschema


def _load_schema(name: str) -> dict[str, Any]:
    """Load a JSON schema from the schemas package.

    Args:
        name: Schema filename (e.g., 'runtime-properties.schema.json')

    Returns:
        Parsed JSON schema as a dictionary
    """
    schema_text = files("versionflow.schemas").joinpath(name).read_text()
    result: dict[str, Any] = json.loads(schema_text)
    return result


def get_runtime_properties_schema() -> dict[str, Any]:
    """Get the runtime-properties.json schema."""
    return _load_schema("runtime-properties.schema.json")


def validate_runtime_properties(data: Any) -> None:
    """Validate a runtime properties document against the schema.

    Args:
        data: Parsed runtime properties file

    Raises:
        jsonschema.ValidationError: If validation fails
    """
    jsonschema.validate(data, get_runtime_properties_schema())


__all__ = [
    "get_runtime_properties_schema",
    "validate_runtime_properties",
]
