"""
Persistence adapters for runtime properties.
"""

from versionflow.infrastructure.persistence.filesystem import JsonFileRuntimeProperties
from versionflow.infrastructure.persistence.memory import InMemoryRuntimeProperties

__all__ = [
    "InMemoryRuntimeProperties",
    "JsonFileRuntimeProperties",
]
