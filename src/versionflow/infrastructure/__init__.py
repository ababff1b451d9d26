"""
Infrastructure layer for versionflow.

Contains adapters for external concerns (runtime properties, interaction,
registry, workspace storage, SCM).
"""

from versionflow.infrastructure.interaction import (
    ConsoleInteraction,
    ScriptedInteraction,
)
from versionflow.infrastructure.logging_setup import setup_logging
from versionflow.infrastructure.persistence import (
    InMemoryRuntimeProperties,
    JsonFileRuntimeProperties,
)
from versionflow.infrastructure.references import InMemoryReferenceExtractor
from versionflow.infrastructure.registry import CapabilityRegistry
from versionflow.infrastructure.scm import InMemoryScm
from versionflow.infrastructure.workspace import FilesystemWorkspace

__all__ = [
    # Persistence
    "InMemoryRuntimeProperties",
    "JsonFileRuntimeProperties",
    # Interaction
    "ConsoleInteraction",
    "ScriptedInteraction",
    # Registry
    "CapabilityRegistry",
    # Workspace
    "FilesystemWorkspace",
    # SCM and references
    "InMemoryScm",
    "InMemoryReferenceExtractor",
    # Logging
    "setup_logging",
]
