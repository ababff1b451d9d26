"""
Application layer for versionflow.

Contains the decision memory, the version selection strategies and the
orchestration services (capability resolution, traversal, workspace access).
"""

from versionflow.application.capability import CapabilityResolver
from versionflow.application.collaborators import (
    CheckedInteraction,
    CheckedScm,
    call_collaborator,
)
from versionflow.application.decisions import DecisionMemory
from versionflow.application.selection import (
    ContinuousReleaseStrategy,
    HotfixStrategy,
    PhaseStrategy,
    SelectionSupport,
    UniformStrategy,
)
from versionflow.application.traversal import (
    ModuleReentryAvoider,
    ReferencePathTraverser,
)
from versionflow.application.workspace import WorkspaceAccessGuard

__all__ = [
    "CapabilityResolver",
    "CheckedInteraction",
    "CheckedScm",
    "ContinuousReleaseStrategy",
    "DecisionMemory",
    "HotfixStrategy",
    "ModuleReentryAvoider",
    "PhaseStrategy",
    "ReferencePathTraverser",
    "SelectionSupport",
    "UniformStrategy",
    "WorkspaceAccessGuard",
    "call_collaborator",
]
