"""
Domain layer for versionflow.

Contains the version model, the version classifier, the error taxonomy and
the ports to external collaborators. No dependencies on other layers.
"""

from versionflow.domain.classifier import VersionClassifier
from versionflow.domain.exceptions import (
    CollaboratorError,
    HotfixBaseMismatchError,
    ResolutionCycleError,
    RevisionOverflowError,
    UserConfigurationError,
    VersionConflictError,
    VersionflowError,
    WorkspaceError,
)
from versionflow.domain.interfaces import (
    CapabilityRegistryInterface,
    InteractionInterface,
    NewDynamicVersionInterface,
    NewStaticVersionInterface,
    ReferenceExtractorInterface,
    RuntimePropertiesInterface,
    ScmInterface,
    SelectDynamicVersionInterface,
    SelectStaticVersionInterface,
    TaskInterface,
    WorkspaceInterface,
)
from versionflow.domain.models import (
    AccessMode,
    AlwaysNeverYesNoResponse,
    BaseVersion,
    Capability,
    Commit,
    CreateMode,
    ExecutionContext,
    ModuleVersion,
    NodePath,
    Reference,
    ReferencePath,
    ReusePolicy,
    SelectionResult,
    TaskOutcome,
    TaskStatus,
    TraversalOrder,
    Version,
    VersionKind,
    WorkspaceReservation,
    YesAlwaysNoResponse,
    YesNoResponse,
)

__all__ = [
    # Models
    "Version",
    "VersionKind",
    "NodePath",
    "ModuleVersion",
    "Reference",
    "ReferencePath",
    "Commit",
    "BaseVersion",
    "ReusePolicy",
    "YesNoResponse",
    "YesAlwaysNoResponse",
    "AlwaysNeverYesNoResponse",
    "Capability",
    "SelectionResult",
    "TraversalOrder",
    "TaskStatus",
    "TaskOutcome",
    "AccessMode",
    "CreateMode",
    "WorkspaceReservation",
    "ExecutionContext",
    # Classifier
    "VersionClassifier",
    # Interfaces
    "ScmInterface",
    "RuntimePropertiesInterface",
    "InteractionInterface",
    "ReferenceExtractorInterface",
    "WorkspaceInterface",
    "CapabilityRegistryInterface",
    "SelectDynamicVersionInterface",
    "NewDynamicVersionInterface",
    "NewStaticVersionInterface",
    "SelectStaticVersionInterface",
    "TaskInterface",
    # Exceptions
    "VersionflowError",
    "UserConfigurationError",
    "VersionConflictError",
    "RevisionOverflowError",
    "HotfixBaseMismatchError",
    "ResolutionCycleError",
    "CollaboratorError",
    "WorkspaceError",
]
