"""
versionflow: version orchestration across a graph of source modules.

Switches a whole subtree of modules to a new development line, creates
consistent releases or applies a hotfix, deciding for each module which
version to switch to or create, and remembering the operator's decisions.

Example:
    from versionflow import (
        Capability, CapabilityRegistry, CapabilityResolver, ConsoleInteraction,
        ExecutionContext, JsonFileRuntimeProperties, ModuleVersion, NodePath,
        ReferencePath, Version,
    )

    properties = JsonFileRuntimeProperties("runtime-properties.json")
    context = ExecutionContext(
        properties=properties,
        interaction=ConsoleInteraction(),
        registry=CapabilityRegistry(
            defaults={Capability.SELECT_DYNAMIC_VERSION: "uniform"}
        ),
        scm_provider=my_scm_for_module,
    ).for_traversal()

    module = NodePath.parse("app/core")
    strategy = CapabilityResolver().resolve(
        context, Capability.SELECT_DYNAMIC_VERSION, module
    )
    result = strategy.select_dynamic_version(
        context, ModuleVersion(module, Version.parse("S/1.0.0")), ReferencePath()
    )
    properties.save()
"""

# Application layer (orchestration)
from versionflow.application.capability import CapabilityResolver
from versionflow.application.decisions import DecisionMemory
from versionflow.application.selection import (
    ContinuousReleaseStrategy,
    HotfixStrategy,
    PhaseStrategy,
    UniformStrategy,
)
from versionflow.application.traversal import (
    ModuleReentryAvoider,
    ReferencePathTraverser,
)
from versionflow.application.workspace import WorkspaceAccessGuard

# Domain classifier
from versionflow.domain.classifier import VersionClassifier

# Domain exceptions
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

# Domain interfaces (for type hints and custom implementations)
from versionflow.domain.interfaces import (
    InteractionInterface,
    ReferenceExtractorInterface,
    RuntimePropertiesInterface,
    ScmInterface,
    TaskInterface,
    WorkspaceInterface,
)

# Domain models (most commonly used)
from versionflow.domain.models import (
    AccessMode,
    Capability,
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
)

# Infrastructure (explicit import encouraged for dependency injection)
from versionflow.infrastructure.interaction import (
    ConsoleInteraction,
    ScriptedInteraction,
)
from versionflow.infrastructure.logging_setup import setup_logging
from versionflow.infrastructure.persistence import (
    InMemoryRuntimeProperties,
    JsonFileRuntimeProperties,
)
from versionflow.infrastructure.registry import CapabilityRegistry
from versionflow.infrastructure.workspace import FilesystemWorkspace

__version__ = "1.0.0"

__all__ = [
    # Version
    "__version__",
    # Domain models
    "Version",
    "VersionKind",
    "NodePath",
    "ModuleVersion",
    "Reference",
    "ReferencePath",
    "ReusePolicy",
    "Capability",
    "SelectionResult",
    "TraversalOrder",
    "TaskStatus",
    "TaskOutcome",
    "AccessMode",
    "CreateMode",
    "ExecutionContext",
    "VersionClassifier",
    # Domain interfaces
    "ScmInterface",
    "RuntimePropertiesInterface",
    "InteractionInterface",
    "ReferenceExtractorInterface",
    "WorkspaceInterface",
    "TaskInterface",
    # Domain exceptions
    "VersionflowError",
    "UserConfigurationError",
    "VersionConflictError",
    "RevisionOverflowError",
    "HotfixBaseMismatchError",
    "ResolutionCycleError",
    "CollaboratorError",
    "WorkspaceError",
    # Application layer
    "DecisionMemory",
    "UniformStrategy",
    "HotfixStrategy",
    "PhaseStrategy",
    "ContinuousReleaseStrategy",
    "CapabilityResolver",
    "ReferencePathTraverser",
    "ModuleReentryAvoider",
    "WorkspaceAccessGuard",
    # Infrastructure
    "InMemoryRuntimeProperties",
    "JsonFileRuntimeProperties",
    "ConsoleInteraction",
    "ScriptedInteraction",
    "CapabilityRegistry",
    "FilesystemWorkspace",
    "setup_logging",
]
