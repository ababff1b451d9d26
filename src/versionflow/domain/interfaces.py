"""
Domain interfaces (Ports) for versionflow.

These abstract base classes define the contracts of the external
collaborators consumed by the core (SCM, runtime properties, operator
interaction, reference extraction, workspace storage, capability registry)
and of the per-role capabilities implemented by the selection strategies.
They have no external dependencies.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from versionflow.domain.models import (
        AccessMode,
        BaseVersion,
        Capability,
        Commit,
        CreateMode,
        ExecutionContext,
        ModuleVersion,
        NodePath,
        Reference,
        ReferencePath,
        SelectionResult,
        TaskOutcome,
        TraversalOrder,
        Version,
    )


# =============================================================================
# EXTERNAL COLLABORATORS
# =============================================================================


class ScmInterface(ABC):
    """
    Port for the source control backend of one module.
    """

    @abstractmethod
    def is_module_exists(self) -> bool:
        """Whether the module exists in the SCM."""

    @abstractmethod
    def is_version_exists(self, version: "Version") -> bool:
        """Whether the version (branch or tag) exists."""

    @abstractmethod
    def get_default_version(self) -> "Version":
        """Version checked out by default (e.g. the main branch)."""

    @abstractmethod
    def get_base_version(self, version: "Version") -> "BaseVersion | None":
        """
        Version the given version was created from.

        Returns:
            The base version record, or None if unknown
        """

    @abstractmethod
    def get_commits(
        self, version: "Version", limit: int | None = None
    ) -> list["Commit"]:
        """
        History of a version, most recent first.

        Args:
            version: Version whose history is listed
            limit: Maximum number of commits (None for all)
        """

    @abstractmethod
    def get_static_versions(self) -> list["Version"]:
        """All static versions of the module, in no particular order."""

    @abstractmethod
    def checkout(self, version: "Version", path: Path) -> None:
        """Populate ``path`` with a working copy of ``version``."""


class RuntimePropertiesInterface(ABC):
    """
    Port for the decision memory (runtime properties).

    ``node`` None designates the global scope. Lookup for a node falls back to
    its ancestors and finally to the global scope.
    """

    @abstractmethod
    def get_property(self, node: "NodePath | None", name: str) -> str | None:
        """Return the most specific value of ``name`` visible from ``node``."""

    @abstractmethod
    def set_property(self, node: "NodePath | None", name: str, value: str | None) -> None:
        """Set (or with None, remove) ``name`` at the scope of ``node``."""


class InteractionInterface(ABC):
    """
    Port for operator interaction.
    """

    @abstractmethod
    def ask(self, prompt: str) -> str:
        """Ask a question and return the raw answer."""

    @abstractmethod
    def ask_with_default(self, prompt: str, default: str) -> str:
        """Ask a question; an empty answer yields ``default``."""

    @abstractmethod
    def inform(self, message: str) -> None:
        """Provide information to the operator."""


class ReferenceExtractorInterface(ABC):
    """
    Port for discovering a module's declared dependencies.
    """

    @abstractmethod
    def get_references(self, module_version: "ModuleVersion") -> list["Reference"]:
        """References of a module version, in declaration order."""


class WorkspaceInterface(ABC):
    """
    Port for working-directory storage.
    """

    @abstractmethod
    def exists(self, module_version: "ModuleVersion") -> bool:
        """Whether a working directory exists for the module version."""

    @abstractmethod
    def acquire(
        self,
        module_version: "ModuleVersion",
        create_mode: "CreateMode",
        access_mode: "AccessMode",
    ) -> Path:
        """
        Resolve (and reserve, unless peeking) a working directory.

        Raises:
            WorkspaceError: If the directory is missing (GET_EXISTING), already
                exists (CREATE_NEW) or is already reserved incompatibly
        """

    @abstractmethod
    def release(self, path: Path) -> None:
        """Release a reservation obtained with ``acquire``."""

    @abstractmethod
    def delete(self, module_version: "ModuleVersion") -> None:
        """Delete the working directory (must be reserved read-write)."""


class CapabilityRegistryInterface(ABC):
    """
    Port for the catalogue of capability implementations.
    """

    @abstractmethod
    def list_implementation_ids(
        self, capability: "Capability", node: "NodePath"
    ) -> list[str]:
        """Implementation ids available for ``capability`` on ``node``."""

    @abstractmethod
    def get_default_id(self, capability: "Capability", node: "NodePath") -> str | None:
        """Implementation used when nothing else is selected (may be None)."""

    @abstractmethod
    def instantiate(
        self, capability: "Capability", implementation_id: str | None, node: "NodePath"
    ) -> Any:
        """Create the implementation ``implementation_id`` of ``capability``."""


# =============================================================================
# CAPABILITIES (one port per role)
# =============================================================================


class SelectDynamicVersionInterface(ABC):
    """
    Selects the dynamic version a module should be switched to.
    """

    @abstractmethod
    def select_dynamic_version(
        self,
        context: "ExecutionContext",
        module_version: "ModuleVersion",
        reference_path: "ReferencePath",
    ) -> "SelectionResult":
        """
        Args:
            context: Execution context of the current traversal
            module_version: Module and its current version
            reference_path: Path from the traversal root to the module

        Returns:
            The selected dynamic version, with its base when it must be created
        """


class NewDynamicVersionInterface(ABC):
    """
    Determines the new dynamic version to create for a module.
    """

    @abstractmethod
    def new_dynamic_version(
        self, context: "ExecutionContext", module_version: "ModuleVersion"
    ) -> "SelectionResult":
        """Return the new dynamic version, with its base when it must be created."""


class NewStaticVersionInterface(ABC):
    """
    Determines the new static version to create from a dynamic version.
    """

    @abstractmethod
    def new_static_version(
        self, context: "ExecutionContext", module_version: "ModuleVersion"
    ) -> "SelectionResult":
        """Return the static version to create (or reuse) for the dynamic version."""


class SelectStaticVersionInterface(ABC):
    """
    Selects the static version to release a dynamic version as.
    """

    @abstractmethod
    def select_static_version(
        self, context: "ExecutionContext", module_version: "ModuleVersion"
    ) -> "SelectionResult":
        """Return the static version for the dynamic version."""


# =============================================================================
# TRAVERSAL
# =============================================================================


class TaskInterface(ABC):
    """
    Port for a task applied to each node of a reference-graph traversal.
    """

    @property
    @abstractmethod
    def traversal_order(self) -> "TraversalOrder":
        """Whether the task is applied before or after the node's references."""

    @property
    @abstractmethod
    def avoid_reentry(self) -> bool:
        """Whether a ModuleVersion already on the current path is skipped."""

    @abstractmethod
    def apply(
        self, context: "ExecutionContext", reference_path: "ReferencePath"
    ) -> "TaskOutcome":
        """
        Apply the task to ``reference_path.leaf``.

        Returns:
            COMPLETED to continue, ABORTED to stop descending on this branch
        """
