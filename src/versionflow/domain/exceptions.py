"""
Domain exceptions for versionflow.

Configuration and conflict errors stop processing of the current module and
are reported verbatim to the operator. Aborting a branch is not an error and
is represented by TaskStatus.ABORTED / SelectionResult.aborted instead.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from versionflow.domain.models import Capability, NodePath, Version


class VersionflowError(Exception):
    """Base class for all versionflow errors."""


class UserConfigurationError(VersionflowError):
    """
    Raised when the operator's configuration or input cannot be honored.

    Covers missing required properties or mappings, malformed specific
    version overrides and malformed revision suffixes.
    """

    def __init__(self, message: str, module: "NodePath | None" = None):
        """
        Args:
            message: Human-readable error message
            module: Module being processed, if known
        """
        super().__init__(message)
        self.module = module


class VersionConflictError(VersionflowError):
    """Raised when a newly computed version already exists."""

    def __init__(self, version: "Version", module: "NodePath | None" = None):
        """
        Args:
            version: The computed version that already exists
            module: Module in which it exists
        """
        super().__init__(f"New version {version} already exists for module {module}.")
        self.version = version
        self.module = module


class RevisionOverflowError(VersionflowError):
    """Raised when incrementing a revision would exceed its fixed width."""

    def __init__(self, latest: "Version", width: int):
        """
        Args:
            latest: Latest existing version whose revision is at the maximum
            width: Configured number of decimal positions
        """
        super().__init__(
            f"The revision of the latest static version {latest} is already the "
            f"maximum allowed by {width} decimal positions."
        )
        self.latest = latest
        self.width = width


class HotfixBaseMismatchError(UserConfigurationError):
    """
    Raised when an existing hotfix dynamic version was not created from the
    static version being hotfixed (wrong hotfix line).
    """

    def __init__(
        self,
        module: "NodePath",
        version: "Version",
        expected_base: "Version",
        actual_base: "Version | None",
    ):
        """
        Args:
            module: Module being hotfixed
            version: Existing dynamic version that was selected
            expected_base: Static version being hotfixed
            actual_base: Recorded base of the existing version (None if unknown)
        """
        if actual_base is None:
            detail = "its base version is unknown"
        else:
            detail = f"its base version is {actual_base}"
        super().__init__(
            f"Dynamic version {version} already exists in module {module} but "
            f"{detail}, not the current version {expected_base}.",
            module=module,
        )
        self.version = version
        self.expected_base = expected_base
        self.actual_base = actual_base


class ResolutionCycleError(VersionflowError):
    """Raised when capability resolution re-enters its own in-flight request."""

    def __init__(self, capability: "Capability", node: "NodePath"):
        super().__init__(
            f"Cycle detected when resolving capability {capability.value} "
            f"for node {node}."
        )
        self.capability = capability
        self.node = node


class CollaboratorError(VersionflowError):
    """
    Wraps a failure raised by an external collaborator (SCM, workspace,
    interaction). The original exception is available as ``__cause__``.
    """

    def __init__(self, collaborator: str, operation: str, cause: Exception):
        super().__init__(f"{collaborator}.{operation} failed: {cause}")
        self.collaborator = collaborator
        self.operation = operation
        self.cause = cause


class WorkspaceError(VersionflowError):
    """Raised when a workspace directory cannot be acquired, released or deleted."""
