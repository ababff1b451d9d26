"""
Domain models for versionflow.

Pure value types describing versions, graph nodes and the outcome of
operations on them. All value models are immutable (frozen dataclasses) so
they can be shared freely between threads and used as dictionary keys.
"""

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING

from versionflow.domain.exceptions import UserConfigurationError

if TYPE_CHECKING:
    from versionflow.domain.interfaces import (
        CapabilityRegistryInterface,
        InteractionInterface,
        ReferenceExtractorInterface,
        RuntimePropertiesInterface,
        ScmInterface,
        WorkspaceInterface,
    )

# =============================================================================
# VERSION MODEL
# =============================================================================


class VersionKind(Enum):
    """Kind of a version. The value is the prefix used in the string form."""

    DYNAMIC = "D"  # Ongoing line of development (e.g. a branch)
    STATIC = "S"  # Immutable released snapshot (e.g. a tag)


@dataclass(frozen=True)
class Version:
    """
    A version of a module: ``{kind, identifier}``.

    The canonical string form is ``"D/<identifier>"`` or ``"S/<identifier>"``.
    Equality and hashing are structural.
    """

    kind: VersionKind
    identifier: str

    @classmethod
    def parse(cls, text: str) -> "Version":
        """
        Parse the canonical string form of a version.

        Args:
            text: ``"D/<identifier>"`` or ``"S/<identifier>"``

        Returns:
            The parsed Version

        Raises:
            UserConfigurationError: If the text is not in canonical form
        """
        text = text.strip()
        prefix, sep, identifier = text.partition("/")
        if not sep or not identifier:
            raise UserConfigurationError(
                f"Invalid version '{text}': expected 'S/<version>' or 'D/<version>'"
            )
        try:
            kind = VersionKind(prefix.upper())
        except ValueError:
            raise UserConfigurationError(
                f"Invalid version '{text}': unknown version type '{prefix}'"
            ) from None
        return cls(kind=kind, identifier=identifier)

    @classmethod
    def static(cls, identifier: str) -> "Version":
        return cls(kind=VersionKind.STATIC, identifier=identifier)

    @classmethod
    def dynamic(cls, identifier: str) -> "Version":
        return cls(kind=VersionKind.DYNAMIC, identifier=identifier)

    @property
    def is_static(self) -> bool:
        return self.kind is VersionKind.STATIC

    @property
    def is_dynamic(self) -> bool:
        return self.kind is VersionKind.DYNAMIC

    def __str__(self) -> str:
        return f"{self.kind.value}/{self.identifier}"


# =============================================================================
# GRAPH NODES
# =============================================================================


@dataclass(frozen=True)
class NodePath:
    """
    Slash-separated path of a classification node or module.

    The root node has no parts. A NodePath uniquely addresses a node and the
    runtime properties defined for it.
    """

    parts: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> "NodePath":
        return cls(parts=tuple(part for part in text.strip("/").split("/") if part))

    @property
    def name(self) -> str:
        """Last path component (empty for the root)."""
        return self.parts[-1] if self.parts else ""

    @property
    def is_root(self) -> bool:
        return not self.parts

    @property
    def parent(self) -> "NodePath | None":
        if self.is_root:
            return None
        return NodePath(parts=self.parts[:-1])

    def child(self, name: str) -> "NodePath":
        return NodePath(parts=(*self.parts, name))

    def property_prefixes(self) -> tuple[str, ...]:
        """
        Property-name prefixes from least to most specific.

        For ``a/b/c`` this is ``("", "a.", "a.b.", "a.b.c.")``.
        """
        return tuple(
            "".join(f"{part}." for part in self.parts[:depth])
            for depth in range(len(self.parts) + 1)
        )

    def __str__(self) -> str:
        return "/".join(self.parts)


@dataclass(frozen=True)
class ModuleVersion:
    """A module paired with a specific version (one node of the reference graph)."""

    module: NodePath
    version: Version

    def __str__(self) -> str:
        return f"{self.module}:{self.version}"


@dataclass(frozen=True)
class Reference:
    """
    Edge from a module to one of its declared dependencies.

    ``target`` is set when the dependency resolves to a known module; otherwise
    only the external ``coordinate`` (e.g. an artifact id) is known.
    """

    target: ModuleVersion | None
    coordinate: str = ""
    locator: str = ""  # Opaque to the core, e.g. the manifest element

    @property
    def is_module(self) -> bool:
        return self.target is not None


class ReferencePath:
    """
    Ordered ModuleVersions from the traversal root to the current node.

    Mutable: the traversal pushes before descending into a reference and pops
    on return. Not shared between threads.
    """

    def __init__(self, root: ModuleVersion | None = None):
        self._elements: list[ModuleVersion] = []
        if root is not None:
            self._elements.append(root)

    def push(self, module_version: ModuleVersion) -> None:
        self._elements.append(module_version)

    def pop(self) -> ModuleVersion:
        return self._elements.pop()

    @property
    def leaf(self) -> ModuleVersion | None:
        return self._elements[-1] if self._elements else None

    @property
    def root(self) -> ModuleVersion | None:
        return self._elements[0] if self._elements else None

    def ancestors(self) -> tuple[ModuleVersion, ...]:
        """All elements except the leaf."""
        return tuple(self._elements[:-1])

    def __len__(self) -> int:
        return len(self._elements)

    def __contains__(self, module_version: object) -> bool:
        return module_version in self._elements

    def __iter__(self) -> Iterator[ModuleVersion]:
        return iter(tuple(self._elements))

    def __str__(self) -> str:
        return " -> ".join(str(element) for element in self._elements)


# =============================================================================
# SCM RECORDS
# =============================================================================

# Commit attribute naming the static version equivalent to the commit
COMMIT_ATTR_EQUIVALENT_STATIC_VERSION = "equivalent-static-version"


@dataclass(frozen=True)
class Commit:
    """One change record of a version's history, most recent first in listings."""

    commit_id: str
    message: str = ""
    attributes: Mapping[str, str] = field(default_factory=dict)
    static_versions: tuple[Version, ...] = ()  # Static versions created on this commit

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))


@dataclass(frozen=True)
class BaseVersion:
    """Version a dynamic or static version was created from."""

    version: Version
    base: Version
    target: Version | None = None  # Version the base is expected to be merged into


# =============================================================================
# DECISION MEMORY
# =============================================================================


class ReusePolicy(Enum):
    """Whether a past operator decision is replayed automatically."""

    ALWAYS = "ALWAYS"
    NEVER = "NEVER"
    ASK = "ASK"


class YesNoResponse(Enum):
    YES = "YES"
    NO = "NO"


class YesAlwaysNoResponse(Enum):
    YES = "YES"
    ALWAYS = "ALWAYS"
    NO = "NO"


class AlwaysNeverYesNoResponse(Enum):
    """Answer to a yes/no question that may also be remembered."""

    ALWAYS = "ALWAYS"  # Yes, and do not ask again
    NEVER = "NEVER"  # No, and do not ask again
    YES = "YES"  # Yes, ask again next time
    NO = "NO"  # No, ask again next time

    @property
    def is_yes(self) -> bool:
        return self in (AlwaysNeverYesNoResponse.ALWAYS, AlwaysNeverYesNoResponse.YES)


# =============================================================================
# CAPABILITIES AND SELECTION
# =============================================================================


class Capability(Enum):
    """Named roles that may have several interchangeable implementations."""

    SELECT_DYNAMIC_VERSION = "select_dynamic_version"
    NEW_DYNAMIC_VERSION = "new_dynamic_version"
    NEW_STATIC_VERSION = "new_static_version"
    SELECT_STATIC_VERSION = "select_static_version"


@dataclass(frozen=True)
class SelectionResult:
    """
    Outcome of a version selection or creation.

    ``base`` is only set when the selected version does not exist yet and must
    be created from that base. ``aborted`` means the operator chose to stop
    processing the current branch.
    """

    version: Version | None
    base: Version | None = None
    aborted: bool = False

    @classmethod
    def abort(cls) -> "SelectionResult":
        return cls(version=None, aborted=True)


# =============================================================================
# TRAVERSAL
# =============================================================================


class TraversalOrder(Enum):
    PARENT_FIRST = "parent_first"  # Apply the task, then descend into references
    CHILDREN_FIRST = "children_first"  # Descend into references, then apply the task


class TaskStatus(Enum):
    """Traversal task outcome."""

    COMPLETED = "completed"
    ABORTED = "aborted"  # Stop descending on this branch, not an error
    FAILED = "failed"  # Fatal error, traversal stops


@dataclass(frozen=True)
class TaskOutcome:
    """Immutable result of applying a task (or a whole traversal)."""

    status: TaskStatus
    message: str = ""
    error: Exception | None = None
    module_version: ModuleVersion | None = None

    @classmethod
    def completed(cls, message: str = "") -> "TaskOutcome":
        return cls(status=TaskStatus.COMPLETED, message=message)

    @classmethod
    def aborted(
        cls, message: str = "", module_version: ModuleVersion | None = None
    ) -> "TaskOutcome":
        return cls(
            status=TaskStatus.ABORTED, message=message, module_version=module_version
        )

    @classmethod
    def failed(
        cls, error: Exception, module_version: ModuleVersion | None = None
    ) -> "TaskOutcome":
        return cls(
            status=TaskStatus.FAILED,
            message=str(error),
            error=error,
            module_version=module_version,
        )

    @property
    def is_completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED


# =============================================================================
# WORKSPACE
# =============================================================================


class AccessMode(Enum):
    PEEK = "peek"  # Resolve an existing location without reserving it
    READ = "read"  # Shared reservation
    READ_WRITE = "read_write"  # Exclusive reservation


class CreateMode(Enum):
    GET_EXISTING = "get_existing"
    CREATE_NEW = "create_new"
    GET_OR_CREATE = "get_or_create"


@dataclass(frozen=True)
class WorkspaceReservation:
    """An active reservation of a module's working directory."""

    path: str
    module_version: ModuleVersion
    mode: AccessMode


# =============================================================================
# EXECUTION CONTEXT
# =============================================================================


@dataclass(frozen=True)
class ExecutionContext:
    """
    Collaborators and per-traversal state passed down the call graph.

    ``in_flight`` holds the (capability, node) pairs currently being resolved.
    It belongs to one traversal on one thread: use ``for_traversal`` to obtain
    a context with a fresh set before starting a traversal.
    """

    properties: "RuntimePropertiesInterface"
    interaction: "InteractionInterface"
    registry: "CapabilityRegistryInterface"
    scm_provider: Callable[[NodePath], "ScmInterface"]
    reference_extractor: "ReferenceExtractorInterface | None" = None
    workspace: "WorkspaceInterface | None" = None
    in_flight: set[tuple[Capability, NodePath]] = field(
        default_factory=set, compare=False
    )

    def scm(self, node: NodePath) -> "ScmInterface":
        return self.scm_provider(node)

    def for_traversal(self) -> "ExecutionContext":
        """Copy of this context with an empty in-flight resolution set."""
        return replace(self, in_flight=set())
