"""
Shared selection protocol.

The four strategies do not inherit from a common base; each composes a
SelectionSupport for the module being processed and calls the steps it
needs, in this order:

1. specific override (a node-scoped property naming the exact version)
2. equivalence reuse (a static version already made from the dynamic tip)
3. prefix / base determination (override, strategy rule, memoized prompt)
4. revision allocation (new static versions only)
"""

import logging
import re

from versionflow.application.collaborators import CheckedScm
from versionflow.application.decisions import DecisionMemory
from versionflow.domain.exceptions import (
    RevisionOverflowError,
    UserConfigurationError,
    VersionConflictError,
)
from versionflow.domain.models import (
    COMMIT_ATTR_EQUIVALENT_STATIC_VERSION,
    ExecutionContext,
    ModuleVersion,
    ReusePolicy,
    Version,
    VersionKind,
)

logger = logging.getLogger(__name__)

# Runtime properties shared by the strategies
PROPERTY_SPECIFIC_DYNAMIC_VERSION = "SPECIFIC_DYNAMIC_VERSION"
PROPERTY_SPECIFIC_STATIC_VERSION = "SPECIFIC_STATIC_VERSION"
PROPERTY_SPECIFIC_STATIC_VERSION_PREFIX = "SPECIFIC_STATIC_VERSION_PREFIX"
PROPERTY_INITIAL_REVISION = "INITIAL_REVISION"
PROPERTY_REVISION_DECIMAL_POSITION_COUNT = "REVISION_DECIMAL_POSITION_COUNT"
PROPERTY_STATIC_VERSION_PREFIX = "STATIC_VERSION_PREFIX"

# Decision keys (see DecisionMemory.resolve)
KEY_DYNAMIC_VERSION = "DYNAMIC_VERSION"
KEY_EXISTING_EQUIVALENT_STATIC_VERSION = "EXISTING_EQUIVALENT_STATIC_VERSION"

_REVISION_SUFFIX = re.compile(r"\.(\d+)")


class SelectionSupport:
    """
    Per-module helper implementing the shared selection steps.

    Args:
        context: Execution context of the current traversal
        module_version: Module being processed and its current version
        initial_revision: Default first revision for a new prefix
        revision_width: Default zero-padding width (0 for none)
    """

    def __init__(
        self,
        context: ExecutionContext,
        module_version: ModuleVersion,
        initial_revision: int = 1,
        revision_width: int = 2,
    ):
        self.context = context
        self.module_version = module_version
        self.module = module_version.module
        self.version = module_version.version
        self.memory = DecisionMemory(context.properties, context.interaction)
        self.scm = CheckedScm(context.scm(self.module), name=f"scm[{self.module}]")
        self._initial_revision = initial_revision
        self._revision_width = revision_width

    # -------------------------------------------------------------------------
    # Properties and interaction
    # -------------------------------------------------------------------------

    def get_property(self, name: str) -> str | None:
        return self.context.properties.get_property(self.module, name)

    def require_property(self, name: str) -> str:
        value = self.get_property(name)
        if value is None:
            raise UserConfigurationError(
                f"The runtime property {name} must be defined for module {self.module}.",
                module=self.module,
            )
        return value

    def get_int_property(self, name: str, default: int) -> int:
        value = self.get_property(name)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            raise UserConfigurationError(
                f"The runtime property {name} of module {self.module} must be an "
                f"integer, got '{value}'.",
                module=self.module,
            ) from None

    def inform(self, message: str) -> None:
        self.memory.interaction.inform(message)

    def parse_version(self, text: str, kind: VersionKind | None, source: str) -> Version:
        """Parse a configured version, checking its kind."""
        version = Version.parse(text)
        if kind is not None and version.kind is not kind:
            raise UserConfigurationError(
                f"Version {version} from {source} must be {kind.name.lower()} "
                f"(module {self.module}).",
                module=self.module,
            )
        return version

    def validate_dynamic(self) -> None:
        if not self.version.is_dynamic:
            raise UserConfigurationError(
                f"Version {self.version} of module {self.module} is not dynamic.",
                module=self.module,
            )

    # -------------------------------------------------------------------------
    # Step 1: specific override
    # -------------------------------------------------------------------------

    def specific_version(self, property_name: str, kind: VersionKind) -> Version | None:
        """Version named by a node-scoped override property, if any."""
        value = self.get_property(property_name)
        if value is None:
            return None

        version = self.parse_version(value, kind, property_name)
        self.inform(
            f"Version {version} is specified for module version {self.module_version}."
        )
        logger.info("%s=%s used as is for %s", property_name, version, self.module)
        return version

    # -------------------------------------------------------------------------
    # Step 2: equivalence reuse
    # -------------------------------------------------------------------------

    def find_equivalent_static_version(self, dynamic: Version) -> Version | None:
        """
        Static version already representing the tip of ``dynamic``.

        The most recent commit's equivalent-static-version attribute wins;
        otherwise the first static version created on that commit.
        """
        commits = self.scm.get_commits(dynamic, limit=1)
        if not commits:
            return None

        commit = commits[0]
        marker = commit.attributes.get(COMMIT_ATTR_EQUIVALENT_STATIC_VERSION)
        if marker is not None:
            return self.parse_version(
                marker, VersionKind.STATIC, f"commit {commit.commit_id}"
            )
        if commit.static_versions:
            return commit.static_versions[0]
        return None

    def reuse_equivalent_static_version(self) -> Version | None:
        """Existing equivalent static version, if found and accepted."""
        policy = self.memory.get_policy(
            self.module, f"CAN_REUSE_{KEY_EXISTING_EQUIVALENT_STATIC_VERSION}"
        )
        if policy is ReusePolicy.NEVER:
            return None

        equivalent = self.find_equivalent_static_version(self.version)
        if equivalent is None:
            return None

        accepted = self.memory.decide(
            self.module,
            KEY_EXISTING_EQUIVALENT_STATIC_VERSION,
            question=(
                f"Static version {equivalent} already exists and is equivalent to "
                f"{self.module_version}. Do you want to reuse it*"
            ),
            reuse_prompt=(
                "Do you want to automatically reuse existing equivalent static "
                "versions for all subsequent modules*"
            ),
            automatic_message=(
                f"Existing equivalent static version {equivalent} is automatically "
                f"reused for {self.module_version}."
            ),
        )
        return equivalent if accepted else None

    # -------------------------------------------------------------------------
    # Step 3: prefix / base determination
    # -------------------------------------------------------------------------

    def specific_static_prefix(self) -> Version | None:
        value = self.get_property(PROPERTY_SPECIFIC_STATIC_VERSION_PREFIX)
        if value is None:
            return None

        prefix = self.parse_version(
            value, VersionKind.STATIC, PROPERTY_SPECIFIC_STATIC_VERSION_PREFIX
        )
        self.inform(
            f"Static version prefix {prefix} is specified for {self.module_version}."
        )
        return prefix

    def reuse_version(
        self,
        key: str,
        kind: VersionKind | None,
        prompt: str,
        reuse_prompt: str,
        reused_message: str,
        default: Version | None = None,
        must_exist: bool = False,
    ) -> Version:
        """
        Memoized version decision (``DecisionMemory.resolve`` on versions).

        The remembered value, when present, is the default of the prompt;
        ``default`` is used otherwise.
        """
        scm = self.scm if must_exist else None

        def derive(remembered: str | None) -> str:
            suggested = default
            if remembered is not None:
                suggested = self.parse_version(remembered, kind, f"REUSE_{key}")
            return str(self.memory.ask_version(prompt, kind, scm, suggested))

        value = self.memory.resolve(
            self.module,
            key,
            None,
            derive,
            reuse_prompt=reuse_prompt,
            reused_message=reused_message,
        )
        return self.parse_version(value, kind, f"REUSE_{key}")

    def reuse_dynamic_version(self, prompt: str) -> Version:
        """Target dynamic version through the DYNAMIC_VERSION memo."""
        selected = self.reuse_version(
            KEY_DYNAMIC_VERSION,
            VersionKind.DYNAMIC,
            prompt=prompt,
            reuse_prompt=(
                "Do you want to automatically reuse dynamic version {value} for all "
                "subsequent modules*"
            ),
            reused_message=(
                f"Dynamic version {{value}} is automatically reused for "
                f"{self.module_version}."
            ),
        )
        if selected == self.version:
            self.inform(
                f"The selected dynamic version {selected} is the same as the current "
                f"version of module {self.module}."
            )
        return selected

    # -------------------------------------------------------------------------
    # Step 4: revision allocation
    # -------------------------------------------------------------------------

    def static_versions_in_history(self, dynamic: Version) -> list[Version]:
        """Static versions created along the history of ``dynamic``, most recent first."""
        versions: list[Version] = []
        for commit in self.scm.get_commits(dynamic):
            versions.extend(commit.static_versions)
        return versions

    @staticmethod
    def latest_matching(prefix: Version, versions: list[Version]) -> Version | None:
        """First version (most recent first) made of ``prefix`` and a revision."""
        start = f"{prefix.identifier}."
        for version in versions:
            if version.is_static and version.identifier.startswith(start):
                return version
        return None

    def allocate_revision(self, prefix: Version, latest: Version | None) -> Version:
        """
        Next static version ``<prefix>.<revision>``.

        Raises:
            UserConfigurationError: If the width is negative, the initial
                revision is negative or does not fit the width, or the latest
                version's suffix is not ``.<decimal revision>``
            RevisionOverflowError: If the next revision does not fit the width
            VersionConflictError: If the new version already exists
        """
        width = self.get_int_property(
            PROPERTY_REVISION_DECIMAL_POSITION_COUNT, self._revision_width
        )
        initial = self.get_int_property(PROPERTY_INITIAL_REVISION, self._initial_revision)

        if width < 0:
            raise UserConfigurationError(
                f"The runtime property {PROPERTY_REVISION_DECIMAL_POSITION_COUNT} of "
                f"module {self.module} must not be negative, got {width}.",
                module=self.module,
            )
        if initial < 0:
            raise UserConfigurationError(
                f"The initial revision of module {self.module} must not be negative, "
                f"got {initial}.",
                module=self.module,
            )
        if width != 0 and initial >= 10**width:
            raise UserConfigurationError(
                f"The initial revision {initial} of module {self.module} does not fit "
                f"in {width} decimal positions.",
                module=self.module,
            )

        if latest is None:
            revision = initial
        else:
            suffix = latest.identifier[len(prefix.identifier) :]
            match = _REVISION_SUFFIX.fullmatch(suffix)
            if match is None:
                raise UserConfigurationError(
                    f"The suffix '{suffix}' of the latest static version {latest} of "
                    f"module {self.module} is not in the format '.<decimal revision>'.",
                    module=self.module,
                )
            revision = int(match.group(1))
            if width != 0 and revision >= 10**width - 1:
                raise RevisionOverflowError(latest, width)
            revision += 1

        formatted = str(revision) if width == 0 else f"{revision:0{width}d}"
        new_version = Version.static(f"{prefix.identifier}.{formatted}")

        if self.scm.is_version_exists(new_version):
            raise VersionConflictError(new_version, self.module)

        logger.debug("Allocated %s for %s (latest %s)", new_version, self.module, latest)
        return new_version
