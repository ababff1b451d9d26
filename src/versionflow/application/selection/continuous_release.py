"""
ContinuousRelease strategy: every build of a dynamic version is a release.

The dynamic version is mapped to a static version prefix by ordered
``regex:replacement`` rules, for example::

    CONTINUOUS_RELEASE_MAPPINGS=main,release
    CONTINUOUS_RELEASE_MAPPING.main=D/master:S/1.0
    CONTINUOUS_RELEASE_MAPPING.release=D/release-(\\d+\\.\\d+):S/$1

The regex must match the whole ``D/...`` string; ``$n`` (or ``\\n``) in the
replacement refers to captured groups. The next revision of the prefix is
then allocated, or with FORCE_REUSE_STATIC_VERSION the latest existing one
is returned as is, even if later commits exist on the dynamic version.
"""

import logging
import re

from versionflow.application.decisions import is_true
from versionflow.application.selection.support import (
    PROPERTY_SPECIFIC_STATIC_VERSION,
    PROPERTY_STATIC_VERSION_PREFIX,
    SelectionSupport,
)
from versionflow.domain.classifier import VersionClassifier
from versionflow.domain.exceptions import UserConfigurationError
from versionflow.domain.interfaces import SelectStaticVersionInterface
from versionflow.domain.models import (
    ExecutionContext,
    ModuleVersion,
    SelectionResult,
    Version,
    VersionKind,
)

logger = logging.getLogger(__name__)

PROPERTY_CONTINUOUS_RELEASE_MAPPINGS = "CONTINUOUS_RELEASE_MAPPINGS"
PROPERTY_PREFIX_CONTINUOUS_RELEASE_MAPPING = "CONTINUOUS_RELEASE_MAPPING."
PROPERTY_FORCE_REUSE_STATIC_VERSION = "FORCE_REUSE_STATIC_VERSION"

DEFAULT_INITIAL_REVISION = 1
DEFAULT_REVISION_DECIMAL_POSITION_COUNT = 5

_GROUP_REFERENCE = re.compile(r"\$(\d+)")


def parse_mapping(text: str) -> tuple[re.Pattern[str], str]:
    """
    Parse one ``regex:replacement`` mapping.

    The replacement is everything after the last ``:`` so that the regex may
    itself contain colons (e.g. non-capturing groups).
    """
    pattern, sep, replacement = text.rpartition(":")
    if not sep or not pattern or not replacement:
        raise UserConfigurationError(
            f"The mapping '{text}' is not composed of a regex and a replacement "
            f"separated by ':'."
        )
    try:
        compiled = re.compile(pattern)
    except re.error as e:
        raise UserConfigurationError(f"Invalid regex in mapping '{text}': {e}") from e
    return compiled, _GROUP_REFERENCE.sub(r"\\g<\1>", replacement)


class ContinuousReleaseStrategy(SelectStaticVersionInterface):
    """Maps dynamic versions to static version prefixes and allocates revisions."""

    def select_static_version(
        self, context: ExecutionContext, module_version: ModuleVersion
    ) -> SelectionResult:
        support = SelectionSupport(
            context,
            module_version,
            initial_revision=DEFAULT_INITIAL_REVISION,
            revision_width=DEFAULT_REVISION_DECIMAL_POSITION_COUNT,
        )
        support.validate_dynamic()

        specific = support.specific_version(
            PROPERTY_SPECIFIC_STATIC_VERSION, VersionKind.STATIC
        )
        if specific is not None:
            return SelectionResult(version=specific)

        equivalent = support.reuse_equivalent_static_version()
        if equivalent is not None:
            return SelectionResult(version=equivalent)

        prefix = support.specific_static_prefix()
        if prefix is None:
            prefix = self.map_to_prefix(support)

        classifier = VersionClassifier(support.get_property(PROPERTY_STATIC_VERSION_PREFIX))
        versions = classifier.sorted(support.scm.get_static_versions(), reverse=True)
        latest = support.latest_matching(prefix, versions)

        if is_true(support.get_property(PROPERTY_FORCE_REUSE_STATIC_VERSION)):
            logger.info("Reusing latest static version %s for %s", latest, module_version)
            return SelectionResult(version=latest)

        return SelectionResult(version=support.allocate_revision(prefix, latest))

    def map_to_prefix(self, support: SelectionSupport) -> Version:
        """Static version prefix of the first mapping matching the dynamic version."""
        dynamic = str(support.version)

        for key in support.require_property(PROPERTY_CONTINUOUS_RELEASE_MAPPINGS).split(","):
            key = key.strip()
            if not key:
                continue
            pattern, replacement = parse_mapping(
                support.require_property(PROPERTY_PREFIX_CONTINUOUS_RELEASE_MAPPING + key)
            )
            match = pattern.fullmatch(dynamic)
            logger.debug("Matching %s against %s: %s", dynamic, pattern.pattern, bool(match))
            if match is not None:
                return support.parse_version(
                    match.expand(replacement),
                    VersionKind.STATIC,
                    PROPERTY_PREFIX_CONTINUOUS_RELEASE_MAPPING + key,
                )

        raise UserConfigurationError(
            f"No static version prefix is mapped to dynamic version {dynamic} "
            f"of module {support.module}.",
            module=support.module,
        )
