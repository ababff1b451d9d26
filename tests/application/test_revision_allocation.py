"""Tests for revision allocation of new static versions."""

import pytest

from versionflow.application.selection import SelectionSupport
from versionflow.domain.exceptions import (
    RevisionOverflowError,
    UserConfigurationError,
    VersionConflictError,
)
from versionflow.domain.models import ExecutionContext, ModuleVersion, NodePath, Version
from versionflow.infrastructure.persistence.memory import InMemoryRuntimeProperties


def S(identifier: str) -> Version:
    return Version.static(identifier)


@pytest.fixture
def support(context: ExecutionContext, master: ModuleVersion) -> SelectionSupport:
    return SelectionSupport(context, master, initial_revision=1, revision_width=2)


class TestAllocateRevision:
    def test_first_revision_uses_initial(self, support: SelectionSupport) -> None:
        assert support.allocate_revision(S("2024-01-01"), None) == S("2024-01-01.01")

    def test_next_revision(self, support: SelectionSupport) -> None:
        assert support.allocate_revision(S("2024-01-01"), S("2024-01-01.01")) == S(
            "2024-01-01.02"
        )

    def test_last_revision_that_fits(self, support: SelectionSupport) -> None:
        assert support.allocate_revision(S("2.0"), S("2.0.98")) == S("2.0.99")

    def test_overflow(self, support: SelectionSupport) -> None:
        """99 is the maximum for two decimal positions."""
        with pytest.raises(RevisionOverflowError) as exc_info:
            support.allocate_revision(S("2024-01-01"), S("2024-01-01.99"))
        assert exc_info.value.width == 2
        assert exc_info.value.latest == S("2024-01-01.99")

    def test_unpadded_width_never_overflows(
        self,
        support: SelectionSupport,
        properties: InMemoryRuntimeProperties,
    ) -> None:
        properties.set_property(None, "REVISION_DECIMAL_POSITION_COUNT", "0")
        assert support.allocate_revision(S("3.0"), S("3.0.9")) == S("3.0.10")
        assert support.allocate_revision(S("3.0"), S("3.0.999")) == S("3.0.1000")

    @pytest.mark.parametrize("latest", ["2024-01-01.rc1", "2024-01-01.1.2", "2024-01-01."])
    def test_malformed_suffix(self, support: SelectionSupport, latest: str) -> None:
        with pytest.raises(UserConfigurationError, match="decimal revision"):
            support.allocate_revision(S("2024-01-01"), S(latest))

    def test_conflict_with_existing_version(self, support: SelectionSupport) -> None:
        """S/1.0.01 already exists in the fixture repository."""
        with pytest.raises(VersionConflictError) as exc_info:
            support.allocate_revision(S("1.0"), S("1.0.00"))
        assert exc_info.value.version == S("1.0.01")

    def test_properties_override_defaults(
        self,
        support: SelectionSupport,
        properties: InMemoryRuntimeProperties,
    ) -> None:
        properties.set_property(None, "REVISION_DECIMAL_POSITION_COUNT", "3")
        properties.set_property(None, "INITIAL_REVISION", "5")
        assert support.allocate_revision(S("2.0"), None) == S("2.0.005")

    def test_node_scoped_property(
        self,
        support: SelectionSupport,
        properties: InMemoryRuntimeProperties,
    ) -> None:
        """A property on another node does not apply."""
        properties.set_property(NodePath.parse("app/core"), "INITIAL_REVISION", "7")
        properties.set_property(NodePath.parse("app/web"), "INITIAL_REVISION", "9")
        assert support.allocate_revision(S("2.0"), None) == S("2.0.07")

    def test_initial_revision_must_fit_width(
        self,
        support: SelectionSupport,
        properties: InMemoryRuntimeProperties,
    ) -> None:
        properties.set_property(None, "INITIAL_REVISION", "100")
        with pytest.raises(UserConfigurationError, match="2 decimal positions"):
            support.allocate_revision(S("2.0"), None)

        properties.set_property(None, "INITIAL_REVISION", "99")
        assert support.allocate_revision(S("2.0"), None) == S("2.0.99")

    def test_unpadded_initial_revision_is_unbounded(
        self,
        support: SelectionSupport,
        properties: InMemoryRuntimeProperties,
    ) -> None:
        properties.set_property(None, "REVISION_DECIMAL_POSITION_COUNT", "0")
        properties.set_property(None, "INITIAL_REVISION", "100")
        assert support.allocate_revision(S("2.0"), None) == S("2.0.100")

    @pytest.mark.parametrize(
        "name, value",
        [("REVISION_DECIMAL_POSITION_COUNT", "-1"), ("INITIAL_REVISION", "-1")],
    )
    def test_negative_property(
        self,
        support: SelectionSupport,
        properties: InMemoryRuntimeProperties,
        name: str,
        value: str,
    ) -> None:
        properties.set_property(None, name, value)
        with pytest.raises(UserConfigurationError, match="must not be negative") as exc_info:
            support.allocate_revision(S("2.0"), S("2.0.01"))
        assert exc_info.value.module == NodePath.parse("app/core")

    def test_non_integer_property(
        self,
        support: SelectionSupport,
        properties: InMemoryRuntimeProperties,
    ) -> None:
        properties.set_property(None, "INITIAL_REVISION", "one")
        with pytest.raises(UserConfigurationError, match="integer"):
            support.allocate_revision(S("2.0"), None)


class TestLatestMatching:
    def test_first_match_wins(self) -> None:
        versions = [S("1.0.03"), S("1.0.02")]
        assert SelectionSupport.latest_matching(S("1.0"), versions) == S("1.0.03")

    def test_prefix_must_be_followed_by_dot(self) -> None:
        """1.00.05 and 1.0 itself do not belong to prefix 1.0."""
        versions = [S("1.00.05"), S("1.0"), S("1.0-rc.1"), S("1.0.01")]
        assert SelectionSupport.latest_matching(S("1.0"), versions) == S("1.0.01")

    def test_no_match(self) -> None:
        assert SelectionSupport.latest_matching(S("9.0"), [S("1.0.01")]) is None


class TestStaticVersionsInHistory:
    def test_most_recent_first(self, support: SelectionSupport) -> None:
        assert support.static_versions_in_history(Version.dynamic("master")) == [
            S("1.0.01"),
            S("1.0.00"),
        ]
