"""Tests for domain models."""

import pytest

from versionflow.domain.exceptions import UserConfigurationError
from versionflow.domain.models import (
    AlwaysNeverYesNoResponse,
    Commit,
    ModuleVersion,
    NodePath,
    Reference,
    ReferencePath,
    SelectionResult,
    TaskOutcome,
    TaskStatus,
    Version,
    VersionKind,
)


class TestVersion:
    """Tests for the Version value type."""

    def test_parse_static(self) -> None:
        """S/ prefix parses to a static version."""
        version = Version.parse("S/1.2.3")
        assert version.kind is VersionKind.STATIC
        assert version.identifier == "1.2.3"
        assert version.is_static
        assert not version.is_dynamic

    def test_parse_dynamic(self) -> None:
        """D/ prefix parses to a dynamic version."""
        version = Version.parse("D/feature/login")
        assert version.kind is VersionKind.DYNAMIC
        assert version.identifier == "feature/login"

    def test_string_form_round_trips(self) -> None:
        """str() gives back the canonical form."""
        assert str(Version.parse("S/1.0")) == "S/1.0"
        assert str(Version.dynamic("master")) == "D/master"

    @pytest.mark.parametrize("text", ["1.0", "X/1.0", "S/", ""])
    def test_parse_invalid_raises(self, text: str) -> None:
        """Anything but S/<id> or D/<id> is a configuration error."""
        with pytest.raises(UserConfigurationError):
            Version.parse(text)

    def test_structural_equality_and_hash(self) -> None:
        """Equal kind and identifier means equal and same hash."""
        assert Version.static("1.0") == Version.parse("S/1.0")
        assert Version.static("1.0") != Version.dynamic("1.0")
        assert len({Version.static("1.0"), Version.parse("S/1.0")}) == 1

    def test_version_immutable(self) -> None:
        """Version should be immutable (frozen)."""
        version = Version.static("1.0")
        with pytest.raises(AttributeError):
            version.identifier = "2.0"  # type: ignore[misc]


class TestNodePath:
    """Tests for NodePath."""

    def test_parse_and_str(self) -> None:
        path = NodePath.parse("/app/core/")
        assert path.parts == ("app", "core")
        assert str(path) == "app/core"
        assert path.name == "core"

    def test_root(self) -> None:
        """The empty path is the root and has no parent."""
        root = NodePath()
        assert root.is_root
        assert root.parent is None
        assert root.name == ""

    def test_parent_and_child(self) -> None:
        path = NodePath.parse("app/core")
        assert path.parent == NodePath.parse("app")
        assert path.child("db") == NodePath.parse("app/core/db")

    def test_property_prefixes_least_specific_first(self) -> None:
        """Prefixes go from global to the node itself."""
        assert NodePath.parse("a/b/c").property_prefixes() == (
            "",
            "a.",
            "a.b.",
            "a.b.c.",
        )
        assert NodePath().property_prefixes() == ("",)


class TestReferencePath:
    """Tests for the mutable ReferencePath."""

    def test_push_pop_leaf(self) -> None:
        """Push grows the path, pop returns the leaf."""
        a = ModuleVersion(NodePath.parse("a"), Version.static("1"))
        b = ModuleVersion(NodePath.parse("b"), Version.static("2"))
        path = ReferencePath(a)
        path.push(b)

        assert len(path) == 2
        assert path.root == a
        assert path.leaf == b
        assert path.ancestors() == (a,)
        assert b in path

        assert path.pop() == b
        assert path.leaf == a
        assert b not in path

    def test_empty_path(self) -> None:
        path = ReferencePath()
        assert len(path) == 0
        assert path.leaf is None
        assert path.root is None

    def test_iteration_is_a_snapshot(self) -> None:
        """Iterating while pushing does not see the new element."""
        a = ModuleVersion(NodePath.parse("a"), Version.static("1"))
        path = ReferencePath(a)
        elements = iter(path)
        path.push(ModuleVersion(NodePath.parse("b"), Version.static("2")))
        assert list(elements) == [a]

    def test_str(self) -> None:
        path = ReferencePath(ModuleVersion(NodePath.parse("a"), Version.static("1")))
        path.push(ModuleVersion(NodePath.parse("b"), Version.dynamic("x")))
        assert str(path) == "a:S/1 -> b:D/x"


class TestCommit:
    """Tests for Commit."""

    def test_attributes_are_read_only(self) -> None:
        """Commit attributes cannot be modified after creation."""
        source = {"equivalent-static-version": "S/1.0"}
        commit = Commit(commit_id="c1", attributes=source)
        source["other"] = "x"

        assert "other" not in commit.attributes
        with pytest.raises(TypeError):
            commit.attributes["other"] = "x"  # type: ignore[index]


class TestReference:
    def test_module_reference(self) -> None:
        target = ModuleVersion(NodePath.parse("lib"), Version.static("1.0"))
        assert Reference(target=target).is_module
        assert not Reference(target=None, coordinate="org.acme:lib:1.0").is_module


class TestOutcomes:
    """Tests for SelectionResult and TaskOutcome."""

    def test_selection_abort(self) -> None:
        result = SelectionResult.abort()
        assert result.aborted
        assert result.version is None
        assert result.base is None

    def test_task_outcome_factories(self) -> None:
        """Factories set status, message and error."""
        assert TaskOutcome.completed().is_completed
        assert TaskOutcome.aborted("stop").status is TaskStatus.ABORTED

        error = UserConfigurationError("bad")
        failed = TaskOutcome.failed(error)
        assert failed.status is TaskStatus.FAILED
        assert failed.error is error
        assert failed.message == "bad"
        assert not failed.is_completed

    def test_always_never_yes_no(self) -> None:
        assert AlwaysNeverYesNoResponse.ALWAYS.is_yes
        assert AlwaysNeverYesNoResponse.YES.is_yes
        assert not AlwaysNeverYesNoResponse.NEVER.is_yes
        assert not AlwaysNeverYesNoResponse.NO.is_yes
