"""Tests for WorkspaceAccessGuard."""

from pathlib import Path

import pytest

from versionflow.application.workspace import WorkspaceAccessGuard
from versionflow.domain.exceptions import CollaboratorError, WorkspaceError
from versionflow.domain.interfaces import WorkspaceInterface
from versionflow.domain.models import AccessMode, CreateMode, ModuleVersion, NodePath, Version
from versionflow.infrastructure.workspace import FilesystemWorkspace


class RecordingWorkspace(WorkspaceInterface):
    """Delegates to a FilesystemWorkspace and records the calls made."""

    def __init__(self, root: Path, fail_on: str | None = None):
        self.inner = FilesystemWorkspace(root)
        self.calls: list[str] = []
        self._fail_on = fail_on

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name == self._fail_on:
            raise OSError(f"{name} failed")

    def exists(self, module_version: ModuleVersion) -> bool:
        self._record("exists")
        return self.inner.exists(module_version)

    def acquire(
        self,
        module_version: ModuleVersion,
        create_mode: CreateMode,
        access_mode: AccessMode,
    ) -> Path:
        self._record(f"acquire:{access_mode.value}")
        return self.inner.acquire(module_version, create_mode, access_mode)

    def release(self, path: Path) -> None:
        self._record("release")
        self.inner.release(path)

    def delete(self, module_version: ModuleVersion) -> None:
        self._record("delete")
        self.inner.delete(module_version)


@pytest.fixture
def workspace(tmp_path: Path) -> RecordingWorkspace:
    return RecordingWorkspace(tmp_path / "workspace")


@pytest.fixture
def guard(workspace: RecordingWorkspace) -> WorkspaceAccessGuard:
    return WorkspaceAccessGuard(workspace)


@pytest.fixture
def core() -> ModuleVersion:
    return ModuleVersion(NodePath.parse("app/core"), Version.dynamic("master"))


class TestReserve:
    def test_release_after_use(
        self,
        guard: WorkspaceAccessGuard,
        workspace: RecordingWorkspace,
        core: ModuleVersion,
    ) -> None:
        with guard.reserve(core, CreateMode.GET_OR_CREATE) as path:
            assert path.is_dir()
            assert workspace.inner.reservations()[0].mode is AccessMode.READ_WRITE

        assert workspace.calls == ["exists", "acquire:read_write", "release"]
        assert workspace.inner.reservations() == []

    def test_release_when_work_fails(
        self,
        guard: WorkspaceAccessGuard,
        workspace: RecordingWorkspace,
        core: ModuleVersion,
    ) -> None:
        with pytest.raises(RuntimeError):
            with guard.reserve(core, CreateMode.GET_OR_CREATE):
                raise RuntimeError("build failed")

        assert workspace.calls[-1] == "release"
        assert workspace.inner.reservations() == []

    def test_new_directory_is_populated(
        self,
        guard: WorkspaceAccessGuard,
        core: ModuleVersion,
    ) -> None:
        def populate(path: Path) -> None:
            (path / "pom.xml").write_text("<project/>")

        with guard.reserve(core, CreateMode.CREATE_NEW, populate) as path:
            assert (path / "pom.xml").exists()

    def test_existing_directory_is_not_populated(
        self,
        guard: WorkspaceAccessGuard,
        core: ModuleVersion,
    ) -> None:
        with guard.reserve(core, CreateMode.GET_OR_CREATE):
            pass

        populated: list[Path] = []
        with guard.reserve(core, CreateMode.GET_OR_CREATE, populated.append):
            pass

        assert populated == []

    def test_failed_populate_deletes_without_release(
        self,
        guard: WorkspaceAccessGuard,
        workspace: RecordingWorkspace,
        core: ModuleVersion,
    ) -> None:
        created: list[Path] = []

        def populate(path: Path) -> None:
            created.append(path)
            raise RuntimeError("checkout failed")

        with pytest.raises(RuntimeError, match="checkout failed"):
            with guard.reserve(core, CreateMode.CREATE_NEW, populate):
                pytest.fail("body must not run")

        assert workspace.calls == ["exists", "acquire:read_write", "delete"]
        assert not created[0].exists()
        assert not workspace.inner.exists(core)
        assert workspace.inner.reservations() == []

    def test_second_reservation_is_refused(
        self,
        guard: WorkspaceAccessGuard,
        core: ModuleVersion,
    ) -> None:
        with guard.reserve(core, CreateMode.GET_OR_CREATE):
            with pytest.raises(WorkspaceError, match="already reserved"):
                with guard.reserve(core):
                    pass

    def test_missing_directory(
        self,
        guard: WorkspaceAccessGuard,
        core: ModuleVersion,
    ) -> None:
        with pytest.raises(WorkspaceError, match="No workspace directory"):
            with guard.reserve(core):
                pass

    def test_foreign_failure_is_wrapped(self, tmp_path: Path, core: ModuleVersion) -> None:
        workspace = RecordingWorkspace(tmp_path, fail_on="acquire:read_write")
        guard = WorkspaceAccessGuard(workspace)

        with pytest.raises(CollaboratorError) as exc_info:
            with guard.reserve(core, CreateMode.GET_OR_CREATE):
                pass

        assert exc_info.value.operation == "acquire"
        assert isinstance(exc_info.value.__cause__, OSError)


class TestPeek:
    def test_peek_does_not_reserve(
        self,
        guard: WorkspaceAccessGuard,
        workspace: RecordingWorkspace,
        core: ModuleVersion,
    ) -> None:
        with guard.reserve(core, CreateMode.GET_OR_CREATE) as reserved:
            assert guard.peek(core) == reserved

        assert "acquire:peek" in workspace.calls
        assert workspace.inner.reservations() == []

    def test_peek_missing_directory(
        self,
        guard: WorkspaceAccessGuard,
        core: ModuleVersion,
    ) -> None:
        with pytest.raises(WorkspaceError):
            guard.peek(core)
