"""
Filesystem implementation of the workspace.

Each module version gets a working directory under the workspace root, named
after the module (suffixed on collision). The mapping is persisted in
``workspace.json`` so that directories are found again by later runs.

Reservations are in-process only: they guarantee exclusivity between the
threads of one process, not between processes.
"""

import json
import logging
import shutil
import threading
from pathlib import Path
from typing import Any

from versionflow.domain.exceptions import WorkspaceError
from versionflow.domain.interfaces import WorkspaceInterface
from versionflow.domain.models import (
    AccessMode,
    CreateMode,
    ModuleVersion,
    WorkspaceReservation,
)

logger = logging.getLogger(__name__)

INDEX_FILE_NAME = "workspace.json"


class FilesystemWorkspace(WorkspaceInterface):
    """
    Working directories under a root directory with a reservation table.

    A directory may be reserved READ_WRITE by one holder, or READ by any
    number of holders, never both. PEEK resolves without reserving.
    """

    def __init__(self, root: str | Path):
        self._root = Path(root)
        self._index_path = self._root / INDEX_FILE_NAME
        self._lock = threading.Lock()
        self._writers: dict[Path, ModuleVersion] = {}
        self._readers: dict[Path, int] = {}
        self._read_owners: dict[Path, ModuleVersion] = {}
        self._directories: dict[str, str] = self._load_or_create_index()

    @property
    def root(self) -> Path:
        return self._root

    def _load_or_create_index(self) -> dict[str, str]:
        """Load existing index or create an empty one."""
        self._root.mkdir(parents=True, exist_ok=True)

        if self._index_path.exists():
            with open(self._index_path) as f:
                data: dict[str, Any] = json.load(f)
            directories: dict[str, str] = data.get("directories", {})
            return directories

        return {}

    def _update_index_atomic(self) -> None:
        """Atomically update workspace.json using write-to-temp + rename."""
        temp_path = self._index_path.with_suffix(".tmp")
        with open(temp_path, "w") as f:
            json.dump({"version": "1.0", "directories": self._directories}, f, indent=2)
        temp_path.replace(self._index_path)

    def _existing_path(self, module_version: ModuleVersion) -> Path | None:
        name = self._directories.get(str(module_version))
        if name is None:
            return None
        path = self._root / name
        return path if path.is_dir() else None

    def _allocate_path(self, module_version: ModuleVersion) -> Path:
        base_name = module_version.module.name or "root"
        used = set(self._directories.values())
        name = base_name
        suffix = 2
        while name in used or (self._root / name).exists():
            name = f"{base_name}-{suffix}"
            suffix += 1

        path = self._root / name
        path.mkdir()
        self._directories[str(module_version)] = name
        self._update_index_atomic()
        logger.info("Created workspace directory %s for %s", path, module_version)
        return path

    def exists(self, module_version: ModuleVersion) -> bool:
        with self._lock:
            return self._existing_path(module_version) is not None

    def acquire(
        self,
        module_version: ModuleVersion,
        create_mode: CreateMode,
        access_mode: AccessMode,
    ) -> Path:
        with self._lock:
            path = self._existing_path(module_version)

            if path is None:
                if create_mode is CreateMode.GET_EXISTING:
                    raise WorkspaceError(
                        f"No workspace directory exists for {module_version}."
                    )
                if access_mode is AccessMode.PEEK:
                    raise WorkspaceError(
                        f"Cannot create a workspace directory for {module_version} "
                        f"when peeking."
                    )
                path = self._allocate_path(module_version)
            elif create_mode is CreateMode.CREATE_NEW:
                raise WorkspaceError(
                    f"A workspace directory already exists for {module_version}: {path}"
                )

            if access_mode is AccessMode.PEEK:
                return path

            if path in self._writers or (
                access_mode is AccessMode.READ_WRITE and self._readers.get(path)
            ):
                raise WorkspaceError(
                    f"The workspace directory {path} of {module_version} is already "
                    f"reserved."
                )

            if access_mode is AccessMode.READ_WRITE:
                self._writers[path] = module_version
            else:
                self._readers[path] = self._readers.get(path, 0) + 1
                self._read_owners[path] = module_version

            logger.debug("Reserved %s (%s) for %s", path, access_mode.value, module_version)
            return path

    def release(self, path: Path) -> None:
        path = Path(path)
        with self._lock:
            if path in self._writers:
                del self._writers[path]
            elif self._readers.get(path):
                self._readers[path] -= 1
                if not self._readers[path]:
                    del self._readers[path]
                    del self._read_owners[path]
            else:
                raise WorkspaceError(f"The workspace directory {path} is not reserved.")
        logger.debug("Released %s", path)

    def delete(self, module_version: ModuleVersion) -> None:
        with self._lock:
            name = self._directories.get(str(module_version))
            if name is None:
                raise WorkspaceError(f"No workspace directory exists for {module_version}.")

            path = self._root / name
            if self._writers.get(path) != module_version:
                raise WorkspaceError(
                    f"The workspace directory {path} of {module_version} must be "
                    f"reserved read-write to be deleted."
                )

            if path.exists():
                shutil.rmtree(path)
            del self._writers[path]
            del self._directories[str(module_version)]
            self._update_index_atomic()
        logger.info("Deleted workspace directory %s of %s", path, module_version)

    def reservations(self) -> list[WorkspaceReservation]:
        """Snapshot of the active reservations."""
        with self._lock:
            reserved = [
                WorkspaceReservation(str(path), module_version, AccessMode.READ_WRITE)
                for path, module_version in self._writers.items()
            ]
            for path, module_version in self._read_owners.items():
                reserved.extend(
                    WorkspaceReservation(str(path), module_version, AccessMode.READ)
                    for _ in range(self._readers.get(path, 0))
                )
            return reserved
