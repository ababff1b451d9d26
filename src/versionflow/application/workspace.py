"""
WorkspaceAccessGuard: exclusive use of a module's working directory.

Any mutating use of a working directory follows

    acquire READ_WRITE -> work -> release

with the release guaranteed on every exit path, except when populating a
newly created directory fails: the directory is then deleted and never
released.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path

from versionflow.application.collaborators import call_collaborator
from versionflow.domain.interfaces import WorkspaceInterface
from versionflow.domain.models import AccessMode, CreateMode, ModuleVersion

logger = logging.getLogger(__name__)


class WorkspaceAccessGuard:
    """
    Reservation discipline over a WorkspaceInterface.

    Args:
        workspace: Workspace storage
    """

    def __init__(self, workspace: WorkspaceInterface):
        self._workspace = workspace

    def peek(self, module_version: ModuleVersion) -> Path:
        """Location of an existing working directory, without reserving it."""
        return call_collaborator(
            "workspace",
            "acquire",
            lambda: self._workspace.acquire(
                module_version, CreateMode.GET_EXISTING, AccessMode.PEEK
            ),
        )

    @contextmanager
    def reserve(
        self,
        module_version: ModuleVersion,
        create_mode: CreateMode = CreateMode.GET_EXISTING,
        populate: Callable[[Path], None] | None = None,
    ) -> Iterator[Path]:
        """
        Reserve the working directory of ``module_version`` read-write.

        Args:
            module_version: Module version whose directory is reserved
            create_mode: Whether the directory must exist, must be new, or either
            populate: Called with the path when the directory was newly
                created (e.g. to check out the version into it)

        Yields:
            Path of the reserved directory
        """
        existed = call_collaborator(
            "workspace", "exists", lambda: self._workspace.exists(module_version)
        )
        path = call_collaborator(
            "workspace",
            "acquire",
            lambda: self._workspace.acquire(
                module_version, create_mode, AccessMode.READ_WRITE
            ),
        )
        logger.debug("Reserved %s for %s", path, module_version)

        if populate is not None and not existed:
            try:
                populate(path)
            except BaseException:
                logger.info(
                    "Populating %s for %s failed, deleting it", path, module_version
                )
                call_collaborator(
                    "workspace", "delete", lambda: self._workspace.delete(module_version)
                )
                raise

        try:
            yield path
        finally:
            call_collaborator("workspace", "release", lambda: self._workspace.release(path))
            logger.debug("Released %s for %s", path, module_version)
