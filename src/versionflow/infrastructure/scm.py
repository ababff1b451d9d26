"""
In-memory SCM.

A small model of one module's repository: versions with their commit
histories and base versions. Useful for testing and for dry runs.
"""

import logging
import threading
from pathlib import Path

from versionflow.domain.exceptions import VersionConflictError
from versionflow.domain.interfaces import ScmInterface
from versionflow.domain.models import BaseVersion, Commit, NodePath, Version

logger = logging.getLogger(__name__)


class InMemoryScm(ScmInterface):
    """
    Simple in-memory SCM for one module.

    Histories are stored most recent commit first. A static version created
    with ``create_static_version`` is recorded on the tip commit of its
    source dynamic version.
    """

    def __init__(
        self,
        module: NodePath | None = None,
        default_version: Version = Version.dynamic("master"),
    ):
        self.module = module
        self._default_version = default_version
        self._histories: dict[Version, list[Commit]] = {}
        self._bases: dict[Version, BaseVersion] = {}
        self._checkouts: dict[Path, Version] = {}
        self._lock = threading.Lock()
        self._next_commit = 1
        self.add_version(default_version)

    def _new_commit(self, message: str, **attributes: str) -> Commit:
        commit = Commit(
            commit_id=f"c{self._next_commit}", message=message, attributes=attributes
        )
        self._next_commit += 1
        return commit

    # -------------------------------------------------------------------------
    # Building the repository
    # -------------------------------------------------------------------------

    def add_version(
        self, version: Version, base: Version | None = None, history: list[Commit] | None = None
    ) -> None:
        """Add a version with an explicit history (most recent first)."""
        with self._lock:
            if history is None:
                history = [self._new_commit(f"Initial commit of {version}")]
            self._histories[version] = list(history)
            if base is not None:
                self._bases[version] = BaseVersion(version=version, base=base)

    def commit(self, version: Version, message: str, **attributes: str) -> Commit:
        """Add a commit on top of dynamic ``version``."""
        with self._lock:
            commit = self._new_commit(message, **attributes)
            self._histories[version].insert(0, commit)
            return commit

    def create_dynamic_version(self, version: Version, base: Version) -> None:
        """Create ``version`` from ``base``, sharing its history."""
        with self._lock:
            if version in self._histories:
                raise VersionConflictError(version, self.module)
            self._histories[version] = list(self._histories[base])
            self._bases[version] = BaseVersion(version=version, base=base)
        logger.debug("Created %s from %s", version, base)

    def create_static_version(self, version: Version, source: Version) -> None:
        """Freeze the tip of dynamic ``source`` as static ``version``."""
        with self._lock:
            if version in self._histories:
                raise VersionConflictError(version, self.module)
            history = self._histories[source]
            tip = history[0]
            tagged = Commit(
                commit_id=tip.commit_id,
                message=tip.message,
                attributes=tip.attributes,
                static_versions=(*tip.static_versions, version),
            )
            history[0] = tagged
            self._histories[version] = list(history)
            self._bases[version] = BaseVersion(version=version, base=source)
        logger.debug("Created %s from %s", version, source)

    # -------------------------------------------------------------------------
    # ScmInterface
    # -------------------------------------------------------------------------

    def is_module_exists(self) -> bool:
        return True

    def is_version_exists(self, version: Version) -> bool:
        with self._lock:
            return version in self._histories

    def get_default_version(self) -> Version:
        return self._default_version

    def get_base_version(self, version: Version) -> BaseVersion | None:
        with self._lock:
            return self._bases.get(version)

    def get_commits(self, version: Version, limit: int | None = None) -> list[Commit]:
        with self._lock:
            history = self._histories.get(version)
            if history is None:
                raise KeyError(f"Version {version} does not exist")
            return list(history if limit is None else history[:limit])

    def get_static_versions(self) -> list[Version]:
        with self._lock:
            return [version for version in self._histories if version.is_static]

    def checkout(self, version: Version, path: Path) -> None:
        with self._lock:
            if version not in self._histories:
                raise KeyError(f"Version {version} does not exist")
            self._checkouts[Path(path)] = version

    def checked_out_version(self, path: Path) -> Version | None:
        with self._lock:
            return self._checkouts.get(Path(path))
