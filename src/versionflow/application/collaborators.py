"""
Collaborator call checking.

Failures raised by external collaborators are wrapped in CollaboratorError so
that callers of the core see one exception type for them. versionflow's own
errors pass through unchanged.
"""

from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from versionflow.domain.exceptions import CollaboratorError, VersionflowError
from versionflow.domain.interfaces import InteractionInterface, ScmInterface
from versionflow.domain.models import BaseVersion, Commit, Version

T = TypeVar("T")


def call_collaborator(collaborator: str, operation: str, func: Callable[[], T]) -> T:
    """
    Invoke ``func``, wrapping foreign exceptions in CollaboratorError.

    Args:
        collaborator: Collaborator name used in the error message
        operation: Operation name used in the error message
        func: Zero-argument callable performing the call
    """
    try:
        return func()
    except VersionflowError:
        raise
    except Exception as e:
        raise CollaboratorError(collaborator, operation, e) from e


class CheckedScm(ScmInterface):
    """ScmInterface decorator wrapping backend failures in CollaboratorError."""

    def __init__(self, scm: ScmInterface, name: str = "scm"):
        self._scm = scm
        self._name = name

    def is_module_exists(self) -> bool:
        return call_collaborator(self._name, "is_module_exists", self._scm.is_module_exists)

    def is_version_exists(self, version: Version) -> bool:
        return call_collaborator(
            self._name, "is_version_exists", lambda: self._scm.is_version_exists(version)
        )

    def get_default_version(self) -> Version:
        return call_collaborator(
            self._name, "get_default_version", self._scm.get_default_version
        )

    def get_base_version(self, version: Version) -> BaseVersion | None:
        return call_collaborator(
            self._name, "get_base_version", lambda: self._scm.get_base_version(version)
        )

    def get_commits(self, version: Version, limit: int | None = None) -> list[Commit]:
        return call_collaborator(
            self._name, "get_commits", lambda: self._scm.get_commits(version, limit)
        )

    def get_static_versions(self) -> list[Version]:
        return call_collaborator(
            self._name, "get_static_versions", self._scm.get_static_versions
        )

    def checkout(self, version: Version, path: Path) -> None:
        call_collaborator(self._name, "checkout", lambda: self._scm.checkout(version, path))


class CheckedInteraction(InteractionInterface):
    """InteractionInterface decorator wrapping failures in CollaboratorError."""

    def __init__(self, interaction: InteractionInterface, name: str = "interaction"):
        self._interaction = interaction
        self._name = name

    def ask(self, prompt: str) -> str:
        return call_collaborator(self._name, "ask", lambda: self._interaction.ask(prompt))

    def ask_with_default(self, prompt: str, default: str) -> str:
        return call_collaborator(
            self._name,
            "ask_with_default",
            lambda: self._interaction.ask_with_default(prompt, default),
        )

    def inform(self, message: str) -> None:
        call_collaborator(self._name, "inform", lambda: self._interaction.inform(message))
