"""
Version selection strategies.

Each strategy implements one or more capability roles and is registered
under an implementation id in the ``versionflow.<capability>`` entry point
groups.
"""

from versionflow.application.selection.continuous_release import (
    ContinuousReleaseStrategy,
)
from versionflow.application.selection.hotfix import HotfixStrategy
from versionflow.application.selection.phase import PhaseStrategy
from versionflow.application.selection.support import SelectionSupport
from versionflow.application.selection.uniform import UniformStrategy

__all__ = [
    "ContinuousReleaseStrategy",
    "HotfixStrategy",
    "PhaseStrategy",
    "SelectionSupport",
    "UniformStrategy",
]
