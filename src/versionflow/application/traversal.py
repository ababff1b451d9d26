"""
Reference-path traversal of the module reference graph.

The traverser walks from a root ModuleVersion through the references reported
by the reference extractor, maintaining the ReferencePath from the root to
the current node, and applies a task to each node before (parent first) or
after (children first) its references.

Task outcomes:
    COMPLETED  continue
    ABORTED    stop descending on this branch; the traversal reports ABORTED
    FAILED     stop the traversal; the error is attached to the outcome
"""

import logging
import threading

from versionflow.application.collaborators import call_collaborator
from versionflow.domain.exceptions import VersionflowError
from versionflow.domain.interfaces import ReferenceExtractorInterface, TaskInterface
from versionflow.domain.models import (
    ExecutionContext,
    ModuleVersion,
    ReferencePath,
    TaskOutcome,
    TaskStatus,
    TraversalOrder,
)

logger = logging.getLogger(__name__)


class ModuleReentryAvoider:
    """
    Remembers the ModuleVersions already processed during a run.

    Shared by the traversals of the several roots of one run (possibly on
    several threads) so that a module reachable from two roots is processed
    once.
    """

    def __init__(self) -> None:
        self._processed: set[ModuleVersion] = set()
        self._lock = threading.Lock()

    def process(self, module_version: ModuleVersion) -> bool:
        """Return True the first time ``module_version`` is seen."""
        with self._lock:
            if module_version in self._processed:
                return False
            self._processed.add(module_version)
            return True


class ReferencePathTraverser:
    """
    Drives a task over the reference graph below a root.

    Args:
        task: Task applied to each node
        context: Execution context; each traversal uses its own copy
            (see ``ExecutionContext.for_traversal``)
    """

    def __init__(self, task: TaskInterface, context: ExecutionContext):
        if context.reference_extractor is None:
            raise ValueError("A reference extractor is required for traversal")
        self._task = task
        self._context = context
        self._extractor: ReferenceExtractorInterface = context.reference_extractor

    def traverse(self, root: ModuleVersion) -> TaskOutcome:
        """
        Traverse the graph below ``root``.

        Returns:
            COMPLETED, ABORTED (some branch was aborted) or FAILED (with the
            error and the module version it occurred on)
        """
        context = self._context.for_traversal()
        outcome = self._visit(context, ReferencePath(), root)

        if outcome.status is TaskStatus.ABORTED:
            logger.info("Traversal from %s aborted at %s", root, outcome.module_version)
        elif outcome.status is TaskStatus.FAILED:
            logger.error(
                "Traversal from %s failed at %s: %s",
                root,
                outcome.module_version,
                outcome.message,
            )
        return outcome

    def _visit(
        self,
        context: ExecutionContext,
        reference_path: ReferencePath,
        module_version: ModuleVersion,
    ) -> TaskOutcome:
        if self._task.avoid_reentry and module_version in reference_path:
            logger.debug("Skipping %s already on path %s", module_version, reference_path)
            return TaskOutcome.completed()

        reference_path.push(module_version)
        try:
            if self._task.traversal_order is TraversalOrder.PARENT_FIRST:
                outcome = self._apply(context, reference_path)
                if outcome.is_completed:
                    outcome = self._descend(context, reference_path, module_version)
            else:
                outcome = self._descend(context, reference_path, module_version)
                if outcome.is_completed:
                    outcome = self._apply(context, reference_path)
            return outcome
        finally:
            reference_path.pop()

    def _apply(
        self, context: ExecutionContext, reference_path: ReferencePath
    ) -> TaskOutcome:
        try:
            outcome = self._task.apply(context, reference_path)
        except VersionflowError as e:
            return TaskOutcome.failed(e, reference_path.leaf)

        if outcome.status is TaskStatus.ABORTED and outcome.module_version is None:
            return TaskOutcome.aborted(outcome.message, reference_path.leaf)
        if outcome.status is TaskStatus.FAILED and (
            outcome.error is None or outcome.module_version is None
        ):
            error = outcome.error or VersionflowError(
                outcome.message or "Task failed without an error"
            )
            return TaskOutcome.failed(
                error, outcome.module_version or reference_path.leaf
            )
        return outcome

    def _descend(
        self,
        context: ExecutionContext,
        reference_path: ReferencePath,
        module_version: ModuleVersion,
    ) -> TaskOutcome:
        extractor = self._extractor
        try:
            references = call_collaborator(
                "reference_extractor",
                "get_references",
                lambda: extractor.get_references(module_version),
            )
        except VersionflowError as e:
            return TaskOutcome.failed(e, module_version)

        for reference in references:
            if not reference.is_module or reference.target is None:
                continue
            outcome = self._visit(context, reference_path, reference.target)
            if not outcome.is_completed:
                return outcome

        return TaskOutcome.completed()
