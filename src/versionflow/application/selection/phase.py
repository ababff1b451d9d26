"""
Phase strategy: phased releases on one persistent dynamic version.

Each phase freezes the dynamic version ``D/x`` as ``S/x-<phase>``. Switching
back to development from such a static version recovers the dynamic version
it was created from.
"""

from versionflow.application.selection.support import SelectionSupport
from versionflow.domain.exceptions import VersionflowError
from versionflow.domain.interfaces import (
    NewDynamicVersionInterface,
    SelectDynamicVersionInterface,
    SelectStaticVersionInterface,
)
from versionflow.domain.models import (
    ExecutionContext,
    ModuleVersion,
    ReferencePath,
    SelectionResult,
    Version,
)

PROPERTY_CURRENT_PHASE = "CURRENT_PHASE"


class PhaseStrategy(
    SelectDynamicVersionInterface,
    NewDynamicVersionInterface,
    SelectStaticVersionInterface,
):
    def select_dynamic_version(
        self,
        context: ExecutionContext,
        module_version: ModuleVersion,
        reference_path: ReferencePath,
    ) -> SelectionResult:
        return self.new_dynamic_version(context, module_version)

    def new_dynamic_version(
        self, context: ExecutionContext, module_version: ModuleVersion
    ) -> SelectionResult:
        version = module_version.version
        if version.is_dynamic:
            return SelectionResult(version=version)

        support = SelectionSupport(context, module_version)
        base = support.scm.get_base_version(version)
        if base is None:
            raise VersionflowError(
                f"The base version of {module_version} could not be found."
            )
        if not base.base.is_dynamic:
            raise VersionflowError(
                f"The base version {base.base} of {module_version} is not dynamic."
            )
        return SelectionResult(version=base.base)

    def select_static_version(
        self, context: ExecutionContext, module_version: ModuleVersion
    ) -> SelectionResult:
        support = SelectionSupport(context, module_version)
        support.validate_dynamic()

        phase = support.require_property(PROPERTY_CURRENT_PHASE)
        return SelectionResult(
            version=Version.static(f"{module_version.version.identifier}-{phase}")
        )
