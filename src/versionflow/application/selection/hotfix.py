"""
Hotfix strategy: fix a released (static) version on a dedicated dynamic line.

The hotfix dynamic version is created from exactly the static version being
fixed. An existing hotfix version created from another version is the wrong
hotfix line and is rejected.
"""

from versionflow.application.selection.support import SelectionSupport
from versionflow.domain.exceptions import (
    HotfixBaseMismatchError,
    UserConfigurationError,
)
from versionflow.domain.interfaces import (
    NewDynamicVersionInterface,
    SelectDynamicVersionInterface,
)
from versionflow.domain.models import (
    ExecutionContext,
    ModuleVersion,
    ReferencePath,
    SelectionResult,
    Version,
)

CONTEXT_NON_STATIC_VERSIONS_REFERENCE_PATH = "NON_STATIC_VERSIONS_REFERENCE_PATH"
CONTEXT_USE_CURRENT_HOTFIX_VERSION = "USE_CURRENT_HOTFIX_VERSION"


class HotfixStrategy(SelectDynamicVersionInterface, NewDynamicVersionInterface):
    """Selects or creates the hotfix dynamic version of a static version."""

    def select_dynamic_version(
        self,
        context: ExecutionContext,
        module_version: ModuleVersion,
        reference_path: ReferencePath,
    ) -> SelectionResult:
        support = SelectionSupport(context, module_version)
        version = module_version.version

        ancestors = [
            element
            for element in reference_path
            if element.module != module_version.module
        ]
        non_static = [element for element in ancestors if not element.version.is_static]
        if non_static:
            support.inform(
                f"The reference path {reference_path} leading to {module_version} "
                f"contains non-static versions "
                f"({', '.join(str(element) for element in non_static)}). A hotfix "
                f"is normally applied below static versions only."
            )
            if not support.memory.confirm_continue(
                CONTEXT_NON_STATIC_VERSIONS_REFERENCE_PATH
            ):
                return SelectionResult.abort()

        if version.is_dynamic:
            base = support.scm.get_base_version(version)
            if base is None:
                support.inform(
                    f"{module_version} is already dynamic and its base version is "
                    f"unknown. It is kept as the hotfix version."
                )
            else:
                support.inform(
                    f"{module_version} is already dynamic, created from {base.base}. "
                    f"It is kept as the hotfix version."
                )
            if not support.memory.confirm_continue(CONTEXT_USE_CURRENT_HOTFIX_VERSION):
                return SelectionResult.abort()
            return SelectionResult(version=version)

        selected = support.reuse_dynamic_version(
            f"Which hotfix dynamic version do you want to use for {module_version}*"
        )
        return self._checked(support, selected)

    def new_dynamic_version(
        self, context: ExecutionContext, module_version: ModuleVersion
    ) -> SelectionResult:
        support = SelectionSupport(context, module_version)

        if not module_version.version.is_static:
            raise UserConfigurationError(
                f"A hotfix can only be created for a static version, but "
                f"{module_version} is not static.",
                module=module_version.module,
            )

        selected = support.reuse_dynamic_version(
            f"Which new hotfix dynamic version do you want to create for "
            f"{module_version}*"
        )
        if selected == module_version.version:
            return SelectionResult(version=selected)
        return self._checked(support, selected)

    def _checked(self, support: SelectionSupport, selected: Version) -> SelectionResult:
        version = support.version

        if not support.scm.is_version_exists(selected):
            support.inform(
                f"Dynamic version {selected} does not exist in module "
                f"{support.module} and will be created from {version}."
            )
            return SelectionResult(version=selected, base=version)

        base = support.scm.get_base_version(selected)
        if base is None or base.base != version:
            raise HotfixBaseMismatchError(
                support.module,
                selected,
                expected_base=version,
                actual_base=base.base if base is not None else None,
            )
        return SelectionResult(version=selected)
