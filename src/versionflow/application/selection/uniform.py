"""
Uniform strategy: many modules share one development-effort version.

The operator names the dynamic version once (e.g. ``D/feature-x``) and it is
reused for every module of the run. When it does not exist yet in a module,
it is created from a base version which is also asked once and reused.
"""

import logging

from versionflow.application.selection.support import (
    PROPERTY_SPECIFIC_DYNAMIC_VERSION,
    PROPERTY_SPECIFIC_STATIC_VERSION,
    SelectionSupport,
)
from versionflow.domain.interfaces import (
    NewDynamicVersionInterface,
    NewStaticVersionInterface,
    SelectDynamicVersionInterface,
)
from versionflow.domain.models import (
    AlwaysNeverYesNoResponse,
    ExecutionContext,
    ModuleVersion,
    ReferencePath,
    SelectionResult,
    Version,
    VersionKind,
)

logger = logging.getLogger(__name__)

PROPERTY_ALSO_PROCESS_DYNAMIC_VERSION = "ALSO_PROCESS_DYNAMIC_VERSION"
KEY_BASE_VERSION = "BASE_VERSION"
KEY_STATIC_VERSION_PREFIX = "STATIC_VERSION_PREFIX"

DEFAULT_INITIAL_REVISION = 1
DEFAULT_REVISION_DECIMAL_POSITION_COUNT = 2


class UniformStrategy(
    SelectDynamicVersionInterface,
    NewDynamicVersionInterface,
    NewStaticVersionInterface,
):
    """Selects, creates and releases one shared version across modules."""

    def select_dynamic_version(
        self,
        context: ExecutionContext,
        module_version: ModuleVersion,
        reference_path: ReferencePath,
    ) -> SelectionResult:
        support = SelectionSupport(context, module_version)
        return self._switch(
            support,
            prompt=f"To which dynamic version do you want to switch {module_version}*",
            default_base=support.scm.get_default_version(),
        )

    def new_dynamic_version(
        self, context: ExecutionContext, module_version: ModuleVersion
    ) -> SelectionResult:
        support = SelectionSupport(context, module_version)
        return self._switch(
            support,
            prompt=(
                f"Which new dynamic version do you want to create for {module_version}*"
            ),
            default_base=module_version.version,
        )

    def new_static_version(
        self, context: ExecutionContext, module_version: ModuleVersion
    ) -> SelectionResult:
        support = SelectionSupport(
            context,
            module_version,
            initial_revision=DEFAULT_INITIAL_REVISION,
            revision_width=DEFAULT_REVISION_DECIMAL_POSITION_COUNT,
        )
        support.validate_dynamic()

        specific = support.specific_version(
            PROPERTY_SPECIFIC_STATIC_VERSION, VersionKind.STATIC
        )
        if specific is not None:
            return SelectionResult(version=specific)

        equivalent = support.reuse_equivalent_static_version()
        if equivalent is not None:
            return SelectionResult(version=equivalent)

        prefix = support.specific_static_prefix()
        if prefix is None:
            prefix = support.reuse_version(
                KEY_STATIC_VERSION_PREFIX,
                VersionKind.STATIC,
                prompt=f"What is the prefix of the new static version of {module_version}*",
                reuse_prompt=(
                    "Do you want to automatically reuse static version prefix {value} "
                    "for all subsequent modules*"
                ),
                reused_message=(
                    f"Static version prefix {{value}} is automatically reused for "
                    f"{module_version}."
                ),
            )

        latest = support.latest_matching(
            prefix, support.static_versions_in_history(module_version.version)
        )
        return SelectionResult(version=support.allocate_revision(prefix, latest))

    def _switch(
        self, support: SelectionSupport, prompt: str, default_base: Version
    ) -> SelectionResult:
        version = support.version

        selected = support.specific_version(
            PROPERTY_SPECIFIC_DYNAMIC_VERSION, VersionKind.DYNAMIC
        )
        if selected == version:
            support.inform(
                f"The specified dynamic version {selected} is the same as the "
                f"current version of module {support.module}."
            )
            return SelectionResult(version=version)

        if version.is_dynamic and not self._also_process_dynamic(support):
            return SelectionResult(version=version)

        if selected is None:
            selected = support.reuse_dynamic_version(prompt)
        if selected == version:
            return SelectionResult(version=version)

        if support.scm.is_version_exists(selected):
            return SelectionResult(version=selected)

        support.inform(
            f"Dynamic version {selected} does not exist in module {support.module}."
        )
        base = self._base_version(support, selected, default_base)
        return SelectionResult(version=selected, base=base)

    def _also_process_dynamic(self, support: SelectionSupport) -> bool:
        answer = support.memory.handle_yes_no_ask(
            PROPERTY_ALSO_PROCESS_DYNAMIC_VERSION,
            f"Version {support.module_version} is already dynamic. "
            f"Do you want to process it*",
        )
        if answer is AlwaysNeverYesNoResponse.NEVER:
            support.inform(
                f"{support.module_version} is already dynamic and is not processed."
            )
        elif answer is AlwaysNeverYesNoResponse.ALWAYS:
            support.inform(
                f"{support.module_version} is already dynamic and is processed."
            )
        return answer.is_yes

    def _base_version(
        self, support: SelectionSupport, selected: Version, default: Version
    ) -> Version:
        prompt = (
            f"From which existing version do you want to create {selected} "
            f"for {support.module_version}*"
        )
        base = support.reuse_version(
            KEY_BASE_VERSION,
            None,
            prompt=prompt,
            reuse_prompt=(
                "Do you want to automatically reuse base version {value} for all "
                "subsequent modules*"
            ),
            reused_message=(
                f"Base version {{value}} is automatically reused to create {selected} "
                f"for {support.module_version}."
            ),
            default=default,
            must_exist=True,
        )

        # An automatically reused base may not exist in every module
        if not support.scm.is_version_exists(base):
            support.inform(
                f"Automatically reused base version {base} does not exist in module "
                f"{support.module}. Please specify an existing base version for "
                f"this module only."
            )
            base = support.memory.ask_version(prompt, None, support.scm, default)

        logger.info("%s will be created from %s in %s", selected, base, support.module)
        return base
