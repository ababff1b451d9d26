"""
CapabilityResolver: choose and instantiate the implementation of a role.

The implementation id is taken, in order, from:

1. ``SPECIFIC_PLUGIN_ID.<capability>`` for the node
2. the ``PLUGIN_ID.<capability>`` decision memo (prompting the operator
   with the available ids, the remembered one as default)
3. the registry default

Resolution of a (capability, node) pair may trigger further resolutions
(an implementation resolving its own collaborators). Re-entering a pair
that is still being resolved in the same traversal is a cycle.
"""

import logging
from typing import Any

from versionflow.application.decisions import DecisionMemory
from versionflow.domain.exceptions import ResolutionCycleError, UserConfigurationError
from versionflow.domain.models import Capability, ExecutionContext, NodePath

logger = logging.getLogger(__name__)

PROPERTY_PREFIX_SPECIFIC_PLUGIN_ID = "SPECIFIC_PLUGIN_ID."
KEY_PREFIX_PLUGIN_ID = "PLUGIN_ID."


class CapabilityResolver:
    """
    Resolves capability implementations for nodes.

    Stateless: the in-flight set lives in the ExecutionContext, so one
    resolver may serve any number of concurrent traversals.
    """

    def resolve(
        self, context: ExecutionContext, capability: Capability, node: NodePath
    ) -> Any:
        """
        Return the implementation of ``capability`` for ``node``.

        Cycle detection uses ``context.in_flight``, which is not locked:
        threads must not share a context, each traversal takes its own copy
        through ``ExecutionContext.for_traversal``.

        Raises:
            ResolutionCycleError: If the pair is already being resolved in
                this traversal
            UserConfigurationError: If no implementation is selected and the
                capability has no default, or the selected id is not registered
        """
        request = (capability, node)
        if request in context.in_flight:
            raise ResolutionCycleError(capability, node)

        context.in_flight.add(request)
        try:
            implementation_id = self.select_implementation_id(context, capability, node)
            if implementation_id is None:
                raise UserConfigurationError(
                    f"No implementation of {capability.value} is selected for {node} "
                    f"and no default is configured.",
                    module=node,
                )

            available = context.registry.list_implementation_ids(capability, node)
            if implementation_id not in available:
                raise UserConfigurationError(
                    f"Implementation '{implementation_id}' of {capability.value} "
                    f"selected for {node} is not registered. Available "
                    f"implementations: {', '.join(available) or '(none)'}",
                    module=node,
                )

            logger.info(
                "Resolved %s for %s: %s", capability.value, node, implementation_id
            )
            return context.registry.instantiate(capability, implementation_id, node)
        finally:
            context.in_flight.discard(request)

    def select_implementation_id(
        self, context: ExecutionContext, capability: Capability, node: NodePath
    ) -> str | None:
        specific = context.properties.get_property(
            node, PROPERTY_PREFIX_SPECIFIC_PLUGIN_ID + capability.value
        )
        if specific is not None:
            return specific.strip()

        registry = context.registry
        ids = registry.list_implementation_ids(capability, node)
        default_id = registry.get_default_id(capability, node)
        if not ids:
            return default_id
        if len(ids) == 1:
            return ids[0]

        memory = DecisionMemory(context.properties, context.interaction)

        def derive(remembered: str | None) -> str:
            suggested = remembered if remembered in ids else default_id
            prompt = (
                f"Which implementation of {capability.value} do you want to use for "
                f"{node} (available: {', '.join(ids)})"
            )
            while True:
                if suggested:
                    answer = memory.interaction.ask_with_default(
                        f"{prompt} [{suggested}]? ", suggested
                    )
                else:
                    answer = memory.interaction.ask(f"{prompt}? ")
                answer = answer.strip() or (suggested or "")
                if answer in ids:
                    return answer
                memory.interaction.inform(f"Invalid implementation id '{answer}'.")

        return memory.resolve(
            node,
            KEY_PREFIX_PLUGIN_ID + capability.value,
            None,
            derive,
            reuse_prompt=(
                f"Do you want to automatically use {{value}} for {capability.value} "
                f"for all subsequent nodes*"
            ),
            reused_message=(
                f"Implementation {{value}} of {capability.value} is automatically "
                f"used for {node}."
            ),
        )
