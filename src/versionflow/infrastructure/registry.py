"""
Capability Registry with Entry Points Discovery.

Provides dynamic strategy loading via Python entry points, one group per
capability (``versionflow.<capability>``). External packages can register
implementations in their pyproject.toml:

    [project.entry-points."versionflow.select_static_version"]
    my_release = "mypackage.release:MyReleaseStrategy"
"""

import threading
import warnings
from collections.abc import Callable
from importlib.metadata import entry_points
from typing import Any

from versionflow.domain.interfaces import CapabilityRegistryInterface
from versionflow.domain.models import Capability, NodePath

ENTRY_POINT_GROUP_PREFIX = "versionflow."

Factory = Callable[[], Any]


class CapabilityRegistry(CapabilityRegistryInterface):
    """
    Registry of capability implementations.

    Discovers implementations via the ``versionflow.<capability>`` entry point
    groups. Uses lazy loading: entry points are only loaded on first access.

    Example usage:
        registry = CapabilityRegistry(defaults={Capability.SELECT_DYNAMIC_VERSION: "uniform"})
        strategy = registry.instantiate(Capability.SELECT_DYNAMIC_VERSION, "hotfix", node)
    """

    def __init__(
        self,
        defaults: dict[Capability, str] | None = None,
        discover: bool = True,
    ):
        """
        Args:
            defaults: Default implementation id per capability
            discover: Whether to load implementations from entry points
        """
        self._implementations: dict[Capability, dict[str, Factory]] = {
            capability: {} for capability in Capability
        }
        self._defaults: dict[Capability, str] = dict(defaults or {})
        self._discover = discover
        self._loaded = not discover
        self._lock = threading.Lock()

    def _load_entry_points(self) -> None:
        """Load implementations from entry points (lazy, called once)."""
        with self._lock:
            if self._loaded:
                return

            for capability in Capability:
                eps = entry_points(group=ENTRY_POINT_GROUP_PREFIX + capability.value)
                for ep in eps:
                    try:
                        factory = ep.load()
                    except Exception as e:
                        warnings.warn(
                            f"Failed to load {capability.value} implementation "
                            f"'{ep.name}' from entry point: {e}",
                            stacklevel=2,
                        )
                        continue
                    self._implementations[capability].setdefault(ep.name, factory)

            self._loaded = True

    def register(
        self, capability: Capability, implementation_id: str, factory: Factory
    ) -> None:
        """
        Manually register an implementation.

        Useful for testing or dynamically-created implementations. Takes
        precedence over an entry point with the same id.

        Args:
            capability: Capability implemented
            implementation_id: Implementation identifier (e.g., "uniform")
            factory: Class (or zero-argument callable) creating the implementation
        """
        with self._lock:
            self._implementations[capability][implementation_id] = factory

    def set_default_id(self, capability: Capability, implementation_id: str) -> None:
        self._defaults[capability] = implementation_id

    def list_implementation_ids(
        self, capability: Capability, node: NodePath
    ) -> list[str]:
        self._load_entry_points()
        return sorted(self._implementations[capability])

    def get_default_id(self, capability: Capability, node: NodePath) -> str | None:
        return self._defaults.get(capability)

    def get(self, capability: Capability, implementation_id: str) -> Factory:
        """
        Get an implementation factory by id.

        Raises:
            KeyError: If the implementation is not found
        """
        self._load_entry_points()
        implementations = self._implementations[capability]
        if implementation_id not in implementations:
            available = ", ".join(sorted(implementations)) or "(none)"
            raise KeyError(
                f"Implementation '{implementation_id}' of {capability.value} not found. "
                f"Available implementations: {available}"
            )
        return implementations[implementation_id]

    def instantiate(
        self, capability: Capability, implementation_id: str | None, node: NodePath
    ) -> Any:
        """
        Create an implementation instance.

        Raises:
            KeyError: If no id is given and the capability has no default, or
                the implementation is not found
        """
        if implementation_id is None:
            implementation_id = self.get_default_id(capability, node)
        if implementation_id is None:
            raise KeyError(
                f"No implementation of {capability.value} selected for {node} "
                f"and no default is configured."
            )
        return self.get(capability, implementation_id)()

    def clear(self) -> None:
        """
        Clear all registered implementations (useful for testing).

        Also resets the loaded flag so entry points are reloaded when discovery
        is enabled.
        """
        with self._lock:
            for implementations in self._implementations.values():
                implementations.clear()
            self._loaded = not self._discover
