"""
In-memory runtime properties.

Useful for testing and for runs whose decisions need not survive the process.
"""

import threading
from collections.abc import Mapping

from versionflow.domain.interfaces import RuntimePropertiesInterface
from versionflow.domain.models import NodePath


def property_key(node: NodePath | None, name: str) -> str:
    """Flat key of ``name`` scoped to ``node`` (``a.b.NAME``), bare for global."""
    if node is None or node.is_root:
        return name
    return node.property_prefixes()[-1] + name


class InMemoryRuntimeProperties(RuntimePropertiesInterface):
    """
    Hierarchical property store.

    Initial values are kept apart from the transient values set during the
    run; a transient value (even None, meaning removed) shadows the initial
    value with the same key.
    """

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._initial: dict[str, str] = dict(initial or {})
        self._transient: dict[str, str | None] = {}
        self._lock = threading.Lock()

    def get_property(self, node: NodePath | None, name: str) -> str | None:
        prefixes = node.property_prefixes() if node is not None else ("",)
        with self._lock:
            for prefix in reversed(prefixes):
                key = prefix + name
                if key in self._transient:
                    value = self._transient[key]
                    if value is not None:
                        return value
                    continue
                if key in self._initial:
                    return self._initial[key]
        return None

    def set_property(self, node: NodePath | None, name: str, value: str | None) -> None:
        with self._lock:
            self._transient[property_key(node, name)] = value

    def initial_properties(self) -> dict[str, str]:
        with self._lock:
            return dict(self._initial)

    def transient_properties(self) -> dict[str, str | None]:
        with self._lock:
            return dict(self._transient)

    def merged_properties(self) -> dict[str, str]:
        """Initial values overlaid with the transient ones (removals applied)."""
        with self._lock:
            merged = dict(self._initial)
            for key, value in self._transient.items():
                if value is None:
                    merged.pop(key, None)
                else:
                    merged[key] = value
            return merged
