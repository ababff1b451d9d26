"""
In-memory reference extractor.

Holds the reference graph explicitly instead of parsing module manifests.
"""

from versionflow.domain.interfaces import ReferenceExtractorInterface
from versionflow.domain.models import ModuleVersion, Reference


class InMemoryReferenceExtractor(ReferenceExtractorInterface):
    """Reference graph declared up front, in reporting order."""

    def __init__(self) -> None:
        self._references: dict[ModuleVersion, list[Reference]] = {}

    def add_reference(
        self,
        source: ModuleVersion,
        target: ModuleVersion | None = None,
        coordinate: str = "",
    ) -> None:
        """Declare that ``source`` references ``target`` (or an external coordinate)."""
        self._references.setdefault(source, []).append(
            Reference(target=target, coordinate=coordinate or str(target or ""))
        )

    def get_references(self, module_version: ModuleVersion) -> list[Reference]:
        return list(self._references.get(module_version, []))
