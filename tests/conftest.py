"""Shared pytest fixtures for versionflow tests."""

import pytest

from versionflow.application.selection import (
    ContinuousReleaseStrategy,
    HotfixStrategy,
    PhaseStrategy,
    UniformStrategy,
)
from versionflow.domain.models import (
    Capability,
    ExecutionContext,
    ModuleVersion,
    NodePath,
    Version,
)
from versionflow.infrastructure.interaction import ScriptedInteraction
from versionflow.infrastructure.persistence.memory import InMemoryRuntimeProperties
from versionflow.infrastructure.references import InMemoryReferenceExtractor
from versionflow.infrastructure.registry import CapabilityRegistry
from versionflow.infrastructure.scm import InMemoryScm


@pytest.fixture
def module() -> NodePath:
    """Module under test."""
    return NodePath.parse("app/core")


@pytest.fixture
def properties() -> InMemoryRuntimeProperties:
    """Empty runtime properties."""
    return InMemoryRuntimeProperties()


@pytest.fixture
def interaction() -> ScriptedInteraction:
    """Scripted interaction without answers; tests add the ones they expect."""
    return ScriptedInteraction()


@pytest.fixture
def scm(module: NodePath) -> InMemoryScm:
    """SCM of the module under test with D/master and two releases."""
    scm = InMemoryScm(module=module, default_version=Version.dynamic("master"))
    scm.create_static_version(Version.static("1.0.00"), Version.dynamic("master"))
    scm.commit(Version.dynamic("master"), "Fix parser")
    scm.create_static_version(Version.static("1.0.01"), Version.dynamic("master"))
    return scm


@pytest.fixture
def registry() -> CapabilityRegistry:
    """Registry with the built-in strategies and no entry point discovery."""
    registry = CapabilityRegistry(discover=False)
    for capability in (
        Capability.SELECT_DYNAMIC_VERSION,
        Capability.NEW_DYNAMIC_VERSION,
    ):
        registry.register(capability, "uniform", UniformStrategy)
        registry.register(capability, "hotfix", HotfixStrategy)
        registry.register(capability, "phase", PhaseStrategy)
    registry.register(Capability.NEW_STATIC_VERSION, "uniform", UniformStrategy)
    registry.register(Capability.SELECT_STATIC_VERSION, "phase", PhaseStrategy)
    registry.register(
        Capability.SELECT_STATIC_VERSION, "continuous_release", ContinuousReleaseStrategy
    )
    return registry


@pytest.fixture
def references() -> InMemoryReferenceExtractor:
    """Empty reference graph."""
    return InMemoryReferenceExtractor()


@pytest.fixture
def context(
    properties: InMemoryRuntimeProperties,
    interaction: ScriptedInteraction,
    registry: CapabilityRegistry,
    scm: InMemoryScm,
    references: InMemoryReferenceExtractor,
) -> ExecutionContext:
    """Execution context where every module shares the ``scm`` fixture."""
    return ExecutionContext(
        properties=properties,
        interaction=interaction,
        registry=registry,
        scm_provider=lambda node: scm,
        reference_extractor=references,
    ).for_traversal()


@pytest.fixture
def master(module: NodePath) -> ModuleVersion:
    """The module on its default dynamic version."""
    return ModuleVersion(module, Version.dynamic("master"))


@pytest.fixture
def release(module: NodePath) -> ModuleVersion:
    """The module on its latest static version."""
    return ModuleVersion(module, Version.static("1.0.01"))
