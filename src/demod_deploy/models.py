"""Value types shared by the deployment stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable

from .config_constants import (
    BUILD_LINK_PREFIX,
    BUILD_TARGET_PREFIX,
    DEFAULT_REGISTRY_NAMESPACE,
    IMAGE_TAG,
    LOCAL_NAMESPACE,
    REQUIRED_NETWORKS,
    REQUIRED_VOLUMES,
)


@dataclass(frozen=True)
class ServiceSpec:
    """One service of the fixed build list."""

    name: str
    build_target: str
    local_tag: str
    remote_tag: str

    @classmethod
    def for_service(cls, name: str, registry_namespace: str) -> "ServiceSpec":
        return cls(
            name=name,
            build_target=f"{BUILD_TARGET_PREFIX}-{name}",
            local_tag=f"{LOCAL_NAMESPACE}/{name}:{IMAGE_TAG}",
            remote_tag=f"{registry_namespace}/{name}:{IMAGE_TAG}",
        )

    @property
    def out_link(self) -> str:
        """nix build --out-link name (e.g. result-gsn-meter)."""
        return f"{BUILD_LINK_PREFIX}{self.name}"


def build_service_specs(names: Iterable[str], registry_namespace: str) -> tuple[ServiceSpec, ...]:
    """Build specs in declaration order."""
    return tuple(ServiceSpec.for_service(name, registry_namespace) for name in names)


class ResourceKind(str, Enum):
    NETWORK = "network"
    VOLUME = "volume"


# Provisioning order: all networks before all volumes
RESOURCE_KIND_ORDER = (ResourceKind.NETWORK, ResourceKind.VOLUME)


class ResourceState(str, Enum):
    ABSENT = "absent"
    PRESENT = "present"


@dataclass(frozen=True)
class InfrastructureResource:
    kind: ResourceKind
    name: str

    @property
    def label(self) -> str:
        return f"{self.kind.value.capitalize()} '{self.name}'"


def declared_resources() -> tuple[InfrastructureResource, ...]:
    """Return the fixed network/volume declarations, networks first."""
    networks = [InfrastructureResource(ResourceKind.NETWORK, name) for name in REQUIRED_NETWORKS]
    volumes = [InfrastructureResource(ResourceKind.VOLUME, name) for name in REQUIRED_VOLUMES]
    return tuple(networks + volumes)


@dataclass(frozen=True)
class RunConfig:
    """Options for one run, assembled from the command line."""

    registry_namespace: str = DEFAULT_REGISTRY_NAMESPACE
    push_enabled: bool = False
    working_dir: Path = field(default_factory=Path.cwd)


class PipelineOutcome(str, Enum):
    BUILT = "built"
    BUILD_FAILED = "build_failed"
    LOAD_FAILED = "load_failed"
    PUSHED = "pushed"
    TAG_ONLY = "tag_only"
    PUSH_FAILED = "push_failed"

    @property
    def failed(self) -> bool:
        return self in FAILED_OUTCOMES


FAILED_OUTCOMES = frozenset({
    PipelineOutcome.BUILD_FAILED,
    PipelineOutcome.LOAD_FAILED,
    PipelineOutcome.PUSH_FAILED,
})


class ServiceState(str, Enum):
    PENDING = "pending"
    BUILDING = "building"
    LOADED = "loaded"
    TAGGED = "tagged"
    PUSHED = "pushed"
    SKIPPED = "skipped"
    DONE = "done"
    ABORTED = "aborted"
