"""Idempotent docker network/volume provisioning."""

from __future__ import annotations

from typing import Iterable

from . import console, docker
from .exceptions import InfrastructureCreationError
from .models import RESOURCE_KIND_ORDER, InfrastructureResource, declared_resources


def _provisioning_order(resources: Iterable[InfrastructureResource]) -> list[InfrastructureResource]:
    """Networks before volumes; declaration order within each kind."""
    return sorted(resources, key=lambda resource: RESOURCE_KIND_ORDER.index(resource.kind))


def ensure_resource(resource: InfrastructureResource) -> bool:
    """
    Ensure a single network or volume exists.

    Returns True when it had to be created, False when it already existed.
    """
    if docker.resource_exists(resource):
        console.info(f"{resource.label} already exists.")
        return False

    console.info(f"Creating {resource.kind.value} '{resource.name}'...")
    result = docker.create_resource(resource)
    if result.returncode != 0:
        stderr = (result.stderr or '').strip()
        raise InfrastructureCreationError(
            f"Failed to create {resource.kind.value} '{resource.name}' "
            f"(exit {result.returncode}){': ' + stderr if stderr else ''}"
        )
    console.success(f"{resource.label} created")
    return True


def provision_infrastructure(
    resources: Iterable[InfrastructureResource] | None = None,
) -> list[InfrastructureResource]:
    """
    Ensure every declared network and volume exists.

    Returns the resources created by this call; an immediate second call
    returns an empty list. The first creation failure aborts provisioning.
    """
    if resources is None:
        resources = declared_resources()

    console.info("Verifying Docker infrastructure...")
    created = []
    for resource in _provisioning_order(resources):
        if ensure_resource(resource):
            created.append(resource)
    return created
