#!/usr/bin/env python3
"""
Deployment preparation for the DeMoD Game Server Network.

Stages run strictly in this order, each blocking until done:
    1. check_dependencies        docker, nix and jq on PATH
    2. verify_env                .env present (template generated on first run)
    3. provision_infrastructure  docker network 'frontend', volume 'demod-data'
    4. build_and_publish         nix build -> docker load -> docker tag -> docker push

A failure in any stage raises a DeployError and nothing after it runs. The
stack itself is never started; the final message names the command for that.
"""

from __future__ import annotations

import logging
from typing import Optional

from . import console
from .config_constants import COMPOSE_UP_COMMAND, SERVICE_NAMES
from .console import DeploymentContext
from .dependencies import check_dependencies
from .env_bootstrap import verify_env
from .infrastructure import provision_infrastructure
from .models import PipelineOutcome, RunConfig, build_service_specs, declared_resources
from .pipeline import build_and_publish

logger = logging.getLogger(__name__)


def run_deployment(config: RunConfig, context: Optional[DeploymentContext] = None) -> dict[str, PipelineOutcome]:
    """Run all stages for config and return the per-service outcomes."""
    if context is None:
        context = DeploymentContext()

    logger.debug(f"Run config: {config}")
    console.debug(
        "Deployment configuration",
        deployment_id=context.deployment_id,
        registry=config.registry_namespace,
        push=config.push_enabled,
        working_dir=config.working_dir,
    )

    check_dependencies()
    verify_env(config.working_dir)
    provision_infrastructure(declared_resources())

    services = build_service_specs(SERVICE_NAMES, config.registry_namespace)
    outcomes = build_and_publish(services, config, context)

    console.separator()
    console.success("Deployment preparation complete.")
    console.info(f"To start the stack run: {COMPOSE_UP_COMMAND}")
    return outcomes
