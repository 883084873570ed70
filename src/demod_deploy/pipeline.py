#!/usr/bin/env python3
"""
Build-and-publish pipeline.

For each service, in declaration order:
1. nix build .#docker-<service> --out-link result-<service>
2. ./result-<service> | docker load        -> demod/<service>:latest
3. docker tag demod/<service>:latest <namespace>/<service>:latest
4. docker push <namespace>/<service>:latest (only with --push)

Any failure aborts the whole run; later services are never attempted. The
result-* build links are removed on every exit path.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from . import console, docker, nix
from .config_constants import BUILD_LINK_PREFIX
from .console import DeploymentContext
from .exceptions import BuildError, DeployError, LoadError, PushError, TagError
from .models import PipelineOutcome, RunConfig, ServiceSpec, ServiceState

logger = logging.getLogger(__name__)


FAILURE_ERRORS: dict[PipelineOutcome, type[DeployError]] = {
    PipelineOutcome.BUILD_FAILED: BuildError,
    PipelineOutcome.LOAD_FAILED: LoadError,
    PipelineOutcome.PUSH_FAILED: PushError,
}

FAILURE_MESSAGES = {
    PipelineOutcome.BUILD_FAILED: "Nix build failed for {service}",
    PipelineOutcome.LOAD_FAILED: "Failed to load Docker image for {service}",
    PipelineOutcome.PUSH_FAILED: "Failed to push {tag} for {service}",
}


def _stderr_tail(result) -> str:
    stderr = (getattr(result, 'stderr', '') or '').strip()
    if not stderr:
        return ''
    return stderr.splitlines()[-1]


def process_service(spec: ServiceSpec, config: RunConfig, context: DeploymentContext) -> PipelineOutcome:
    """
    Run build, load, tag and optional push for one service.

    Build, load and push failures are returned as outcomes so the caller can
    halt; a failing retag raises TagError directly.
    """
    working_dir = config.working_dir

    context.set_state(spec.name, ServiceState.BUILDING)
    build = nix.build_target(spec.build_target, spec.out_link, cwd=working_dir)
    if build.returncode != 0:
        return PipelineOutcome.BUILD_FAILED
    context.mark_built(spec.name)

    console.info("Build successful. Loading into Docker...")
    artifact = (Path(working_dir) / spec.out_link).absolute()
    loaded = docker.load_image(artifact, cwd=working_dir)
    if loaded.returncode != 0:
        tail = _stderr_tail(loaded)
        if tail:
            console.error(tail)
        return PipelineOutcome.LOAD_FAILED
    context.set_state(spec.name, ServiceState.LOADED)
    console.info(f"Image loaded: {spec.local_tag}")

    tagged = docker.tag_image(spec.local_tag, spec.remote_tag)
    if tagged.returncode != 0:
        raise TagError(
            f"Failed to tag {spec.local_tag} as {spec.remote_tag}: {_stderr_tail(tagged) or 'docker tag failed'}",
            service=spec.name,
        )
    context.set_state(spec.name, ServiceState.TAGGED)
    console.info(f"Tagged as: {spec.remote_tag}")

    if not config.push_enabled:
        context.set_state(spec.name, ServiceState.SKIPPED)
        return PipelineOutcome.TAG_ONLY

    console.info(f"Pushing {spec.remote_tag} to Docker Hub...")
    pushed = docker.push_image(spec.remote_tag)
    if pushed.returncode != 0:
        return PipelineOutcome.PUSH_FAILED
    context.set_state(spec.name, ServiceState.PUSHED)
    console.success(f"Pushed {spec.remote_tag}")
    return PipelineOutcome.PUSHED


def cleanup_build_links(working_dir: Path) -> list[Path]:
    """
    Remove result-* build links (and stray files) from working_dir.

    Runs on the abort path too, so removal errors are only warned about.
    """
    removed = []
    for path in sorted(Path(working_dir).glob(f"{BUILD_LINK_PREFIX}*")):
        if not (path.is_symlink() or path.is_file()):
            continue
        try:
            path.unlink()
        except OSError as e:
            console.warn(f"Could not remove build link {path.name}: {e}")
            continue
        removed.append(path)
    if removed:
        logger.debug(f"Removed build links: {[p.name for p in removed]}")
    return removed


def build_and_publish(
    services: Iterable[ServiceSpec],
    config: RunConfig,
    context: Optional[DeploymentContext] = None,
) -> dict[str, PipelineOutcome]:
    """
    Process every service in order, stopping at the first failure.

    Returns the outcome per service name. Raises BuildError, LoadError,
    TagError or PushError on the first failing service.
    """
    if context is None:
        context = DeploymentContext()

    console.info("Starting Nix builds...")
    try:
        for spec in services:
            console.separator()
            console.info(f"Processing service: {spec.name}")
            context.set_service(spec.name)

            try:
                outcome = process_service(spec, config, context)
            except DeployError:
                context.set_state(spec.name, ServiceState.ABORTED)
                raise

            context.record_outcome(spec.name, outcome)
            if outcome.failed:
                message = FAILURE_MESSAGES[outcome].format(service=spec.name, tag=spec.remote_tag)
                raise FAILURE_ERRORS[outcome](message, service=spec.name)
    finally:
        cleanup_build_links(config.working_dir)

    return dict(context.outcomes)
