"""
Docker CLI wrappers.

Each function issues exactly one docker invocation (load_image additionally
runs the image stream script) and returns the CompletedProcess; deciding
whether a non-zero exit is fatal is left to the calling stage.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional

from .commands import format_cmd, run_cmd
from .models import InfrastructureResource

logger = logging.getLogger(__name__)


def resource_exists(resource: InfrastructureResource) -> bool:
    """Return True when `docker <kind> inspect <name>` succeeds."""
    result = run_cmd(['docker', resource.kind.value, 'inspect', resource.name])
    return result.returncode == 0


def create_resource(resource: InfrastructureResource) -> subprocess.CompletedProcess:
    return run_cmd(['docker', resource.kind.value, 'create', resource.name])


def load_image(artifact: Path, cwd: Optional[Path] = None) -> subprocess.CompletedProcess:
    """
    Stream a built image into `docker load`.

    The nix build output is an executable that writes the image tarball to
    stdout, so this is the equivalent of `./result-<service> | docker load`.
    The returned exit code follows pipefail semantics: docker load's status if
    it failed, otherwise the stream script's.
    """
    load_cmd = ['docker', 'load']
    stream_cmd = [str(artifact)]
    logger.debug(f"Running: {format_cmd(stream_cmd)} | {format_cmd(load_cmd)}")

    try:
        producer = subprocess.Popen(stream_cmd, cwd=cwd, stdout=subprocess.PIPE)
    except OSError as e:
        logger.debug(f"Cannot execute build output {artifact}: {e}")
        return subprocess.CompletedProcess(load_cmd, 126, '', str(e))

    try:
        loaded = subprocess.run(
            load_cmd,
            cwd=cwd,
            stdin=producer.stdout,
            capture_output=True,
            text=True,
        )
    finally:
        producer.stdout.close()
        producer.wait()

    returncode = loaded.returncode or producer.returncode
    logger.debug(f"  exit codes: stream={producer.returncode} load={loaded.returncode}")
    return subprocess.CompletedProcess(load_cmd, returncode, loaded.stdout, loaded.stderr)


def tag_image(source: str, target: str) -> subprocess.CompletedProcess:
    return run_cmd(['docker', 'tag', source, target])


def push_image(tag: str) -> subprocess.CompletedProcess:
    """Push with live progress output."""
    return run_cmd(['docker', 'push', tag], capture_output=False)
