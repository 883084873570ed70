"""
Exception hierarchy for demod-deploy.

Every stage raises one of these instead of exiting; the CLI turns them into a
colored error line and the process exit code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(eq=False)
class DeployError(Exception):
    """Base exception carrying the user-facing message and exit code."""

    message: str
    service: Optional[str] = None
    exit_code: int = 1

    def __str__(self) -> str:
        return self.message


class MissingDependencyError(DeployError):
    """Raised when a required executable is not on PATH."""


class MissingConfigFileError(DeployError):
    """Raised after the .env template was generated on first run."""


class InfrastructureCreationError(DeployError):
    """Raised when a docker network or volume cannot be created."""


class BuildError(DeployError):
    """Raised when nix build fails for a service."""


class LoadError(DeployError):
    """Raised when a built image cannot be loaded into docker."""


class TagError(DeployError):
    """Raised when docker tag fails for a loaded image."""


class PushError(DeployError):
    """Raised when docker push fails for a remote tag."""


class UnrecognizedFlagError(DeployError):
    """Raised by the argument parser for unknown options or bad values."""
