"""demod-deploy package."""

from __future__ import annotations

import os

from .dependencies import check_dependencies
from .deploy import run_deployment
from .env_bootstrap import render_env_template, verify_env
from .infrastructure import provision_infrastructure
from .models import RunConfig, ServiceSpec, build_service_specs
from .pipeline import build_and_publish, cleanup_build_links


def _build_version() -> str:
    override = os.getenv("DEMOD_DEPLOY_BUILD_VERSION")
    if override:
        return override
    return "1.0.0"


__version__ = _build_version()

__all__ = [
    "RunConfig",
    "ServiceSpec",
    "build_and_publish",
    "build_service_specs",
    "check_dependencies",
    "cleanup_build_links",
    "provision_infrastructure",
    "render_env_template",
    "run_deployment",
    "verify_env",
]
