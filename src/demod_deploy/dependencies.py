"""Host tooling check."""

from __future__ import annotations

import os
import shutil
from typing import Iterable

from . import console
from .config_constants import REQUIRED_EXECUTABLES, SKIP_DEPENDENCY_CHECK_ENV
from .exceptions import MissingDependencyError


def check_dependencies(executables: Iterable[str] = REQUIRED_EXECUTABLES) -> None:
    """
    Validate that required executables are resolvable on PATH.

    Stops at the first missing executable and raises MissingDependencyError.
    """
    # Allow tests to bypass dependency checking
    if os.getenv(SKIP_DEPENDENCY_CHECK_ENV) == '1':
        console.debug(f"{SKIP_DEPENDENCY_CHECK_ENV}=1: skipping dependency check")
        return

    console.info("Checking dependencies...")
    for cmd in executables:
        path = shutil.which(cmd)
        if path is None:
            raise MissingDependencyError(f"Missing required dependency: {cmd}")
        console.debug(f"Found {cmd}: {path}")
