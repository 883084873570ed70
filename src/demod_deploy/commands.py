"""Subprocess helpers shared by the docker and nix wrappers."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Exit status a shell reports for a command it cannot find
COMMAND_NOT_FOUND = 127


def format_cmd(cmd: list[str]) -> str:
    return ' '.join(cmd)


def run_cmd(
    cmd: list[str],
    cwd: Optional[Path] = None,
    capture_output: bool = True,
    text: bool = True,
) -> subprocess.CompletedProcess:
    """
    Run a command and return the result.

    Non-zero exit codes are returned, not raised; callers decide which
    failures abort the run. With capture_output=False the command's output
    streams straight to the terminal (used for long builds and pushes).
    """
    logger.debug(f"Running: {format_cmd(cmd)}")
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=capture_output,
            text=text,
        )
    except FileNotFoundError as e:
        logger.debug(f"Command not found: {cmd[0]} ({e})")
        return subprocess.CompletedProcess(cmd, COMMAND_NOT_FOUND, '', str(e))

    logger.debug(f"  exit code: {result.returncode}")
    return result
