"""nix build wrapper."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional

from .commands import run_cmd


def build_target(target: str, out_link: str, cwd: Optional[Path] = None) -> subprocess.CompletedProcess:
    """Run `nix build <target> --out-link <out_link>` with live output."""
    return run_cmd(
        ['nix', 'build', target, '--out-link', out_link],
        cwd=cwd,
        capture_output=False,
    )
