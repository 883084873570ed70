"""
First-run gate for the docker compose secrets file.

If the .env file is missing, a template with placeholder secrets is written
and the run stops so the operator can fill it in before anything is built.
"""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import Optional

from jinja2 import StrictUndefined, Template

from . import console
from .config_constants import ENV_FILE, ENV_TEMPLATE, ENV_TEMPLATE_DEFAULTS
from .exceptions import MissingConfigFileError

logger = logging.getLogger(__name__)


def render_env_template(values: Optional[dict] = None) -> str:
    """
    Render the packaged .env template.

    values overrides individual ENV_TEMPLATE_DEFAULTS entries.
    """
    context = dict(ENV_TEMPLATE_DEFAULTS)
    if values:
        context.update(values)

    template_content = (resources.files(__package__) / 'templates' / ENV_TEMPLATE).read_text(encoding='utf-8')
    logger.debug(f"Rendering {ENV_TEMPLATE} ({len(template_content)} bytes)")

    template = Template(template_content, undefined=StrictUndefined, keep_trailing_newline=True)
    return template.render(**context)


def verify_env(working_dir: Path) -> None:
    """
    Ensure <working_dir>/.env exists.

    Raises MissingConfigFileError after writing the template when it does not.
    """
    env_path = Path(working_dir) / ENV_FILE
    if env_path.exists():
        console.debug(f"Found {env_path}")
        return

    console.warn(f"No {ENV_FILE} file found. Creating from template...")
    env_path.write_text(render_env_template(), encoding='utf-8')
    console.warn(f"Created {ENV_FILE} template. Please edit it before starting the stack.")
    raise MissingConfigFileError(
        f"{env_path} was just created with placeholder values; edit it and re-run"
    )
