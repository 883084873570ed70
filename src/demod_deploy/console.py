#!/usr/bin/env python3
"""
Console output and run tracking for demod-deploy.

Human-facing messages go through the colored helpers below. Subprocess
tracing uses module loggers configured by configure_logging().
"""

from __future__ import annotations

import logging
import os
import time
import uuid
from typing import TypedDict

from .config_constants import NO_COLOR_ENV
from .models import PipelineOutcome, ServiceState


# Color codes for output
BLUE = '\033[94m'
GREEN = '\033[92m'
YELLOW = '\033[93m'
RED = '\033[91m'
RESET = '\033[0m'

# Debug output is opt-in and tied to the configured log level.
DEBUG_ENABLED = False

logger = logging.getLogger(__name__)


def set_debug_enabled(log_level: str | None) -> None:
    """Enable debug output when log_level is DEBUG (case-insensitive)."""
    global DEBUG_ENABLED
    DEBUG_ENABLED = str(log_level or '').strip().upper() == 'DEBUG'


def configure_logging(log_level: str = "INFO") -> None:
    """
    Configure logging module with specified level.
    """
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR
    }

    level = level_map.get(log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='[%(levelname)s] %(message)s',
        force=True
    )
    set_debug_enabled(log_level)

    logger.debug(f"Logging configured: {log_level.upper()}")


def _paint(color: str, label: str) -> str:
    if os.environ.get(NO_COLOR_ENV):
        return label
    return f"{color}{label}{RESET}"


def _emit(color: str, label: str, msg: str, context: dict) -> None:
    print(f"{_paint(color, label)} {msg}", flush=True)
    for key, value in context.items():
        print(f"  {key}: {value}", flush=True)


def info(msg, **context):
    """Log info message with optional structured context."""
    _emit(BLUE, '[INFO]', msg, context)


def success(msg, **context):
    """Log success message with optional structured context."""
    _emit(GREEN, '[SUCCESS]', msg, context)


def warn(msg, **context):
    """Log warning message with optional structured context."""
    _emit(YELLOW, '[WARN]', msg, context)


def error(msg, **context):
    """Log error message with optional structured context."""
    _emit(RED, '[ERROR]', msg, context)


def debug(msg, **context):
    """Log debug message (only shown when DEBUG logging is enabled)."""
    if not DEBUG_ENABLED:
        return
    _emit(BLUE, '[DEBUG]', msg, context)


def separator() -> None:
    print("-" * 64, flush=True)


class DeploymentSummary(TypedDict):
    deployment_id: str
    duration_seconds: int
    services_completed: int
    services_failed: int
    failed_service: str | None


class DeploymentContext:
    """Track pipeline progress for reporting and error handling."""

    def __init__(self) -> None:
        self.deployment_id = uuid.uuid4().hex[:8]
        self.start_time = time.time()
        self.states: dict[str, ServiceState] = {}
        self.outcomes: dict[str, PipelineOutcome] = {}

    def set_service(self, service_name: str) -> None:
        self.states[service_name] = ServiceState.PENDING

    def set_state(self, service_name: str, state: ServiceState) -> None:
        self.states[service_name] = state
        debug(f"{service_name}: {state.value}")

    def mark_built(self, service_name: str) -> None:
        self.outcomes[service_name] = PipelineOutcome.BUILT

    def record_outcome(self, service_name: str, outcome: PipelineOutcome) -> None:
        self.outcomes[service_name] = outcome
        if outcome.failed:
            self.states[service_name] = ServiceState.ABORTED
        else:
            self.states[service_name] = ServiceState.DONE

    def get_summary(self) -> DeploymentSummary:
        duration_seconds = int(time.time() - self.start_time)
        failed = [name for name, state in self.states.items() if state == ServiceState.ABORTED]
        completed = [name for name, state in self.states.items() if state == ServiceState.DONE]
        return {
            'deployment_id': self.deployment_id,
            'duration_seconds': duration_seconds,
            'services_completed': len(completed),
            'services_failed': len(failed),
            'failed_service': failed[0] if failed else None,
        }

    def print_summary(self, failed: bool) -> None:
        summary = self.get_summary()
        if failed:
            print(f"\n{_paint(RED, '[DEPLOYMENT FAILED]')}", flush=True)
        else:
            print(f"\n{_paint(GREEN, '[DEPLOYMENT PREPARED]')}", flush=True)
        print(f"  Deployment ID: {summary['deployment_id']}", flush=True)
        print(f"  Duration: {summary['duration_seconds']}s", flush=True)
        print(f"  Services completed: {summary['services_completed']}", flush=True)
        print(f"  Services failed: {summary['services_failed']}", flush=True)
        if summary['failed_service']:
            print(f"  Failed service: {summary['failed_service']}", flush=True)
