#!/usr/bin/env python3
"""
demod-deploy CLI entry point.

Usage:
    demod-deploy [-p] [-r NAMESPACE] [-d PATH]

Options:
    -p, --push        Push images to Docker Hub after building
    -r, --registry    Registry namespace for remote tags (default: alh477)
    -d, --dir         Working directory holding flake.nix and .env (default: cwd)
    -h, --help        Show this help message
"""

from __future__ import annotations

import argparse
import os
from importlib.metadata import PackageNotFoundError, version as package_version
from pathlib import Path
from typing import Optional

from . import console
from .config_constants import COMPOSE_UP_COMMAND, DEFAULT_REGISTRY_NAMESPACE, LOG_LEVEL_ENV
from .console import DeploymentContext
from .deploy import run_deployment
from .exceptions import DeployError, MissingConfigFileError, UnrecognizedFlagError
from .models import RunConfig

UNRECOGNIZED_PREFIX = 'unrecognized arguments: '


def get_cli_version() -> str:
    try:
        return package_version("demod-deploy")
    except PackageNotFoundError:
        from . import __version__

        return __version__


class DeployArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting with status 2."""

    def error(self, message):
        if message.startswith(UNRECOGNIZED_PREFIX):
            message = f"Unknown option: {message[len(UNRECOGNIZED_PREFIX):]}"
        raise UnrecognizedFlagError(message)


def registry_namespace(value: str) -> str:
    value = value.strip()
    if not value or any(ch.isspace() for ch in value):
        raise argparse.ArgumentTypeError(f"invalid registry namespace: {value!r}")
    return value


def build_parser() -> DeployArgumentParser:
    parser = DeployArgumentParser(
        prog='demod-deploy',
        allow_abbrev=False,
        description='Build, load, tag and optionally push the DeMoD service images',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f'''
Examples:
  # Build and load all images locally
  %(prog)s

  # Build and push under a custom namespace
  %(prog)s --push --registry acme

After a successful run start the stack with: {COMPOSE_UP_COMMAND}
        '''
    )

    parser.add_argument(
        '-p', '--push',
        dest='push',
        action='store_true',
        help='Push images to Docker Hub after building'
    )

    parser.add_argument(
        '-r', '--registry',
        type=registry_namespace,
        default=DEFAULT_REGISTRY_NAMESPACE,
        metavar='NAMESPACE',
        help=f'Specify registry namespace (default: {DEFAULT_REGISTRY_NAMESPACE})'
    )

    parser.add_argument(
        '-d', '--dir',
        type=Path,
        default=None,
        metavar='PATH',
        help='Working directory containing flake.nix and .env (default: current directory)'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {get_cli_version()}'
    )

    return parser


def parse_arguments(argv: Optional[list] = None, parser: Optional[argparse.ArgumentParser] = None) -> argparse.Namespace:
    """
    Parse command-line arguments for demod-deploy.

    Raises UnrecognizedFlagError for unknown options or invalid values;
    -h/--help and --version exit with status 0.
    """
    if parser is None:
        parser = build_parser()
    return parser.parse_args(argv)


def build_run_config(args: argparse.Namespace) -> RunConfig:
    working_dir = args.dir if args.dir is not None else Path.cwd()
    return RunConfig(
        registry_namespace=args.registry,
        push_enabled=args.push,
        working_dir=working_dir,
    )


def main(argv: Optional[list] = None) -> int:
    console.configure_logging(os.getenv(LOG_LEVEL_ENV, 'INFO'))

    parser = build_parser()
    try:
        args = parse_arguments(argv, parser)
    except UnrecognizedFlagError as e:
        console.error(str(e))
        parser.print_usage()
        return e.exit_code

    config = build_run_config(args)
    context = DeploymentContext()
    try:
        run_deployment(config, context)
    except MissingConfigFileError as e:
        return e.exit_code
    except DeployError as e:
        if e.service:
            console.error(str(e), service=e.service)
        else:
            console.error(str(e))
        if context.states:
            context.print_summary(failed=True)
        return e.exit_code
    except KeyboardInterrupt:
        console.warn("User interrupted deployment")
        return 130

    context.print_summary(failed=False)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
