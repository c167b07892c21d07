"""kubelint CLI - Command-line interface for manifest validation.

This module provides the main CLI entrypoint for kubelint, allowing users
to validate K8s manifests from the command line.
"""

import argparse
import logging
import sys

from kubelint.core.config import DEFAULT_CONFIG_PATH, get_config_value, load_config
from kubelint.core.errors import InputError
from kubelint.core.pipeline import ValidationOptions, validate_paths
from kubelint.k8s.catalog import build_default_catalog

logger = logging.getLogger(__name__)

INPUT_ERROR_EXIT = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kubelint",
        description="kubelint - K8s manifest validation and structural linting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate a manifest
  kubelint validate deployment.yaml

  # Validate a directory and standard input as one batch
  cat extra.yaml | kubelint validate manifests/ -

  # Machine-readable output, unknown fields as errors
  kubelint validate app.yaml --format json --strict

  # Parallel validation
  kubelint validate manifests/ --workers 8

Note:
  Defaults are read from kubelint.json (see --config), e.g.
  {"validation": {"strict": true, "workers": 4}}.
"""
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Validate command
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate K8s manifests"
    )
    validate_parser.add_argument(
        "paths",
        nargs="+",
        help="Files or directories to validate; '-' reads standard input"
    )
    validate_parser.add_argument(
        "--format",
        choices=("text", "json", "jsonl"),
        default="text",
        help="Report format (default: text)"
    )
    validate_parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Report unknown fields as errors (default: from config or off)"
    )
    validate_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads for per-document validation (default: from config or 1)"
    )
    validate_parser.add_argument(
        "--no-crds",
        action="store_true",
        help="Do not register kinds declared by CustomResourceDefinitions in the batch"
    )
    validate_parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to config file (default: {DEFAULT_CONFIG_PATH})"
    )
    validate_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    # Kinds command
    kinds_parser = subparsers.add_parser(
        "kinds",
        help="List the built-in apiVersion/kind pairs"
    )
    kinds_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show deprecation notes"
    )

    return parser


def _setup_logging(verbose: bool, config) -> None:
    if verbose:
        level = logging.INFO
    else:
        name = str(get_config_value(["logging", "level"], "WARNING", config)).upper()
        level = getattr(logging, name, logging.WARNING)
    logging.basicConfig(level=level, format='%(levelname)s: %(message)s')


def main(argv=None):
    """Main CLI entrypoint for kubelint."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    config = load_config(getattr(args, "config", DEFAULT_CONFIG_PATH))
    _setup_logging(getattr(args, "verbose", False), config)

    # Handle commands
    if args.command == "validate":
        return cmd_validate(args, config)
    elif args.command == "kinds":
        return cmd_kinds(args)
    else:
        parser.print_help()
        return 1


def cmd_validate(args, config):
    """Handle validate command."""
    try:
        options = ValidationOptions.from_config(config)
    except ValueError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return INPUT_ERROR_EXIT

    # CLI args override config.json
    if args.strict is not None:
        options.strict = args.strict
    if args.workers is not None:
        options.workers = max(1, args.workers)
    if args.no_crds:
        options.discover_crds = False

    catalog = build_default_catalog()
    try:
        report = validate_paths(args.paths, catalog, options, stdin=sys.stdin)
    except InputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return INPUT_ERROR_EXIT

    if args.format == "json":
        print(report.to_json())
    elif args.format == "jsonl":
        print(report.to_jsonl())
    else:
        print(report.format_text())
    return report.exit_code


def cmd_kinds(args):
    """Handle kinds command."""
    catalog = build_default_catalog()
    for schema in sorted(catalog, key=lambda s: (s.kind.kind, s.kind.api_version)):
        line = f"{schema.kind.api_version:<32} {schema.kind.kind}"
        if schema.deprecated:
            line += "  (deprecated)"
            if args.verbose:
                line += f": {schema.deprecated}"
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
