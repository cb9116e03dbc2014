# hiera_tfstate/cli/tfstate.py
"""
This module provides a CLI interface to look at a Terraform state the way the
Hiera backend sees it. It supports two main operations (verbs): 'dump' and 'get'.

- The 'dump' command prints the complete flattened mapping (YAML or JSON).
- The 'get' command prints the value stored under a single key.

If no command is provided, the script will show usage instructions.

Usage Examples:
    python -m hiera_tfstate.cli.tfstate dump \
        --backend file \
        --statefile terraform.tfstate

    python -m hiera_tfstate.cli.tfstate get tfstate::aws_instance::web::id \
        --backend s3 \
        --bucket my-states \
        --key prod/terraform.tfstate \
        --profile prod \
        --no-root-module
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Tuple

from hiera_tfstate.core.convert import dump_flat_map
from hiera_tfstate.core.flatten import FlatMap
from hiera_tfstate.errors import HieraTfstateError
from hiera_tfstate.lookup import data_hash, lookup_key

# Command-line destinations that end up in the backend options hash.
_OPTION_FIELDS = (
    "backend",
    "statefile",
    "bucket",
    "key",
    "profile",
    "endpoint",
    "region",
    "url",
    "timeout",
)


def _split_header(header: str) -> Tuple[str, str]:
    """Split a "Name: value" header argument."""
    name, _, value = header.partition(":")
    return name.strip(), value.strip()


def _options_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """Build the backend options hash from parsed arguments, skipping unset ones."""
    options: Dict[str, Any] = {
        name: getattr(args, name)
        for name in _OPTION_FIELDS
        if getattr(args, name) is not None
    }
    if args.header:
        options["headers"] = dict(_split_header(header) for header in args.header)
    options["no_root_module"] = args.no_root_module
    options["debug"] = args.debug
    return options


def _load(args: argparse.Namespace) -> FlatMap:
    """Run the lookup, exiting with status 1 on any hiera_tfstate error."""
    try:
        return asyncio.run(data_hash(_options_from_args(args)))
    except HieraTfstateError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)


def _format_value(value: Any) -> str:
    """Scalars are printed as-is, compound values as JSON."""
    if isinstance(value, (dict, list)):
        return json.dumps(value, indent=2)
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _dump(args: argparse.Namespace) -> None:
    """Print the complete flattened mapping.

    Args:
        args (argparse.Namespace):
            The command-line arguments, including:
            - format (str): "yaml" (default) or "json".
    """
    flat = _load(args)
    if args.format == "json":
        print(json.dumps(flat, indent=2))
    else:
        print(dump_flat_map(flat), end="")


def _get(args: argparse.Namespace) -> None:
    """Print the value of a single flattened key.

    Args:
        args (argparse.Namespace):
            The command-line arguments, including:
            - lookup_key (str): The key, with or without the leading `tfstate::`.

    Raises:
        SystemExit: With status 2 if the key does not exist.
    """
    flat = _load(args)
    try:
        value = lookup_key(flat, args.lookup_key)
    except KeyError:
        print(f"ERROR: key '{args.lookup_key}' not found", file=sys.stderr)
        sys.exit(2)
    print(_format_value(value))


def _add_backend_arguments(parser: argparse.ArgumentParser) -> None:
    """Arguments shared by every subcommand."""
    parser.add_argument(
        "--backend",
        default="file",
        help="Where to load the state from: file, s3 or http (default: file).",
    )
    parser.add_argument(
        "--statefile",
        help="Path to the state file (file backend).",
    )
    parser.add_argument("--bucket", help="Bucket holding the state (s3 backend).")
    parser.add_argument("--key", help="Object key of the state (s3 backend).")
    parser.add_argument(
        "--profile", help="AWS shared-credentials profile (s3 backend)."
    )
    parser.add_argument(
        "--endpoint",
        help="S3 endpoint, e.g. minio.local:9000 (s3 backend, default from settings).",
    )
    parser.add_argument("--region", help="S3 region (s3 backend).")
    parser.add_argument("--url", help="State address (http backend).")
    parser.add_argument(
        "--header",
        action="append",
        default=[],
        help="Extra 'Name: value' request header, repeatable (http backend).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Total request timeout in seconds (http backend).",
    )
    parser.add_argument(
        "--no-root-module",
        action="store_true",
        default=False,
        help="Strip the leading module.<name> from every key; all resources must be in a module.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Log the complete flattened mapping (needs --verbose to be visible).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging.",
    )


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point for inspecting a flattened Terraform state.

    This function parses command-line arguments to determine whether the user
    wants to 'dump' the whole mapping or 'get' a single key, and dispatches to
    the matching handler.
    """
    parser = argparse.ArgumentParser(
        prog="hiera-tfstate",
        description="Flatten a Terraform state into Hiera-style tfstate:: keys.",
    )
    subparsers = parser.add_subparsers(dest="command", required=False)

    #
    # dump subcommand
    #
    dump_parser = subparsers.add_parser(
        "dump",
        help="Print the complete flattened mapping.",
    )
    dump_parser.add_argument(
        "--format",
        choices=("yaml", "json"),
        default="yaml",
        help="Output format (default: yaml).",
    )
    _add_backend_arguments(dump_parser)
    dump_parser.set_defaults(func=_dump)

    #
    # get subcommand
    #
    get_parser = subparsers.add_parser(
        "get",
        help="Print the value stored under a single key.",
    )
    get_parser.add_argument(
        "lookup_key",
        metavar="KEY",
        help="Key to look up, e.g. tfstate::aws_instance::web::id.",
    )
    _add_backend_arguments(get_parser)
    get_parser.set_defaults(func=_get)

    # Parse the arguments
    args = parser.parse_args(argv)

    # If no subcommand is provided, print help and exit
    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Run the chosen command
    args.func(args)


if __name__ == "__main__":
    main()
