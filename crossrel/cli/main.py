# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for crossrel.

This is the single root command; every operation is a subcommand of
`crossrel`. The global options (--config, --log-level, --dry-run) are
inherited by every subcommand through argparse's parent parser mechanism.

Usage:
    crossrel release
    crossrel release --go /usr/local/go/bin/go --noarchive
    crossrel release --nobuild --config configs/release.yaml
    crossrel verify
    crossrel info
"""

import argparse
import sys

from crossrel.cli.commands import handle_info, handle_release, handle_verify
from crossrel.cli.exit_codes import USER_ERROR


def _build_global_parser() -> argparse.ArgumentParser:
    """
    Build the parent parser with global options.

    We use a separate parent parser (with add_help=False) so that help text
    doesn't collide between the parent and the subcommand parsers.
    """
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a YAML release config. Defaults to the built-in catalog.",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default=None,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level (overrides the config).",
    )
    parent.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="Log what would be done without building or writing anything.",
    )
    parent.add_argument(
        "--root",
        type=str,
        default=None,
        help="Release root that relative config paths resolve against (default: cwd).",
    )
    return parent


def _register_subcommands(
    subparsers: argparse._SubParsersAction,  # type: ignore[type-arg]
    parent: argparse.ArgumentParser,
) -> None:
    """Register all subcommands with their handler functions."""
    release_parser = subparsers.add_parser(
        "release",
        parents=[parent],
        help="Build, archive, and write the checksum manifest.",
    )
    release_parser.add_argument(
        "--go",
        type=str,
        default=None,
        help="Toolchain binary (default: 'go' found on PATH).",
    )
    release_parser.add_argument(
        "--nobuild",
        action="store_true",
        default=False,
        help="Skip the build phase and archive existing executables.",
    )
    release_parser.add_argument(
        "--noarchive",
        action="store_true",
        default=False,
        help="Skip archiving; no manifest is written.",
    )
    release_parser.add_argument(
        "--keep-going",
        action="store_true",
        default=False,
        dest="keep_going",
        help="Continue with the next platform after a failure instead of aborting.",
    )
    release_parser.set_defaults(func=handle_release)

    verify_parser = subparsers.add_parser(
        "verify",
        parents=[parent],
        help="Re-hash archives and compare against the manifest.",
    )
    verify_parser.add_argument(
        "--manifest",
        type=str,
        default=None,
        help="Manifest to verify (default: <archive_dir>/manifest-<version>.txt).",
    )
    verify_parser.set_defaults(func=handle_verify)

    info_parser = subparsers.add_parser(
        "info",
        parents=[parent],
        help="Display host, toolchain, and catalog info.",
    )
    info_parser.set_defaults(func=handle_info)


def main() -> None:
    """
    Main CLI entrypoint. This is what pyproject.toml's [project.scripts] points to.

    If no subcommand is given, we show help and exit with USER_ERROR.
    """
    parent = _build_global_parser()

    root_parser = argparse.ArgumentParser(
        prog="crossrel",
        description="crossrel — cross-compile, archive, and checksum a release.",
        parents=[parent],
    )
    subparsers = root_parser.add_subparsers(dest="command")
    _register_subcommands(subparsers, parent)

    args = root_parser.parse_args()

    if not hasattr(args, "func") or args.func is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
