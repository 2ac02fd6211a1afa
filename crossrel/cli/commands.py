# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the crossrel CLI.

Each function here corresponds to one CLI subcommand and returns an exit
code. Failures are logged as structured errors naming the operation that
failed; nothing is printed directly.
"""

import argparse
import logging
from pathlib import Path

from crossrel.cli.exit_codes import CONFIG_ERROR, RUNTIME_ERROR, SUCCESS, VALIDATION_ERROR
from crossrel.config.exceptions import ConfigError
from crossrel.config.loader import load_config
from crossrel.config.schema import CrossrelConfig
from crossrel.logging.logger import get_logger
from crossrel.release.exceptions import ArchiveError, BuildError, ManifestError, ReleaseError
from crossrel.runtime.bootstrap import bootstrap


def _load_and_bootstrap(
    args: argparse.Namespace,
    command_name: str,
) -> tuple[int, CrossrelConfig | None, logging.Logger]:
    """
    The shared setup every command needs: load config, run bootstrap.

    Returns a tuple of (exit_code, config, logger). If exit_code is not SUCCESS,
    the caller should return it immediately.
    """
    logger = get_logger(f"crossrel.cli.{command_name}", log_level=args.log_level or "INFO")

    config_path = Path(args.config) if args.config is not None else None
    try:
        config = load_config(config_path)
    except ConfigError as err:
        logger.error(
            "Configuration error",
            extra={"command": command_name, "error": str(err)},
        )
        return CONFIG_ERROR, None, logger

    if config_path is None:
        logger.debug("No config provided, using built-in catalog", extra={"command": command_name})

    bootstrap(config.global_config, log_level=args.log_level)
    return SUCCESS, config, logger


def _release_root(args: argparse.Namespace) -> Path:
    return Path(args.root) if getattr(args, "root", None) else Path.cwd()


def _failed_operation(err: ReleaseError) -> str:
    if isinstance(err, BuildError):
        return "build"
    if isinstance(err, ArchiveError):
        return "archive"
    if isinstance(err, ManifestError):
        return "manifest"
    return "toolchain"


def handle_release(args: argparse.Namespace) -> int:
    """Build every component for every platform, archive, and write the manifest."""
    exit_code, config, logger = _load_and_bootstrap(args, "release")
    if exit_code != SUCCESS or config is None:
        return exit_code

    settings = config.release
    base_dir = _release_root(args)

    if args.dry_run:
        from crossrel.release.orchestrator import plan_release

        for planned in plan_release(settings, base_dir, args.nobuild, args.noarchive):
            logger.info(
                "Dry run: would release platform",
                extra={
                    "platform": planned.platform,
                    "executables": [str(p) for p in planned.executables],
                    "archive": str(planned.archive) if planned.archive is not None else None,
                },
            )
        return SUCCESS

    from crossrel.release.orchestrator import run_release

    try:
        result = run_release(
            settings,
            base_dir,
            skip_build=args.nobuild,
            skip_archive=args.noarchive,
            keep_going=args.keep_going,
            toolchain=args.go,
        )
    except BuildError as err:
        logger.error(
            "Release failed",
            extra={"operation": "build", "error": str(err), "output": err.output},
        )
        return RUNTIME_ERROR
    except ReleaseError as err:
        logger.error(
            "Release failed",
            extra={"operation": _failed_operation(err), "error": str(err)},
        )
        return RUNTIME_ERROR
    except Exception as err:
        logger.error("Release failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR

    if not result.succeeded:
        logger.error(
            "Release finished with failed platforms",
            extra={"failed": [f.platform for f in result.failures]},
        )
        return RUNTIME_ERROR

    logger.info(
        "Release complete",
        extra={
            "archives": len(result.archives),
            "manifest": str(result.manifest_path) if result.manifest_path is not None else None,
        },
    )
    return SUCCESS


def handle_verify(args: argparse.Namespace) -> int:
    """Re-hash every archive listed in the manifest."""
    exit_code, config, logger = _load_and_bootstrap(args, "verify")
    if exit_code != SUCCESS or config is None:
        return exit_code

    from crossrel.release.checksums.integrity import verify_manifest
    from crossrel.release.manifests.manifest import default_manifest_path

    if args.manifest is not None:
        manifest_file = Path(args.manifest)
    else:
        manifest_file = default_manifest_path(
            _release_root(args), config.release.archive_dir, config.release.version
        )

    try:
        result = verify_manifest(manifest_file)
    except Exception as err:
        logger.error("Verification failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR

    if not result.is_valid:
        logger.error(
            "Manifest verification failed",
            extra={
                "manifest": str(manifest_file),
                "mismatches": result.mismatches,
                "missing": result.missing_files,
                "errors": result.errors,
            },
        )
        return VALIDATION_ERROR

    logger.info(
        "Manifest verified",
        extra={"manifest": str(manifest_file), "checked": result.checked_count},
    )
    return SUCCESS


def handle_info(args: argparse.Namespace) -> int:
    """Display crossrel, host, and catalog information."""
    exit_code, config, logger = _load_and_bootstrap(args, "info")
    if exit_code != SUCCESS or config is None:
        return exit_code

    from crossrel import __version__
    from crossrel.release.build.toolchain import find_toolchain
    from crossrel.runtime.environment import get_system_info

    system_info = get_system_info()
    settings = config.release

    logger.info(
        "System information",
        extra={
            "crossrel_version": __version__,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
            "hostname": system_info.hostname,
            "toolchain": settings.toolchain or find_toolchain(),
            "config": args.config,
        },
    )
    logger.info(
        "Release catalog",
        extra={
            "product": settings.product,
            "version": settings.version,
            "platforms": [p.name for p in settings.platforms],
            "components": [c.module for c in settings.components],
        },
    )
    return SUCCESS
