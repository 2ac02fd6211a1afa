# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Release orchestration: build, archive, manifest.

For each platform, in catalog order:

    build every component  ──►  archive the platform  ──►  append manifest entry

and once all platforms are done, write the manifest if anything was archived.
Both phases can be switched off independently: skip_build re-packages an
existing bin/ tree, skip_archive just builds.

Everything runs sequentially on the calling thread. Failures surface as
ReleaseError subclasses. The default policy is fail-fast: the first error
ends the run, later platforms are never touched, and nothing already on disk
is rolled back. With keep_going the failing platform is recorded and the run
moves on to the next one; the manifest then lists only the platforms that
made it.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from crossrel.catalog.naming import archive_filename
from crossrel.config.schema import Platform, ReleaseConfig
from crossrel.logging.logger import get_logger
from crossrel.release.build.builder import build_component, executable_path
from crossrel.release.build.toolchain import resolve_toolchain, toolchain_version
from crossrel.release.exceptions import ReleaseError
from crossrel.release.manifests.manifest import Manifest, write_manifest
from crossrel.release.packaging.archiver import archive_platform
from crossrel.utils.paths import resolve_under

_logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class PlatformFailure:
    """A platform abandoned under keep_going."""

    platform: str
    error: str


@dataclass
class RunResult:
    """What a release run left on disk. Filled in as platforms complete."""

    executables: list[Path] = field(default_factory=list)
    archives: list[Path] = field(default_factory=list)
    manifest: Manifest = field(default_factory=Manifest)
    manifest_path: Optional[Path] = None
    failures: list[PlatformFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failures


@dataclass(frozen=True)
class PlannedPlatform:
    """Dry-run view of one platform's work."""

    platform: str
    executables: list[Path]
    archive: Optional[Path]


def plan_release(
    settings: ReleaseConfig,
    base_dir: Path,
    skip_build: bool = False,
    skip_archive: bool = False,
) -> list[PlannedPlatform]:
    """What a run with these settings would build and write, without doing it."""
    archive_dir = resolve_under(base_dir, settings.archive_dir)
    plan: list[PlannedPlatform] = []
    for platform in settings.platforms:
        executables = []
        if not skip_build:
            executables = [
                executable_path(settings, component, platform, base_dir)
                for component in settings.components
            ]
        archive = None
        if not skip_archive:
            archive = archive_dir / archive_filename(
                settings.product, platform.os, platform.arch, settings.version
            )
        plan.append(PlannedPlatform(platform=platform.name, executables=executables, archive=archive))
    return plan


def _release_platform(
    platform: Platform,
    settings: ReleaseConfig,
    base_dir: Path,
    toolchain: Optional[str],
    skip_archive: bool,
    env: Optional[Mapping[str, str]],
    result: RunResult,
) -> None:
    # No toolchain means the build phase is off.
    if toolchain is not None:
        for component in settings.components:
            built = build_component(component, platform, settings, toolchain, base_dir, env=env)
            result.executables.append(built.path)

    if skip_archive:
        return

    entry = archive_platform(platform, settings.components, settings, base_dir)
    result.manifest.append(entry)
    result.archives.append(resolve_under(base_dir, settings.archive_dir) / entry.name)


def run_release(
    settings: ReleaseConfig,
    base_dir: Path,
    skip_build: bool = False,
    skip_archive: bool = False,
    keep_going: bool = False,
    toolchain: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> RunResult:
    """
    Run the full release pipeline over the catalog in `settings`.

    Args:
        settings: Validated release config (catalog + release identity).
        base_dir: Release root; every relative path in settings resolves here.
        skip_build: Don't invoke the toolchain; archive what is already in output_root.
        skip_archive: Build only; no archives, and therefore no manifest.
        keep_going: Record a failing platform and continue instead of aborting.
        toolchain: Toolchain binary. Falls back to settings.toolchain, then PATH.
        env: Base environment for toolchain subprocesses (defaults to os.environ).

    Returns:
        RunResult describing the executables, archives, and manifest written.

    Raises:
        ReleaseError: On the first failure, unless keep_going is set. Toolchain
                      discovery failures always abort, since no platform
                      could build without it.
    """
    resolved_toolchain: Optional[str] = None
    if not skip_build:
        resolved_toolchain = resolve_toolchain(toolchain or settings.toolchain)
        toolchain_version(resolved_toolchain)

    _logger.info(
        "Release started",
        extra={
            "product": settings.product,
            "version": settings.version,
            "platforms": len(settings.platforms),
            "components": len(settings.components),
            "skip_build": skip_build,
            "skip_archive": skip_archive,
        },
    )

    result = RunResult()
    for platform in settings.platforms:
        try:
            _release_platform(
                platform,
                settings,
                base_dir,
                resolved_toolchain,
                skip_archive,
                env,
                result,
            )
        except ReleaseError as err:
            _logger.error(
                "Platform failed",
                extra={"platform": platform.name, "error": str(err)},
            )
            if not keep_going:
                raise
            result.failures.append(PlatformFailure(platform=platform.name, error=str(err)))

    path = write_manifest(
        result.manifest,
        resolve_under(base_dir, settings.archive_dir),
        settings.version,
    )
    result.manifest_path = path

    _logger.info(
        "Release finished",
        extra={
            "executables": len(result.executables),
            "archives": len(result.archives),
            "manifest": str(path) if path is not None else None,
            "failures": len(result.failures),
        },
    )
    return result
