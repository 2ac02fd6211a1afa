# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Cross-compiles one component for one platform.

Each build runs:

    <toolchain> build -trimpath -tags <tags> -o <out> -ldflags <ldflags> <module>

from the component's build directory, with the target selected through a
BuildEnvironment. The output always lands at

    <release root>/<output_root>/<os>-<arch>/<exe name>

so the archiver can find it again without any bookkeeping between phases.
"""

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from crossrel.catalog.naming import exe_name, platform_dirname
from crossrel.config.schema import Component, Platform, ReleaseConfig
from crossrel.logging.logger import get_logger
from crossrel.release.build.toolchain import BuildEnvironment
from crossrel.release.exceptions import BuildError, ToolchainError
from crossrel.utils.paths import display_path, ensure_directory, resolve_under

_logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class BuildResult:
    """One executable produced by the toolchain."""

    module: str
    platform: str
    path: Path
    output: str


def platform_output_dir(settings: ReleaseConfig, platform: Platform, base_dir: Path) -> Path:
    """Directory holding every executable built for `platform`."""
    return resolve_under(base_dir, settings.output_root) / platform_dirname(platform.os, platform.arch)


def executable_path(
    settings: ReleaseConfig,
    component: Component,
    platform: Platform,
    base_dir: Path,
) -> Path:
    """Where the executable for (component, platform) is written. Fully deterministic."""
    return platform_output_dir(settings, platform, base_dir) / exe_name(component.module, platform.os)


def build_command(
    toolchain: str,
    component: Component,
    output_path: Path,
    settings: ReleaseConfig,
) -> list[str]:
    """The argument list for one build invocation."""
    return [
        toolchain,
        "build",
        "-trimpath",
        "-tags",
        ",".join(settings.tags),
        "-o",
        str(output_path),
        "-ldflags",
        settings.ldflags,
        component.module,
    ]


def build_component(
    component: Component,
    platform: Platform,
    settings: ReleaseConfig,
    toolchain: str,
    base_dir: Path,
    env: Optional[Mapping[str, str]] = None,
) -> BuildResult:
    """
    Build `component` for `platform`.

    Args:
        component: What to build.
        platform: Which OS/architecture to build for.
        settings: Release settings (tags, ldflags, output root).
        toolchain: Toolchain binary to invoke.
        base_dir: Release root; output_root and build_dir resolve against it.
        env: Base environment for the subprocess. Defaults to os.environ;
             the target variables are overwritten either way.

    Returns:
        BuildResult with the executable path and the toolchain's output.

    Raises:
        ToolchainError: If the toolchain binary can't be executed.
        BuildError: If the toolchain exits non-zero or the output is missing.
    """
    output_path = executable_path(settings, component, platform, base_dir).resolve()
    build_dir = resolve_under(base_dir, component.build_dir)
    build_env = BuildEnvironment(goos=platform.os, goarch=platform.arch)
    args = build_command(toolchain, component, output_path, settings)

    _logger.info(
        "Building",
        extra={
            "output": display_path(output_path, base_dir.resolve()),
            "component": component.module,
            "platform": platform.name,
            "build_dir": str(build_dir),
        },
    )

    try:
        ensure_directory(output_path.parent)
    except OSError as err:
        raise BuildError(f"Cannot create output directory {output_path.parent}: {err}") from err

    try:
        result = subprocess.run(
            args,
            cwd=str(build_dir),
            env=build_env.render(env),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=False,
        )
    except FileNotFoundError as err:
        # Either the toolchain or the build directory is missing; cwd errors
        # carry the directory as the filename.
        if err.filename is not None and Path(err.filename) == build_dir:
            raise BuildError(f"Build directory not found: {build_dir}") from err
        raise ToolchainError(f"Cannot execute toolchain {toolchain}: {err}") from err
    except OSError as err:
        raise BuildError(f"Cannot run build for {component.module} ({platform.name}): {err}") from err

    output = result.stdout or ""
    if output:
        _logger.info(
            "Toolchain output",
            extra={"command": shlex.join(args[1:]), "output": output},
        )

    if result.returncode != 0:
        raise BuildError(
            f"Build of {component.module} for {platform.name} failed "
            f"with exit status {result.returncode}",
            output=output,
            returncode=result.returncode,
        )

    if not output_path.is_file():
        raise BuildError(
            f"Toolchain reported success but {output_path} was not written",
            output=output,
            returncode=result.returncode,
        )

    return BuildResult(
        module=component.module,
        platform=platform.name,
        path=output_path,
        output=output,
    )
