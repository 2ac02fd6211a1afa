# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Toolchain discovery and the per-target build environment.

The toolchain is configured entirely through environment variables (GOOS,
GOARCH, CGO_ENABLED, GOFLAGS). Instead of setting those on the orchestrator's
own process, every invocation gets a BuildEnvironment rendered into a fresh
env mapping, so nothing from one target can leak into the next.
"""

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from typing import Mapping, Optional

from crossrel.logging.logger import get_logger
from crossrel.release.exceptions import ToolchainError

_logger: logging.Logger = get_logger(__name__)

DEFAULT_TOOLCHAIN = "go"
VERSION_TIMEOUT_SECONDS = 30


def find_toolchain(name: str = DEFAULT_TOOLCHAIN) -> Optional[str]:
    """Look the toolchain up on PATH. Returns None if it isn't there."""
    return shutil.which(name)


def resolve_toolchain(explicit: Optional[str] = None) -> str:
    """
    Pick the toolchain binary for a run.

    An explicit path (from --go or the config) wins; otherwise `go` is looked
    up on PATH.

    Raises:
        ToolchainError: If no explicit path was given and nothing is on PATH.
    """
    if explicit:
        return explicit

    found = find_toolchain()
    if found is None:
        raise ToolchainError(
            f"'{DEFAULT_TOOLCHAIN}' not found on PATH. Install it or pass --go <path>."
        )
    return found


def toolchain_version(toolchain: str) -> str:
    """
    Run `<toolchain> version` and return its output.

    Raises:
        ToolchainError: If the binary can't be executed or exits non-zero.
    """
    try:
        result = subprocess.run(
            [toolchain, "version"],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            timeout=VERSION_TIMEOUT_SECONDS,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as err:
        raise ToolchainError(f"Cannot run {toolchain} version: {err}") from err

    if result.returncode != 0:
        raise ToolchainError(
            f"{toolchain} version exited with status {result.returncode}: {result.stdout.strip()}"
        )

    version = result.stdout.strip()
    _logger.info(
        "Releasing with toolchain",
        extra={"toolchain": toolchain, "version": version},
    )
    return version


@dataclass(frozen=True)
class BuildEnvironment:
    """
    Target selection for one toolchain invocation.

    CGO stays off for pure cross-compilation, and GOFLAGS is always cleared
    so flags inherited from the caller's shell cannot change the build mode.
    """

    goos: str
    goarch: str
    cgo_enabled: bool = False

    def overrides(self) -> dict[str, str]:
        return {
            "GOOS": self.goos,
            "GOARCH": self.goarch,
            "CGO_ENABLED": "1" if self.cgo_enabled else "0",
            "GOFLAGS": "",
        }

    def render(self, base: Optional[Mapping[str, str]] = None) -> dict[str, str]:
        """
        The full environment for the subprocess.

        Starts from `base` (the current process environment by default) and
        overwrites every variable this object controls.
        """
        env = dict(os.environ if base is None else base)
        env.update(self.overrides())
        return env
