# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Errors raised by the release pipeline.

Every phase raises a ReleaseError subclass instead of exiting the process.
The orchestrator decides whether a failure ends the run, and the CLI turns
whatever reaches it into a logged diagnostic plus RUNTIME_ERROR.
"""


class ReleaseError(Exception):
    """Base for all release pipeline failures."""


class ToolchainError(ReleaseError):
    """The toolchain binary could not be found, executed, or queried."""


class BuildError(ReleaseError):
    """
    A toolchain invocation failed.

    `output` holds the combined stdout/stderr of the failed invocation so the
    caller can surface the compiler's own diagnostics.
    """

    def __init__(self, message: str, output: str = "", returncode: int | None = None) -> None:
        super().__init__(message)
        self.output = output
        self.returncode = returncode


class ArchiveError(ReleaseError):
    """Packaging a platform's executables failed."""


class ManifestError(ReleaseError):
    """The checksum manifest could not be written."""
