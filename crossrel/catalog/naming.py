# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Naming rules shared by the builder, the archiver, and the manifest.

Everything here is a pure function of catalog data. No timestamps, no build
IDs: the same (platform, component) always maps to the same path, which is
what keeps re-runs comparable.
"""

from pathlib import PurePosixPath

# The one OS that gets an executable suffix and zip packaging.
WINDOWS_OS = "windows"
EXE_SUFFIX = ".exe"

TAR_GZ_FORMAT = "tar.gz"
ZIP_FORMAT = "zip"


def exe_name(module: str, goos: str) -> str:
    """
    Executable file name for a module built for `goos`.

    The name is the last segment of the module path, e.g.
    "github.com/decred/dcrd/cmd/dcrctl" -> "dcrctl" ("dcrctl.exe" on windows).
    """
    # TODO: major-version module paths ("example.com/tool/v2") should take the
    # segment before the version suffix instead of "v2".
    exe = module.rstrip("/").rsplit("/", maxsplit=1)[-1]
    if goos == WINDOWS_OS:
        exe += EXE_SUFFIX
    return exe


def platform_dirname(goos: str, goarch: str) -> str:
    """Directory name used under the output root, e.g. "linux-amd64"."""
    return f"{goos}-{goarch}"


def archive_format(goos: str) -> str:
    """Zip for windows, gzip-compressed tar for everything else."""
    if goos == WINDOWS_OS:
        return ZIP_FORMAT
    return TAR_GZ_FORMAT


def archive_stem(product: str, goos: str, goarch: str, version: str) -> str:
    """
    Archive base name without extension.

    This is also the single top-level directory inside the archive.
    """
    return f"{product}-{goos}-{goarch}-{version}"


def archive_filename(product: str, goos: str, goarch: str, version: str) -> str:
    return f"{archive_stem(product, goos, goarch, version)}.{archive_format(goos)}"


def archive_member(stem: str, exe: str) -> str:
    """Path of an executable inside the archive, always with forward slashes."""
    return str(PurePosixPath(stem) / exe)


def manifest_filename(version: str) -> str:
    return f"manifest-{version}.txt"
