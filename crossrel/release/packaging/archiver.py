# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Per-platform release archives.

Every platform gets exactly one archive named

    <archive_dir>/<product>-<os>-<arch>-<version>.tar.gz   (or .zip on windows)

whose single top-level directory carries the same name as the archive, minus
the extension:

    decred-linux-amd64-v1.5.0-rc1/
    ├─ dcrd
    ├─ dcrctl
    └─ ...

The archive digest is computed while the archive is written: the file handle
is wrapped in a HashingWriter, so the hash covers exactly the bytes on disk
(the compressed bytes, for tar.gz) and nothing is read back afterwards.

tar.gz archives are staged: the plain tar stream goes to <stem>.tar next to
the final file, is then streamed through gzip into <stem>.tar.gz, and the
staging file is removed. Memory use stays flat no matter how large the
executables are.

Archive entries are normalized (mtime 0, root ownership, fixed modes, no
gzip file name) so two runs over identical executables produce identical
layouts.
"""

import gzip
import logging
import shutil
import tarfile
import zipfile
from pathlib import Path

from crossrel.catalog.naming import (
    ZIP_FORMAT,
    archive_filename,
    archive_format,
    archive_member,
    archive_stem,
    exe_name,
)
from crossrel.config.schema import Component, Platform, ReleaseConfig
from crossrel.logging.logger import get_logger
from crossrel.release.build.builder import platform_output_dir
from crossrel.release.exceptions import ArchiveError
from crossrel.release.manifests.manifest import ManifestEntry
from crossrel.release.packaging.hashing_writer import HashingWriter
from crossrel.utils.filesystem import safe_delete
from crossrel.utils.hashing import HASH_BUFFER_SIZE
from crossrel.utils.paths import display_path, ensure_directory, resolve_under

_logger: logging.Logger = get_logger(__name__)

DIR_MODE = 0o755
EXE_MODE = 0o755

# Earliest timestamp a zip entry can carry.
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


def _collect_executables(
    platform: Platform,
    components: list[Component],
    settings: ReleaseConfig,
    base_dir: Path,
) -> list[tuple[str, Path]]:
    """
    (exe name, path on disk) for every component, in catalog order.

    Raises:
        ArchiveError: If any executable is missing. Archiving runs after a
                      successful build, so a gap means the tree is broken.
    """
    exe_dir = platform_output_dir(settings, platform, base_dir)
    executables: list[tuple[str, Path]] = []
    for component in components:
        exe = exe_name(component.module, platform.os)
        exe_path = exe_dir / exe
        if not exe_path.is_file():
            raise ArchiveError(
                f"Executable for {component.module} ({platform.name}) not found at {exe_path}. "
                f"Build the platform before archiving it."
            )
        executables.append((exe, exe_path))
    return executables


def _tar_info(name: str, type_: bytes, mode: int, size: int = 0) -> tarfile.TarInfo:
    info = tarfile.TarInfo(name)
    info.type = type_
    info.mode = mode
    info.size = size
    info.mtime = 0
    info.uid = 0
    info.gid = 0
    info.uname = ""
    info.gname = ""
    return info


def _write_tar(tar_path: Path, stem: str, executables: list[tuple[str, Path]]) -> None:
    """Write the uncompressed tar stream: directory header, then one file per executable."""
    with tarfile.open(tar_path, mode="w", format=tarfile.PAX_FORMAT) as tar:
        tar.addfile(_tar_info(stem + "/", tarfile.DIRTYPE, DIR_MODE))
        for exe, exe_path in executables:
            info = _tar_info(
                archive_member(stem, exe),
                tarfile.REGTYPE,
                EXE_MODE,
                size=exe_path.stat().st_size,
            )
            with open(exe_path, "rb") as exe_file:
                tar.addfile(info, exe_file)


def _compress_tar(tar_path: Path, archive_path: Path) -> tuple[bytes, int]:
    """
    Stream the staged tar through gzip into the final archive.

    Returns:
        (digest, size) of the compressed bytes written to archive_path.
    """
    with open(archive_path, "wb") as archive_file:
        writer = HashingWriter(archive_file)
        with gzip.GzipFile(fileobj=writer, mode="wb", filename="", mtime=0) as gz:
            with open(tar_path, "rb") as tar_file:
                shutil.copyfileobj(tar_file, gz, HASH_BUFFER_SIZE)
        writer.close()
    return writer.digest(), writer.bytes_written


def _archive_tar_gz(
    archive_path: Path,
    stem: str,
    executables: list[tuple[str, Path]],
) -> tuple[bytes, int]:
    tar_path = archive_path.with_name(stem + ".tar")
    try:
        _write_tar(tar_path, stem, executables)
        return _compress_tar(tar_path, archive_path)
    finally:
        safe_delete(tar_path)


def _archive_zip(
    archive_path: Path,
    stem: str,
    executables: list[tuple[str, Path]],
) -> tuple[bytes, int]:
    """Write a zip with one deflated entry per executable, hashing the container bytes."""
    with open(archive_path, "wb") as archive_file:
        writer = HashingWriter(archive_file)
        with zipfile.ZipFile(writer, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
            for exe, exe_path in executables:
                info = zipfile.ZipInfo(archive_member(stem, exe), date_time=ZIP_EPOCH)
                info.compress_type = zipfile.ZIP_DEFLATED
                info.external_attr = (0o100000 | EXE_MODE) << 16
                info.file_size = exe_path.stat().st_size
                with open(exe_path, "rb") as exe_file, zf.open(info, mode="w") as entry:
                    shutil.copyfileobj(exe_file, entry, HASH_BUFFER_SIZE)
        writer.close()
    return writer.digest(), writer.bytes_written


def archive_platform(
    platform: Platform,
    components: list[Component],
    settings: ReleaseConfig,
    base_dir: Path,
) -> ManifestEntry:
    """
    Package every executable built for `platform` into one archive.

    Args:
        platform: Platform whose executables get packaged.
        components: Components to include, in archive order.
        settings: Release settings (product, version, directories).
        base_dir: Release root; output_root and archive_dir resolve against it.

    Returns:
        The manifest entry for the written archive.

    Raises:
        ArchiveError: If an executable is missing or any write fails. A failed
                      write may leave a partial archive behind.
    """
    executables = _collect_executables(platform, components, settings, base_dir)

    archive_dir = resolve_under(base_dir, settings.archive_dir)
    try:
        ensure_directory(archive_dir)
    except OSError as err:
        raise ArchiveError(f"Cannot create archive directory {archive_dir}: {err}") from err

    stem = archive_stem(settings.product, platform.os, platform.arch, settings.version)
    archive_path = archive_dir / archive_filename(
        settings.product, platform.os, platform.arch, settings.version
    )

    _logger.info(
        "Archiving",
        extra={
            "archive": display_path(archive_path, base_dir),
            "platform": platform.name,
            "executables": len(executables),
        },
    )

    try:
        if archive_format(platform.os) == ZIP_FORMAT:
            digest, size = _archive_zip(archive_path, stem, executables)
        else:
            digest, size = _archive_tar_gz(archive_path, stem, executables)
    except (OSError, tarfile.TarError, zipfile.BadZipFile, zipfile.LargeZipFile) as err:
        raise ArchiveError(f"Failed to write {archive_path}: {err}") from err

    entry = ManifestEntry(name=archive_path.name, digest=digest, size=size)
    _logger.debug(
        "Archive written",
        extra={"archive": entry.name, "sha256": entry.hexdigest, "size": size},
    )
    return entry
