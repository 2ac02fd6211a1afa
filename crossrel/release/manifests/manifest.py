# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The release checksum manifest.

One run produces at most one manifest, <archive_dir>/manifest-<version>.txt,
with one line per archive in the order the archives were written:

    <sha256hex>  <archive file name>
    <sha256hex>  <archive file name>

Lowercase hex, two spaces, base name, newline: the GNU coreutils sha256sum
format, so `sha256sum -c manifest-<version>.txt` works from inside the
archive directory.

Lines are NOT sorted. Platform order is the catalog order, and keeping it
makes two manifests of the same release diff cleanly.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

from crossrel.catalog.naming import manifest_filename
from crossrel.logging.logger import get_logger
from crossrel.release.exceptions import ManifestError
from crossrel.utils.filesystem import atomic_write
from crossrel.utils.hashing import DIGEST_SIZE
from crossrel.utils.paths import resolve_under

_logger: logging.Logger = get_logger(__name__)

_SEPARATOR = "  "


@dataclass(frozen=True)
class ManifestEntry:
    """One written archive: base name, digest of its bytes, and its length."""

    name: str
    digest: bytes
    size: int = 0

    def __post_init__(self) -> None:
        if len(self.digest) != DIGEST_SIZE:
            raise ValueError(
                f"Digest for {self.name} must be {DIGEST_SIZE} bytes, got {len(self.digest)}"
            )

    @property
    def hexdigest(self) -> str:
        return self.digest.hex()

    def line(self) -> str:
        return f"{self.hexdigest}{_SEPARATOR}{self.name}\n"


@dataclass
class Manifest:
    """
    Ordered, append-only list of entries for one run.

    Only the orchestrator appends, once per archive, from the single control
    thread.
    """

    entries: list[ManifestEntry] = field(default_factory=list)

    def append(self, entry: ManifestEntry) -> None:
        self.entries.append(entry)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ManifestEntry]:
        return iter(self.entries)

    def render(self) -> str:
        return "".join(entry.line() for entry in self.entries)


def manifest_path(archive_dir: Path, version: str) -> Path:
    return archive_dir / manifest_filename(version)


def write_manifest(manifest: Manifest, archive_dir: Path, version: str) -> Optional[Path]:
    """
    Write the manifest file, but only if there is something in it.

    Args:
        manifest: Entries accumulated over the run.
        archive_dir: Directory holding the archives.
        version: Release version, embedded in the file name.

    Returns:
        Path of the written file, or None if the manifest was empty
        (archiving skipped everywhere, which is a normal outcome).

    Raises:
        ManifestError: If the file can't be written.
    """
    if len(manifest) == 0:
        _logger.info("No archives produced, manifest not written")
        return None

    path = manifest_path(archive_dir, version)
    try:
        atomic_write(path, manifest.render())
    except OSError as err:
        raise ManifestError(f"Cannot write manifest {path}: {err}") from err

    _logger.info(
        "Manifest written",
        extra={"path": str(path), "entries": len(manifest)},
    )
    return path


def default_manifest_path(base_dir: Path, archive_dir: str, version: str) -> Path:
    """Manifest location for a release root and config values."""
    return manifest_path(resolve_under(base_dir, archive_dir), version)


def parse_manifest(path: Path) -> list[tuple[str, str]]:
    """
    Read a manifest back as (file name, sha256 hex) pairs in file order.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If a line doesn't match "<64 hex>  <name>".
    """
    if not path.is_file():
        raise FileNotFoundError(f"Manifest not found: {path}")

    entries: list[tuple[str, str]] = []
    content = path.read_text(encoding="utf-8")
    for line_num, line in enumerate(content.splitlines(), start=1):
        if not line.strip():
            continue
        parts = line.split(_SEPARATOR, maxsplit=1)
        if len(parts) != 2 or not parts[1]:
            raise ValueError(
                f"Invalid manifest line {line_num}: expected '<sha256>  <name>', got: {line!r}"
            )
        hex_digest, name = parts
        if len(hex_digest) != DIGEST_SIZE * 2 or hex_digest != hex_digest.lower():
            raise ValueError(
                f"Invalid digest at line {line_num}: expected {DIGEST_SIZE * 2} lowercase hex chars"
            )
        try:
            bytes.fromhex(hex_digest)
        except ValueError as err:
            raise ValueError(f"Invalid digest at line {line_num}: {err}") from err
        entries.append((name, hex_digest))

    return entries
