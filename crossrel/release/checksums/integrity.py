# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Re-verification of a written release manifest.

The archiver hashes archives while writing them. This module does the
independent check a downstream consumer would do: read the manifest, re-hash
every listed archive from disk, and compare. Archives are looked up next to
the manifest file.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from crossrel.logging.logger import get_logger
from crossrel.release.manifests.manifest import parse_manifest
from crossrel.utils.hashing import compute_sha256

_logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a manifest verification run."""

    is_valid: bool
    checked_count: int
    mismatches: list[str] = field(default_factory=list)
    missing_files: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def verify_manifest(manifest_file: Path) -> VerificationResult:
    """
    Verify every archive listed in a manifest.

    Reports all mismatches and missing files, not just the first one.

    Args:
        manifest_file: Path to manifest-<version>.txt.

    Returns:
        VerificationResult with pass/fail status and details.
    """
    if not manifest_file.is_file():
        return VerificationResult(
            is_valid=False,
            checked_count=0,
            errors=[f"Manifest not found: {manifest_file}"],
        )

    try:
        expected = parse_manifest(manifest_file)
    except ValueError as err:
        return VerificationResult(
            is_valid=False,
            checked_count=0,
            errors=[f"Failed to parse {manifest_file.name}: {err}"],
        )

    archive_dir = manifest_file.parent
    mismatches: list[str] = []
    missing_files: list[str] = []
    checked = 0

    for filename, expected_hash in expected:
        archive_path = archive_dir / filename
        if not archive_path.is_file():
            missing_files.append(filename)
            _logger.error("Archive missing during verification", extra={"archive": filename})
            continue

        actual_hash = compute_sha256(archive_path)
        checked += 1

        if actual_hash != expected_hash:
            mismatches.append(filename)
            _logger.error(
                "Checksum mismatch",
                extra={
                    "archive": filename,
                    "expected": expected_hash[:16] + "...",
                    "actual": actual_hash[:16] + "...",
                },
            )
        else:
            _logger.debug("Checksum verified", extra={"archive": filename})

    is_valid = not mismatches and not missing_files

    if is_valid:
        _logger.info("All checksums verified", extra={"checked_count": checked})
    else:
        _logger.error(
            "Checksum verification failed",
            extra={"mismatches": len(mismatches), "missing": len(missing_files)},
        )

    return VerificationResult(
        is_valid=is_valid,
        checked_count=checked,
        mismatches=mismatches,
        missing_files=missing_files,
    )
