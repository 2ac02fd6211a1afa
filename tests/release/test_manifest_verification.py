# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for re-verifying a written manifest against the archives on disk.
"""

import hashlib
from pathlib import Path

from crossrel.release.checksums.integrity import verify_manifest
from crossrel.release.manifests.manifest import Manifest, ManifestEntry, write_manifest


def _write_release(archive_dir: Path, files: dict[str, bytes]) -> Path:
    archive_dir.mkdir(parents=True, exist_ok=True)
    manifest = Manifest()
    for name, payload in files.items():
        (archive_dir / name).write_bytes(payload)
        manifest.append(ManifestEntry(name=name, digest=hashlib.sha256(payload).digest()))
    return write_manifest(manifest, archive_dir, "v1.0.0")


class TestVerifyManifest:
    def test_intact_release_passes(self, tmp_path: Path) -> None:
        path = _write_release(tmp_path / "archive", {"a.tar.gz": b"aaa", "b.zip": b"bbb"})

        result = verify_manifest(path)

        assert result.is_valid
        assert result.checked_count == 2
        assert result.mismatches == []
        assert result.missing_files == []

    def test_tampered_archive_is_reported(self, tmp_path: Path) -> None:
        archive_dir = tmp_path / "archive"
        path = _write_release(archive_dir, {"a.tar.gz": b"aaa", "b.zip": b"bbb"})
        (archive_dir / "b.zip").write_bytes(b"tampered")

        result = verify_manifest(path)

        assert not result.is_valid
        assert result.mismatches == ["b.zip"]
        assert result.checked_count == 2

    def test_every_problem_is_reported(self, tmp_path: Path) -> None:
        archive_dir = tmp_path / "archive"
        path = _write_release(archive_dir, {"a.tar.gz": b"a", "b.tar.gz": b"b", "c.zip": b"c"})
        (archive_dir / "a.tar.gz").unlink()
        (archive_dir / "c.zip").write_bytes(b"changed")

        result = verify_manifest(path)

        assert not result.is_valid
        assert result.missing_files == ["a.tar.gz"]
        assert result.mismatches == ["c.zip"]
        assert result.checked_count == 2

    def test_missing_manifest(self, tmp_path: Path) -> None:
        result = verify_manifest(tmp_path / "manifest-v9.txt")
        assert not result.is_valid
        assert "not found" in result.errors[0]

    def test_unparseable_manifest(self, tmp_path: Path) -> None:
        path = tmp_path / "manifest-v1.txt"
        path.write_text("this is not a manifest\n", encoding="utf-8")

        result = verify_manifest(path)

        assert not result.is_valid
        assert result.checked_count == 0
        assert result.errors
