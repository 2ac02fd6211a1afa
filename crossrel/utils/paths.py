# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Path utilities for crossrel.

Every path in the config is relative to the release root (the directory the
orchestrator runs from). These helpers keep that resolution in one place.
"""

from pathlib import Path


def ensure_directory(path: Path) -> Path:
    """
    Create a directory (and parents) if it doesn't exist. Returns the path for chaining.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def resolve_under(base_dir: Path, relative: str) -> Path:
    """
    Resolve a config path against the release root.

    Absolute paths are returned as they are, so a config may point the
    output root somewhere outside the tree.
    """
    candidate = Path(relative)
    if candidate.is_absolute():
        return candidate
    return base_dir / candidate


def display_path(path: Path, base_dir: Path) -> str:
    """Path relative to the release root for log lines, falling back to the full path."""
    try:
        return path.relative_to(base_dir).as_posix()
    except ValueError:
        return str(path)
