# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Hashing utilities for crossrel.

Archives are hashed while they are written (see
crossrel.release.packaging.hashing_writer). These helpers cover the other
direction: re-reading a file from disk to check it against a recorded digest.
"""

import hashlib
from pathlib import Path

HASH_ALGORITHM = "sha256"
HASH_BUFFER_SIZE = 65536  # 64 KiB
DIGEST_SIZE = 32


def new_hasher() -> "hashlib._Hash":
    """A fresh accumulator for the manifest's hash algorithm."""
    return hashlib.new(HASH_ALGORITHM)


def compute_sha256(file_path: Path) -> str:
    """
    Compute the SHA256 hex digest of a file.

    Reads the file in 64 KiB chunks so release archives of any size hash in
    constant memory.

    Args:
        file_path: Path to the file to hash.

    Returns:
        Lowercase hex string of the SHA256 digest.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        OSError: If the file can't be read.
    """
    hasher = new_hasher()
    with open(file_path, "rb") as f:
        while True:
            chunk = f.read(HASH_BUFFER_SIZE)
            if not chunk:
                break
            hasher.update(chunk)
    return hasher.hexdigest()
