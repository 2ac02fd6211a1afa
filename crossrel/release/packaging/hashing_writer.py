# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
A write-only stream that hashes what passes through it.

HashingWriter forwards every chunk to a sink (normally the archive file) and
feeds the same bytes to a hash accumulator, so the archive's digest is known
the moment the last byte is written, without reading the file back.

It is deliberately not seekable: gzip and zipfile both accept such streams,
zipfile switching to data descriptors, which keeps every byte that reaches
the sink in strictly increasing order and therefore in the digest.
"""

import hashlib
import io
from typing import BinaryIO, Optional

from crossrel.utils.hashing import new_hasher


class HashingWriter(io.RawIOBase):
    """
    Tee writer: sink + hash accumulator + byte counter.

    Usage:
        with open(path, "wb") as fh:
            writer = HashingWriter(fh)
            with gzip.GzipFile(fileobj=writer, mode="wb") as gz:
                gz.write(data)
        writer.digest()  # hash of exactly the bytes that hit the file
    """

    def __init__(self, sink: BinaryIO, hasher: Optional["hashlib._Hash"] = None) -> None:
        super().__init__()
        self._sink = sink
        self._hasher = hasher if hasher is not None else new_hasher()
        self._written = 0

    def writable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return False

    def write(self, data) -> int:  # type: ignore[override]
        if self.closed:
            raise ValueError("write to closed HashingWriter")
        view = memoryview(data).cast("B")
        written = self._sink.write(view)
        # Raw sinks may take fewer bytes than offered; only what was taken counts.
        if written is None:
            written = len(view)
        self._hasher.update(view[:written])
        self._written += written
        return written

    def tell(self) -> int:
        """Bytes written so far. zipfile uses this to record entry offsets."""
        return self._written

    def flush(self) -> None:
        if not self.closed and not self._sink.closed:
            self._sink.flush()

    def close(self) -> None:
        # The sink belongs to the caller; closing the writer only flushes it.
        if not self.closed:
            self.flush()
        super().close()

    @property
    def bytes_written(self) -> int:
        return self._written

    def digest(self) -> bytes:
        return self._hasher.digest()

    def hexdigest(self) -> str:
        return self._hasher.hexdigest()
