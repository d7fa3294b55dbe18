"""Sequential binary file access with typed bulk reads."""

import io
import logging
from pathlib import Path
from typing import Any

import numpy as np
import numpy.typing as npt

from routing_storage.exceptions import (
    FingerprintMismatch,
    OpenFailure,
    TruncatedFile,
    UnreadableSource,
)
from routing_storage.io.fingerprint import FINGERPRINT_DTYPE, Fingerprint

logger = logging.getLogger(__name__)


class BinaryFile:
    """
    Read-only handle on one binary artifact.

    Records are read in platform-native layout straight into caller-owned
    NumPy arrays. The handle owns its file object; use it as a context manager
    so the descriptor is released on every exit path.
    """

    def __init__(self, path: str | Path, check_fingerprint: bool = False) -> None:
        """
        Open a file for sequential reads.

        Args:
            path: File to open
            check_fingerprint: Read the leading fingerprint and require it to be
                fully compatible with the running build

        Raises:
            OpenFailure: The file cannot be opened
            FingerprintMismatch: The strict fingerprint check failed
        """
        self.path = str(path)
        try:
            self.file = open(path, "rb")
        except OSError as e:
            raise OpenFailure(self.path, e.strerror or str(e)) from e

        try:
            if check_fingerprint and not self.read_and_check_fingerprint():
                raise FingerprintMismatch(self.path, "prepared with an incompatible build")
        except Exception:
            self.close()
            raise

    def __enter__(self) -> "BinaryFile":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"BinaryFile({self.path!r})"

    @property
    def closed(self) -> bool:
        """Whether the underlying file has been closed."""
        return self.file.closed

    def close(self) -> None:
        """Release the file descriptor."""
        self.file.close()

    def read_into(self, dest: npt.NDArray[Any], count: int | None = None) -> None:
        """
        Read count records of dest's dtype into dest.

        The destination is never resized; it must already hold at least count
        elements. Reading zero records is a no-op.

        Raises:
            UnreadableSource: No bytes could be read at all
            TruncatedFile: The file ended before count records were read
        """
        if count is None:
            count = dest.size
        if count == 0:
            return

        if dest.dtype.hasobject:
            raise ValueError(f"Bytewise reading requires a plain data type, got {dest.dtype}")
        if not dest.flags.c_contiguous or not dest.flags.writeable:
            raise ValueError("Destination buffer must be writeable and C-contiguous")
        if count > dest.size:
            raise ValueError(f"Destination holds {dest.size} elements, {count} requested")

        expected_bytes = count * dest.itemsize
        buffer = dest.reshape(-1).view(np.uint8)[:expected_bytes]

        try:
            bytes_read = self.file.readinto(buffer)
        except OSError as e:
            raise UnreadableSource(self.path, e.strerror or str(e)) from e

        if not bytes_read:
            raise UnreadableSource(self.path, "no data left to read")
        if bytes_read < expected_bytes:
            raise TruncatedFile(
                self.path,
                f"Unexpected end of file (expected {expected_bytes} bytes, got {bytes_read})",
            )

    def read_one(self, dtype: npt.DTypeLike) -> Any:
        """Read a single record and return it by value."""
        value = np.empty(1, dtype=dtype)
        self.read_into(value)
        return value[0]

    def skip(self, count: int, dtype: npt.DTypeLike) -> None:
        """Move the read position past count records without reading them."""
        self.file.seek(count * np.dtype(dtype).itemsize, io.SEEK_CUR)

    def read_element_count32(self) -> int:
        """Read a uint32 element count."""
        return int(self.read_one(np.uint32))

    def read_element_count64(self) -> int:
        """Read a uint64 element count."""
        return int(self.read_one(np.uint64))

    def deserialize_vector(self, dtype: npt.DTypeLike) -> npt.NDArray[Any]:
        """Read a uint64 count followed by that many records into a new array."""
        count = self.read_element_count64()
        data = np.empty(count, dtype=dtype)
        self.read_into(data, count)
        return data

    def read_and_check_fingerprint(self) -> bool:
        """Read the fingerprint at the current position and apply the strict check."""
        loaded = Fingerprint.from_record(self.read_one(FINGERPRINT_DTYPE))
        valid = Fingerprint.get_valid()
        results = valid.compare(loaded)
        if not all(results.values()):
            failed = [name for name, passed in results.items() if not passed]
            logger.debug(f"Fingerprint of {self.path} failed checks: {', '.join(failed)}")
            return False
        return True

    def size(self) -> int:
        """Total length of the file in bytes; the read position is preserved."""
        current = self.file.tell()
        self.file.seek(0, io.SEEK_END)
        length = self.file.tell()
        self.file.seek(current, io.SEEK_SET)
        return length

    def read_lines(self) -> list[str]:
        """Read the rest of the file as newline-delimited text."""
        lines = []
        for raw in self.file:
            line = raw[:-1] if raw.endswith(b"\n") else raw
            logger.debug(f"Read {line!r}")
            lines.append(line.decode("utf-8", errors="surrogateescape"))
        return lines
