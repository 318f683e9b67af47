"""Abstract interface for file handle backends."""

import os
from abc import ABC, abstractmethod
from typing import Optional, Union

from fhandle.common.models import HandleKind

Buffer = Union[bytearray, memoryview]
PathLike = Union[str, os.PathLike]


class FileBackend(ABC):
    """Abstract base class for file handle backends.

    A backend owns exactly one I/O resource and implements the full
    operation set over it. Failures never raise: every operation reports
    through its return value or a sentinel.

    Available implementations:
    - StdioBackend: buffered file from the standard library (Standard)
    - StreamBackend: abstract reader-seeker stream (AbstractStream)
    """

    kind: HandleKind

    @abstractmethod
    def open(self, path: PathLike, mode: str) -> bool:
        """Open the backend resource.

        Args:
            path: File path, passed through unchanged
            mode: fopen-style mode string

        Returns:
            True if the resource was opened
        """
        pass

    @abstractmethod
    def readinto(self, buffer: Buffer, size: int, count: int) -> int:
        """Read up to *count* elements of *size* bytes into *buffer*.

        Returns:
            Number of whole elements read. Fewer than *count* means end of
            stream or error; use ``check_error``/``at_end`` to tell them apart.
        """
        pass

    @abstractmethod
    def write(self, data: bytes, size: int, count: int) -> int:
        """Write *count* elements of *size* bytes from *data*.

        Returns:
            Number of whole elements written
        """
        pass

    @abstractmethod
    def seek(self, offset: int, origin: int) -> int:
        """Move the stream position.

        Returns:
            0 on success, -1 on failure
        """
        pass

    @abstractmethod
    def tell(self) -> int:
        """Current stream position, or -1 on failure."""
        pass

    @abstractmethod
    def size(self) -> int:
        """Total stream length in bytes, or -1 on failure."""
        pass

    @abstractmethod
    def get_char(self) -> int:
        """Read one byte.

        Returns:
            Byte value 0..255, or ``EOF`` at end of stream or on error
        """
        pass

    @abstractmethod
    def get_line(self, buffer: memoryview, length: int) -> Optional[bytes]:
        """Read a line into ``buffer[:length]`` and NUL-terminate it.

        *buffer* is already bounded to *length* bytes by the caller.

        Returns:
            The bytes read (without terminator), or None on failure
        """
        pass

    @abstractmethod
    def close(self) -> int:
        """Release the resource. Returns 0 on success, nonzero on failure."""
        pass

    @abstractmethod
    def error(self) -> Optional[str]:
        """Description of the last failure, or None."""
        pass

    @abstractmethod
    def at_end(self) -> bool:
        """End-of-stream predicate."""
        pass

    def check_error(self) -> bool:
        """Error predicate. Backends without a native error flag report False."""
        return False

    @property
    def name(self) -> str:
        """Get backend name for logging."""
        return self.__class__.__name__
