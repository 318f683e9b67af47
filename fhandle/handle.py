"""File handles with a backend chosen at open time."""

import logging
from types import TracebackType
from typing import Optional, Type, Union

from fhandle.backends.interface import Buffer, FileBackend, PathLike
from fhandle.backends.stdio import StdioBackend
from fhandle.backends.stream import StreamBackend
from fhandle.common.errors import UnknownBackendKindError, fatal_error
from fhandle.common.models import HandleKind, SeekOrigin

logger = logging.getLogger("fhandle.handle")


def _create_backend(kind: Union[HandleKind, str]) -> FileBackend:
    """Create the backend instance for *kind*. Unknown kinds are fatal."""
    try:
        kind = HandleKind(kind)
    except ValueError:
        fatal_error("open_handle: unknown file handle type!", UnknownBackendKindError)

    if kind == HandleKind.STANDARD:
        return StdioBackend()

    elif kind == HandleKind.ABSTRACT_STREAM:
        return StreamBackend()

    fatal_error("open_handle: unknown file handle type!", UnknownBackendKindError)


class FileHandle:
    """Uniform I/O surface over one backend.

    The handle owns its backend (and through it the underlying resource)
    from construction until :meth:`close`. Every operation is a direct
    pass-through; I/O failures come back as return values, never as
    exceptions.

    Usage:
        handle = open_handle("srb2.pk3", "rb", HandleKind.STANDARD)
        if handle is None:
            ...
        with handle:
            magic = handle.read(1, 4)
            total = handle.size()
    """

    def __init__(self, backend: FileBackend, path: PathLike = "") -> None:
        self._backend: Optional[FileBackend] = backend
        self._kind = backend.kind
        self.path = path

    @property
    def kind(self) -> HandleKind:
        return self._kind

    @property
    def closed(self) -> bool:
        return self._backend is None

    def read(self, size: int, count: int = 1) -> bytes:
        """Read up to *count* elements of *size* bytes.

        Returns:
            The whole elements read; shorter than ``size * count`` on end of
            stream or error
        """
        buffer = bytearray(max(size * count, 0))
        n = self._backend.readinto(buffer, size, count)  # type: ignore[union-attr]
        return bytes(buffer[: n * size])

    def readinto(self, buffer: Buffer, size: int, count: int) -> int:
        """Read into *buffer*; returns the number of whole elements read."""
        return self._backend.readinto(buffer, size, count)  # type: ignore[union-attr]

    def write(self, data: bytes, size: int = 1, count: Optional[int] = None) -> int:
        """Write *count* elements of *size* bytes (default: all of *data*)."""
        if count is None:
            count = len(data) // size if size > 0 else 0
        return self._backend.write(data, size, count)  # type: ignore[union-attr]

    def seek(self, offset: int, origin: int = SeekOrigin.START) -> int:
        return self._backend.seek(offset, origin)  # type: ignore[union-attr]

    def tell(self) -> int:
        return self._backend.tell()  # type: ignore[union-attr]

    def size(self) -> int:
        return self._backend.size()  # type: ignore[union-attr]

    def get_char(self) -> int:
        return self._backend.get_char()  # type: ignore[union-attr]

    def get_line(self, buffer: Buffer, length: int) -> Optional[bytes]:
        """Read a line into ``buffer[:length]``, NUL-terminated.

        Nothing is ever written at or past ``buffer[length]``.

        Raises:
            ValueError: If *length* exceeds the buffer
        """
        view = memoryview(buffer)
        if length > len(view):
            raise ValueError(f"length {length} exceeds buffer of {len(view)} bytes")
        return self._backend.get_line(view[: max(length, 0)], length)  # type: ignore[union-attr]

    def check_error(self) -> bool:
        return self._backend.check_error()  # type: ignore[union-attr]

    def at_end(self) -> bool:
        return self._backend.at_end()  # type: ignore[union-attr]

    def last_error(self) -> Optional[str]:
        return self._backend.error()  # type: ignore[union-attr]

    def close(self) -> int:
        """Close the backend and release the handle.

        The handle is released even when the backend reports a failure.

        Returns:
            0 on success, nonzero on failure
        """
        backend = self._backend
        self._backend = None
        status = backend.close()  # type: ignore[union-attr]
        if status != 0:
            logger.warning("%s: close of %s failed (status %d)", backend.name, self.path, status)  # type: ignore[union-attr]
        else:
            logger.debug("%s: closed %s", backend.name, self.path)  # type: ignore[union-attr]
        return status

    def __enter__(self) -> "FileHandle":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if not self.closed:
            self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<FileHandle {self._kind.value} {self.path!s} ({state})>"


def open_handle(path: PathLike, mode: str, kind: Union[HandleKind, str]) -> Optional[FileHandle]:
    """Open *path* with the backend selected by *kind*.

    Args:
        path: File path, passed through unchanged
        mode: fopen-style mode string ("rb", "wb", "r+", "a"...)
        kind: Backend to use

    Returns:
        An open handle, or None if the backend could not open the file.
        An unknown *kind* terminates the process.
    """
    backend = _create_backend(kind)
    if not backend.open(path, mode):
        logger.debug("%s: open failed for %s (%r)", backend.name, path, mode)
        return None

    logger.debug("%s: opened %s (%r)", backend.name, path, mode)
    return FileHandle(backend, path)
