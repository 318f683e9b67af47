"""Abstract reader-seeker streams.

A small stream subsystem modelled on the multimedia-library I/O objects the
AbstractStream backend is built for. Streams only expose raw primitives with
status codes:

- ``seek``/``tell``/``size``/``close`` return ``-1`` on failure
- ``read``/``write`` return the number of whole objects transferred

There is no end-of-stream query and no per-stream error message. Failures
record a human readable message in a thread-local, subsystem-wide error
string read with :func:`get_error`. Successful calls leave it untouched.
"""

import logging
import os
import threading
from abc import ABC, abstractmethod
from typing import Optional, Union

from fhandle.common.modes import parse_mode

logger = logging.getLogger("fhandle.rwops")

RW_SEEK_SET = 0
RW_SEEK_CUR = 1
RW_SEEK_END = 2

_WHENCE = {
    RW_SEEK_SET: os.SEEK_SET,
    RW_SEEK_CUR: os.SEEK_CUR,
    RW_SEEK_END: os.SEEK_END,
}

Buffer = Union[bytearray, memoryview]

_state = threading.local()


def get_error() -> str:
    """Return the current thread's error message (empty if none)."""
    return getattr(_state, "message", "")


def set_error(fmt: str, *args: object) -> int:
    """Set the current thread's error message. Always returns -1."""
    _state.message = fmt % args if args else fmt
    logger.debug("rwops error: %s", _state.message)
    return -1


def clear_error() -> None:
    """Reset the current thread's error message."""
    _state.message = ""


class ReaderSeeker(ABC):
    """Abstract reader-seeker stream."""

    @abstractmethod
    def size(self) -> int:
        """Total size of the stream, or -1 if unknown."""
        pass

    @abstractmethod
    def seek(self, offset: int, whence: int) -> int:
        """Seek and return the new absolute position, or -1 on failure."""
        pass

    def tell(self) -> int:
        """Current position, or -1 on failure."""
        return self.seek(0, RW_SEEK_CUR)

    @abstractmethod
    def read(self, buffer: Buffer, size: int, maxnum: int) -> int:
        """Read up to *maxnum* objects of *size* bytes into *buffer*.

        Returns:
            Number of whole objects read; 0 on error or end of stream
        """
        pass

    @abstractmethod
    def write(self, data: bytes, size: int, num: int) -> int:
        """Write *num* objects of *size* bytes from *data*.

        Returns:
            Number of whole objects written
        """
        pass

    @abstractmethod
    def close(self) -> int:
        """Release the stream. Returns 0 on success, -1 on failure."""
        pass


class FileStream(ReaderSeeker):
    """Reader-seeker over an OS file descriptor.

    Usage:
        stream = rw_from_file("data.wad", "rb")
        if stream is None:
            print(get_error())
    """

    def __init__(self, fd: int, name: str = "") -> None:
        self._fd = fd
        self.name = name

    def size(self) -> int:
        try:
            return os.fstat(self._fd).st_size
        except OSError as e:
            return set_error("Couldn't get stream size: %s", e.strerror)

    def seek(self, offset: int, whence: int) -> int:
        if whence not in _WHENCE:
            return set_error("Unknown value for 'whence'")
        try:
            return os.lseek(self._fd, offset, _WHENCE[whence])
        except OSError as e:
            return set_error("Error seeking in datastream: %s", e.strerror)

    def read(self, buffer: Buffer, size: int, maxnum: int) -> int:
        total = size * maxnum
        if total <= 0:
            return 0

        view = memoryview(buffer)[:total]
        total = len(view)
        nread = 0
        while nread < total:
            try:
                chunk = os.read(self._fd, total - nread)
            except OSError as e:
                set_error("Error reading from datastream: %s", e.strerror)
                break
            if not chunk:
                break
            view[nread : nread + len(chunk)] = chunk
            nread += len(chunk)
        return nread // size

    def write(self, data: bytes, size: int, num: int) -> int:
        total = size * num
        if total <= 0:
            return 0

        view = memoryview(data)[:total]
        written = 0
        while written < len(view):
            try:
                written += os.write(self._fd, view[written:])
            except OSError as e:
                set_error("Error writing to datastream: %s", e.strerror)
                break
        return written // size

    def close(self) -> int:
        try:
            os.close(self._fd)
        except OSError as e:
            return set_error("Error closing datastream: %s", e.strerror)
        return 0


def rw_from_file(path: Union[str, os.PathLike], mode: str) -> Optional[FileStream]:
    """Open *path* as a :class:`FileStream`.

    Returns:
        The stream, or None with the error message set
    """
    parsed = parse_mode(mode)
    if parsed is None:
        set_error("Parameter 'mode' is invalid: %r", mode)
        return None

    try:
        fd = os.open(path, parsed.os_flags, 0o666)
    except OSError as e:
        set_error("Couldn't open %s: %s", os.fspath(path), e.strerror)
        return None

    return FileStream(fd, name=os.fspath(path))
