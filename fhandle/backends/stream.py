"""Abstract stream backend over a :class:`fhandle.rwops.ReaderSeeker`."""

import logging
from typing import Callable, Optional

from fhandle import rwops
from fhandle.backends.interface import Buffer, FileBackend, PathLike
from fhandle.common.constants import EOF
from fhandle.common.models import HandleKind, SeekOrigin
from fhandle.rwops import ReaderSeeker

logger = logging.getLogger("fhandle.backends.stream")

StreamOpener = Callable[[PathLike, str], Optional[ReaderSeeker]]


class StreamBackend(FileBackend):
    """Backend built on reader-seeker streams.

    Streams have neither an error string per stream nor an end-of-stream
    query, so this backend synthesizes both:

    - after every read, write, seek, tell and size call the subsystem's
      current error text is copied into ``last_error``, whether the call
      failed or not
    - end of stream is ``tell() >= size()``, and is assumed when either
      primitive fails

    ``check_error`` is always False; callers rely on return values and
    ``error()`` instead.

    Usage:
        backend = StreamBackend()
        if backend.open("music.ogg", "rb"):
            while not backend.at_end():
                c = backend.get_char()
            backend.close()
    """

    kind = HandleKind.ABSTRACT_STREAM

    def __init__(self, opener: StreamOpener = rwops.rw_from_file) -> None:
        """Initialize stream backend.

        Args:
            opener: Factory returning a stream for (path, mode), or None
        """
        self._opener = opener
        self._stream: Optional[ReaderSeeker] = None
        self.last_error: Optional[str] = None

    def open(self, path: PathLike, mode: str) -> bool:
        self._stream = self._opener(path, mode)
        if self._stream is None:
            logger.debug("%s: cannot open %s: %s", self.name, path, rwops.get_error())
            return False
        return True

    def _refresh_error(self) -> None:
        self.last_error = rwops.get_error()

    def readinto(self, buffer: Buffer, size: int, count: int) -> int:
        nread = self._stream.read(buffer, size, count)  # type: ignore[union-attr]
        self._refresh_error()
        return nread

    def write(self, data: bytes, size: int, count: int) -> int:
        written = self._stream.write(data, size, count)  # type: ignore[union-attr]
        self._refresh_error()
        return written

    def seek(self, offset: int, origin: int) -> int:
        if origin == SeekOrigin.CURRENT:
            whence = rwops.RW_SEEK_CUR
        elif origin == SeekOrigin.END:
            whence = rwops.RW_SEEK_END
        else:
            whence = rwops.RW_SEEK_SET

        position = self._stream.seek(offset, whence)  # type: ignore[union-attr]
        self._refresh_error()
        return -1 if position == -1 else 0

    def tell(self) -> int:
        position = self._stream.tell()  # type: ignore[union-attr]
        self._refresh_error()
        return position

    def size(self) -> int:
        total = self._stream.size()  # type: ignore[union-attr]
        self._refresh_error()
        return total

    def get_char(self) -> int:
        c = bytearray(1)
        if not self.readinto(c, 1, 1):
            return EOF
        return c[0]

    def get_line(self, buffer: memoryview, length: int) -> Optional[bytes]:
        if length < 1:
            return None

        want = length - 1
        if self.readinto(buffer, 1, want) < want:
            return None
        buffer[want] = 0
        return bytes(buffer[:want])

    def close(self) -> int:
        status = self._stream.close()  # type: ignore[union-attr]
        self._stream = None
        self.last_error = None
        return status

    def error(self) -> Optional[str]:
        return self.last_error

    def at_end(self) -> bool:
        total = self.size()
        if total < 0:
            return True

        position = self.tell()
        if position == -1:
            return True
        return position >= total
