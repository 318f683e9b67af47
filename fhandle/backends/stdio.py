"""Standard I/O backend over a buffered binary file."""

import errno
import io
import logging
import os
from typing import BinaryIO, Optional

from fhandle.backends.interface import Buffer, FileBackend, PathLike
from fhandle.common.constants import EOF
from fhandle.common.models import HandleKind, SeekOrigin
from fhandle.common.modes import parse_mode
from fhandle.sizeutil import stream_size

logger = logging.getLogger("fhandle.backends.stdio")

_ORIGINS = {
    SeekOrigin.START: os.SEEK_SET,
    SeekOrigin.CURRENT: os.SEEK_CUR,
    SeekOrigin.END: os.SEEK_END,
}


class StdioBackend(FileBackend):
    """Backend built on the builtin ``open``.

    Python file objects raise instead of keeping error and end-of-file
    indicators, so this backend tracks them itself the way a C ``FILE``
    does:

    - the error flag is raised by failed reads and writes and never cleared
    - the end-of-file flag is raised by short reads and cleared by seeks,
      including the ones ``size()`` makes
    - the errno of the last failed primitive is kept for ``error()`` until
      a successful seek resets it

    Usage:
        backend = StdioBackend()
        if backend.open("gfx.pk3", "rb"):
            header = bytearray(4)
            backend.readinto(header, 1, 4)
            backend.close()
    """

    kind = HandleKind.STANDARD

    def __init__(self) -> None:
        self._file: Optional[BinaryIO] = None
        self._error = False
        self._eof = False
        self._errno = 0

    def open(self, path: PathLike, mode: str) -> bool:
        parsed = parse_mode(mode)
        if parsed is None:
            self._errno = errno.EINVAL
            logger.debug("%s: invalid mode %r for %s", self.name, mode, path)
            return False

        try:
            self._file = open(path, parsed.python_mode)  # type: ignore[assignment]
        except OSError as e:
            self._errno = e.errno or errno.EIO
            logger.debug("%s: cannot open %s: %s", self.name, path, e)
            return False
        return True

    def _fail(self, exc: Exception, sticky: bool = True) -> None:
        """Record a failed primitive. *sticky* raises the error flag."""
        code = getattr(exc, "errno", None)
        if not code:
            # UnsupportedOperation: reading a write-only file and vice versa
            code = errno.EBADF if isinstance(exc, io.UnsupportedOperation) else errno.EINVAL
        self._errno = code
        if sticky:
            self._error = True

    def readinto(self, buffer: Buffer, size: int, count: int) -> int:
        total = size * count
        if total <= 0:
            return 0

        view = memoryview(buffer)[:total]
        total = len(view)
        nread = 0
        try:
            while nread < total:
                n = self._file.readinto(view[nread:])  # type: ignore[union-attr]
                if not n:
                    break
                nread += n
        except (OSError, ValueError) as e:
            self._fail(e)
            return nread // size

        if nread < total:
            self._eof = True
        return nread // size

    def write(self, data: bytes, size: int, count: int) -> int:
        total = size * count
        if total <= 0:
            return 0

        try:
            written = self._file.write(memoryview(data)[:total])  # type: ignore[union-attr]
        except (OSError, ValueError) as e:
            self._fail(e)
            return 0
        return (written or 0) // size

    def seek(self, offset: int, origin: int) -> int:
        whence = _ORIGINS.get(origin)  # type: ignore[call-overload]
        if whence is None:
            self._errno = errno.EINVAL
            return -1

        try:
            self._file.seek(offset, whence)  # type: ignore[union-attr]
        except (OSError, ValueError) as e:
            self._fail(e, sticky=False)
            return -1
        self._eof = False
        self._errno = 0
        return 0

    def tell(self) -> int:
        try:
            return self._file.tell()  # type: ignore[union-attr]
        except (OSError, ValueError) as e:
            self._fail(e, sticky=False)
            return -1

    def size(self) -> int:
        try:
            length = stream_size(self._file)  # type: ignore[arg-type]
        except (OSError, ValueError) as e:
            self._fail(e, sticky=False)
            return -1
        # stream_size seeks, and seeks clear the end-of-file flag
        self._eof = False
        return length

    def get_char(self) -> int:
        try:
            c = self._file.read(1)  # type: ignore[union-attr]
        except (OSError, ValueError) as e:
            self._fail(e)
            return EOF

        if not c:
            self._eof = True
            return EOF
        return c[0]

    def get_line(self, buffer: memoryview, length: int) -> Optional[bytes]:
        if length < 1:
            return None
        if length == 1:
            buffer[0] = 0
            return b""

        try:
            line = self._file.readline(length - 1)  # type: ignore[union-attr]
        except (OSError, ValueError) as e:
            self._fail(e)
            return None

        if not line:
            self._eof = True
            return None
        if len(line) < length - 1 and not line.endswith(b"\n"):
            self._eof = True

        buffer[: len(line)] = line
        buffer[len(line)] = 0
        return line

    def close(self) -> int:
        try:
            self._file.close()  # type: ignore[union-attr]
        except OSError as e:
            logger.debug("%s: close failed: %s", self.name, e)
            return EOF
        finally:
            self._file = None
        return 0

    def error(self) -> Optional[str]:
        if self._errno:
            return os.strerror(self._errno)
        if self._eof:
            return "end-of-file"
        return None

    def at_end(self) -> bool:
        return self._eof

    def check_error(self) -> bool:
        return self._error
