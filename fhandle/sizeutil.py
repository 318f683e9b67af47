"""Backend-independent size computation."""

import os
from typing import Protocol


class Seekable(Protocol):
    def seek(self, offset: int, whence: int = ...) -> int: ...

    def tell(self) -> int: ...


def stream_size(f: Seekable) -> int:
    """Return the total length of *f* using only seek/tell.

    The position is moved to the end and then restored, so this is not safe
    against concurrent use of *f*. ``OSError`` propagates.
    """
    cur = f.tell()
    f.seek(0, os.SEEK_END)
    length = f.tell()
    f.seek(cur, os.SEEK_SET)
    return length
