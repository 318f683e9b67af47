"""Concrete I/O backends behind :class:`fhandle.backends.interface.FileBackend`."""

from fhandle.backends.interface import FileBackend
from fhandle.backends.stdio import StdioBackend
from fhandle.backends.stream import StreamBackend

__all__ = ["FileBackend", "StdioBackend", "StreamBackend"]
