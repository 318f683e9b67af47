"""fhandle - backend-agnostic file I/O handles."""

__version__ = "0.1.0"

from fhandle.common.constants import EOF  # noqa: E402
from fhandle.common.models import HandleKind, SeekOrigin  # noqa: E402
from fhandle.handle import FileHandle, open_handle  # noqa: E402

__all__ = ["EOF", "FileHandle", "HandleKind", "SeekOrigin", "open_handle", "__version__"]
