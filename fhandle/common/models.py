"""Enums and pydantic models shared across fhandle."""

import os
from enum import Enum, IntEnum
from typing import Optional

from pydantic import BaseModel, Field


class HandleKind(str, Enum):
    """Available file handle backends."""

    STANDARD = "standard"
    ABSTRACT_STREAM = "stream"


class SeekOrigin(IntEnum):
    """Seek origins, numerically equal to ``os.SEEK_*``."""

    START = os.SEEK_SET
    CURRENT = os.SEEK_CUR
    END = os.SEEK_END


class HandleInfo(BaseModel):
    """Snapshot of a handle's state, as reported by the CLI."""

    path: str = Field(..., description="Path the handle was opened with")
    kind: HandleKind = Field(..., description="Backend in use")
    size: int = Field(..., description="Total size in bytes (-1 if unknown)")
    position: int = Field(..., description="Current offset (-1 if unknown)")
    at_end: bool = Field(False, description="End-of-stream predicate")
    error_flag: bool = Field(False, description="Backend error predicate")
    last_error: Optional[str] = Field(None, description="Last error message")
