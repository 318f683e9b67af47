"""Parser for the fopen mode-character grammar.

Both backends accept the same mode strings (``"r"``, ``"wb"``, ``"a+"``,
``"r+b"``, ``"wx"``...). Handles are always byte oriented, so ``b`` is
implied and ``t`` is accepted but ignored.
"""

import os
from dataclasses import dataclass
from typing import Optional

_MODIFIERS = frozenset("+btx")


@dataclass(frozen=True)
class FileMode:
    """A parsed mode string."""

    access: str  # "r", "w" or "a"
    update: bool = False
    exclusive: bool = False

    @property
    def readable(self) -> bool:
        return self.access == "r" or self.update

    @property
    def writable(self) -> bool:
        return self.access != "r" or self.update

    @property
    def python_mode(self) -> str:
        """Mode string for the builtin ``open``."""
        access = "x" if self.exclusive else self.access
        return access + ("+" if self.update else "") + "b"

    @property
    def os_flags(self) -> int:
        """Flags for ``os.open``."""
        if self.update:
            flags = os.O_RDWR
        elif self.access == "r":
            flags = os.O_RDONLY
        else:
            flags = os.O_WRONLY

        if self.access == "w":
            flags |= os.O_CREAT | os.O_TRUNC
        elif self.access == "a":
            flags |= os.O_CREAT | os.O_APPEND
        if self.exclusive:
            flags |= os.O_EXCL
        return flags | getattr(os, "O_BINARY", 0)


def parse_mode(mode: str) -> Optional[FileMode]:
    """Parse *mode*, returning ``None`` when it is not a valid fopen mode."""
    if not mode or mode[0] not in "rwa":
        return None

    seen: set[str] = set()
    for ch in mode[1:]:
        if ch not in _MODIFIERS or ch in seen:
            return None
        seen.add(ch)

    if "b" in seen and "t" in seen:
        return None
    if "x" in seen and mode[0] != "w":
        return None

    return FileMode(access=mode[0], update="+" in seen, exclusive="x" in seen)
