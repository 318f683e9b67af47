"""Fatal error path for programming mistakes.

Ordinary I/O failures are never raised; they come back as return values.
The errors here signal a defect in the calling code and terminate the
process: they derive from ``SystemExit`` so ``except Exception`` blocks do
not swallow them.
"""

import logging
from typing import NoReturn, Type

from fhandle.common.constants import FATAL_EXIT_CODE

logger = logging.getLogger("fhandle.errors")


class FatalError(SystemExit):
    """An invariant was violated; the process cannot continue."""

    def __init__(self, message: str) -> None:
        super().__init__(FATAL_EXIT_CODE)
        self.message = message

    def __str__(self) -> str:
        return self.message


class UnknownBackendKindError(FatalError):
    """A handle was requested for a backend kind that does not exist."""


def fatal_error(message: str, error_cls: Type[FatalError] = FatalError) -> NoReturn:
    """Log *message* at CRITICAL and terminate via *error_cls*."""
    logger.critical(message)
    raise error_cls(message)
