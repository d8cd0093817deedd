"""Exception types raised by the setup workflow.

Every failure the operator can cause or fix derives from `SetupError`; the
CLI turns these into a printed diagnostic and exit status 1.
"""

from __future__ import annotations


class SetupError(Exception):
    """Base class for all setup failures."""


class PrerequisiteDeclinedError(SetupError):
    """Raised when the operator refuses to install a required tool."""


class MissingInputError(SetupError):
    """Raised when a required interactive answer is empty."""


class CommandFailedError(SetupError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, message: str, *, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class CloneFailedError(CommandFailedError):
    """Raised when `git clone` fails after credentials were stored."""
