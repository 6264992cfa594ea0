"""Exceptions raised by the skill installer."""

from __future__ import annotations

from pathlib import Path


class InstallError(Exception):
    """Base class for installer failures."""


class UsageError(InstallError):
    """Invalid level, strategy or agent name. Raised before any I/O."""


class FetchError(InstallError):
    """The archive could not be downloaded or read.

    Fatal for the whole run: no destination is touched.
    """


class FilesystemError(InstallError):
    """A filesystem operation failed while deploying for one agent."""

    def __init__(self, agent: str, path: Path | str, cause: OSError) -> None:
        self.agent = agent
        self.path = str(path)
        self.cause = cause
        reason = cause.strerror or str(cause)
        super().__init__(f"{reason}: {cause.filename or self.path}")
