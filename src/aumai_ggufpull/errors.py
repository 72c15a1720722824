"""Exception hierarchy for aumai-ggufpull."""

from __future__ import annotations

__all__ = [
    "GGUFPullError",
    "TransportError",
    "RegistryError",
    "MalformedResponseError",
    "DigestNotFoundError",
    "FilesystemError",
    "UsageError",
]


class GGUFPullError(Exception):
    """Base exception for all aumai-ggufpull errors."""


class TransportError(GGUFPullError):
    """The request could not be completed (DNS, connection, timeout)."""


class RegistryError(GGUFPullError):
    """The registry or catalog host answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class MalformedResponseError(GGUFPullError):
    """A response body could not be decoded as JSON or markup."""


class DigestNotFoundError(GGUFPullError):
    """The manifest has no layer carrying the model media type."""


class FilesystemError(GGUFPullError):
    """The destination file could not be created or written."""


class UsageError(GGUFPullError):
    """The command line is missing a required flag combination."""
