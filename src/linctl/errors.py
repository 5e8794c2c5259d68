"""Exception hierarchy for linctl.

Every failure that the CLI reports to the operator derives from
``LinctlError``. Commands catch it once, print it, and exit non-zero.
"""

from __future__ import annotations


class LinctlError(Exception):
    """Base class for linctl errors."""


class ConfigError(LinctlError):
    """Configuration is missing or invalid."""


class ApiError(LinctlError):
    """A request to the Linear API failed.

    Covers transport errors, non-2xx responses, undecodable bodies and
    GraphQL ``errors`` payloads.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(ApiError):
    """The API key was rejected."""


class NotFoundError(LinctlError):
    """A requested entity does not exist."""


class MutationError(LinctlError):
    """A mutation did not report success."""


class UploadError(LinctlError):
    """An upload could not be fetched."""
