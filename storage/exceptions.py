"""Exceptions raised while reading or writing the character file on GitHub."""
from typing import Optional


class RepositoryError(RuntimeError):
    """Base exception for repository failures.

    Attributes:
        status: HTTP status code returned by GitHub, or None for transport errors.
    """
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class MissingCredentialError(RepositoryError):
    """Raised when no access token is available; no request is made."""
    pass


class StaleVersionError(RepositoryError):
    """Raised when GitHub rejects a write because the sha no longer matches."""
    pass


class RosterDecodeError(RepositoryError):
    """Raised when the stored file is not a JSON list of characters."""
    pass
