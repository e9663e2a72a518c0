"""Errors raised by the catalog core."""

from __future__ import annotations


class SourceRepoError(Exception):
    """Base class for catalog and coordinator errors."""

    pass


class RepoNotFoundError(SourceRepoError):
    """An operation named an address that is not in the catalog."""

    def __init__(self, address: str) -> None:
        super().__init__(f"No such repository: {address}")
        self.address = address


class AlreadyUpdatingError(SourceRepoError):
    """An update was requested while one is running for the same address."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Repository is already updating: {address}")
        self.address = address


class DiscoveryFailedError(SourceRepoError):
    """The repository enumerator failed. The catalog was left unchanged."""

    pass


class UpdateFailedError(SourceRepoError):
    """The update executor failed for a repository."""

    def __init__(self, address: str, reason: str = "") -> None:
        message = f"Update failed for {address}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.address = address
