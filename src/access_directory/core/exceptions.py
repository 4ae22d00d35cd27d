from __future__ import annotations

from typing import Iterable


class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "domain"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation"

    def __init__(self, message: str, fields: Iterable[str] = ()):
        super().__init__(message)
        self.fields = tuple(fields)


class ConflictError(DomainError):
    """Raised when a username or email is already taken."""

    kind = "conflict"


class NotFoundError(DomainError):
    """Raised when the referenced user id does not exist."""

    kind = "not_found"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    kind = "auth"


AuthError = AuthenticationError


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    kind = "forbidden"


class StoreError(DomainError):
    """Store-level failure. Not recoverable by the caller."""

    kind = "store"


class CorruptStoreError(StoreError):
    """Raised when the snapshot is not well-formed."""

    kind = "corrupt_store"


class PersistenceError(StoreError):
    """Raised when the snapshot cannot be read or written."""

    kind = "persistence"
