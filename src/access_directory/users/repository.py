from __future__ import annotations

from typing import Protocol, Sequence

from .model import UserRecord


class UserRepository(Protocol):
    """Repository interface for the user snapshot.

    Note (DIP): the service depends on this interface, not on a concrete
    storage backend. The whole collection is loaded and persisted at once.
    """

    def load(self) -> list[UserRecord]:
        raise NotImplementedError

    def persist(self, records: Sequence[UserRecord]) -> None:
        raise NotImplementedError
