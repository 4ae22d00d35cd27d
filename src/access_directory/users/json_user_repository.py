from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Sequence

from ..core.exceptions import CorruptStoreError, PersistenceError
from .model import UserRecord
from .normalize import record_from_raw
from .repository import UserRepository

logger = logging.getLogger(__name__)


class JsonUserRepository(UserRepository):
    """User snapshot kept in a single pretty-printed JSON file."""

    def __init__(self, path: str | os.PathLike):
        self._path = Path(path).resolve()

    @property
    def path(self) -> Path:
        return self._path

    def ready(self) -> None:
        """Make sure a readable snapshot exists before serving requests."""
        self.load()

    def load(self) -> list[UserRecord]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("No user snapshot at %s, creating an empty one", self._path)
            self.persist([])
            return []
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Cannot read user snapshot %s: %s", self._path, exc)
            raise PersistenceError(f"Cannot read user snapshot: {exc}") from exc

        if not text.strip():
            self.persist([])
            return []

        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.error("User snapshot %s is not valid JSON: %s", self._path, exc)
            raise CorruptStoreError(f"User snapshot is not valid JSON: {exc}") from exc

        if not isinstance(raw, list):
            logger.error("User snapshot %s does not hold a list", self._path)
            raise CorruptStoreError("User snapshot must hold a list of users")

        return [record_from_raw(item) for item in raw]

    def persist(self, records: Sequence[UserRecord]) -> None:
        payload = json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False)
        tmp_name = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".users-", suffix=".tmp", dir=self._path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.write("\n")
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as exc:
            logger.error("Cannot write user snapshot %s: %s", self._path, exc)
            raise PersistenceError(f"Cannot write user snapshot: {exc}") from exc
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
        logger.debug("Persisted %d users to %s", len(records), self._path)
