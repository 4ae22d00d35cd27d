from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Optional

from ..common.hashing import EMPTY_CARD_MARKER, PasswordHasher, card_marker
from ..common.validators import parse_bool, require_fields, require_min_length, require_non_empty
from ..core.constants import (
    AUTH_FAILED_MESSAGE,
    DEFAULT_MIN_PASSWORD_LENGTH,
    LOGIN_OK_MESSAGE,
    NO_VALID_FIELDS_MESSAGE,
)
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from .model import UserRecord, safe_projection, utcnow_iso
from .normalize import coerce_role, normalize_input
from .repository import UserRepository

logger = logging.getLogger(__name__)

REQUIRED_CREATE_FIELDS = ("username", "email", "password", "phone", "department")
UPDATABLE_FIELDS = ("password", "email", "phone", "department", "username", "id_card", "role", "active", "name")


@dataclass(frozen=True)
class LoginResult:
    message: str
    user: dict[str, Any]


class UserService:
    """Use case: manage directory users and check their credentials.

    Every operation reloads the snapshot first. Mutations run the whole
    load-modify-persist cycle under one lock, so callers in the same process
    never lose each other's updates.
    """

    def __init__(
        self,
        users: UserRepository,
        *,
        hasher: Optional[PasswordHasher] = None,
        min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
    ):
        self._users = users
        self._hasher = hasher or PasswordHasher()
        self._min_password_length = int(min_password_length)
        self._lock = threading.RLock()

    @contextmanager
    def _snapshot(self) -> Iterator[list[UserRecord]]:
        with self._lock:
            yield self._users.load()

    def _require_password(self, raw_password: Any) -> str:
        return require_min_length(str(raw_password), "password", self._min_password_length)

    def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        fields = normalize_input(data)
        require_fields(fields, REQUIRED_CREATE_FIELDS)

        username = str(fields["username"]).strip()
        email = str(fields["email"]).strip()
        password = self._require_password(fields["password"])
        role = coerce_role(fields.get("role") or Role.USER)
        raw_card = fields.get("id_card")
        password_hash = self._hasher.hash(password)

        with self._snapshot() as records:
            if any(r.username == username for r in records):
                raise ConflictError(f"Username '{username}' is already in use")
            if any(r.email == email for r in records):
                raise ConflictError(f"Email '{email}' is already registered")

            record = UserRecord(
                id=max((r.id for r in records), default=0) + 1,
                username=username,
                email=email,
                password_hash=password_hash,
                phone=str(fields["phone"]).strip(),
                department=str(fields["department"]).strip(),
                role=role,
                id_card_marker=card_marker(None if raw_card is None else str(raw_card)),
                active=parse_bool(fields["active"]) if "active" in fields else True,
                created_at=utcnow_iso(),
                name=fields.get("name"),
            )
            records.append(record)
            self._users.persist(records)

        logger.info("Created user id=%s username=%s", record.id, record.username)
        return safe_projection(record)

    def login(self, identifier: str, raw_password: str) -> LoginResult:
        with self._snapshot() as records:
            user = next((r for r in records if identifier and identifier in (r.username, r.email)), None)

        if user is None or not user.active:
            # same hashing cost as a real check
            self._hasher.verify(self._hasher.dummy_hash, raw_password or "")
            logger.warning("Failed login attempt")
            raise AuthenticationError(AUTH_FAILED_MESSAGE)

        if not self._hasher.verify(user.password_hash, raw_password or ""):
            logger.warning("Failed login attempt")
            raise AuthenticationError(AUTH_FAILED_MESSAGE)

        logger.info("User id=%s logged in", user.id)
        return LoginResult(message=LOGIN_OK_MESSAGE, user=safe_projection(user))

    def list_users(self, *, safe: bool = True) -> list[Any]:
        """All users in insertion order.

        ``safe=False`` returns the full records, hashes included. Only the
        other core operations and the card gateway may ask for that.
        """
        with self._snapshot() as records:
            if safe:
                return [safe_projection(r) for r in records]
            return list(records)

    def find_by_id(self, user_id: int) -> dict[str, Any]:
        with self._snapshot() as records:
            return safe_projection(self._find(records, user_id)[1])

    def update(self, user_id: int, patch: Mapping[str, Any]) -> dict[str, Any]:
        with self._snapshot() as records:
            self._find(records, user_id)

        fields = normalize_input(patch)
        changes_in = {k: fields[k] for k in UPDATABLE_FIELDS if k in fields}
        if not changes_in:
            raise ValidationError(NO_VALID_FIELDS_MESSAGE)

        changes: dict[str, Any] = {}
        for key in ("username", "email"):
            if key in changes_in:
                changes[key] = require_non_empty(changes_in[key], key)
        for key in ("phone", "department"):
            if key in changes_in:
                changes[key] = str(changes_in[key] or "").strip()
        if "name" in changes_in:
            changes["name"] = changes_in["name"]
        if "role" in changes_in:
            changes["role"] = coerce_role(changes_in["role"])
        if "active" in changes_in:
            changes["active"] = parse_bool(changes_in["active"])
        if "id_card" in changes_in:
            raw_card = changes_in["id_card"]
            changes["id_card_marker"] = EMPTY_CARD_MARKER if raw_card is None else card_marker(str(raw_card))
        if "password" in changes_in:
            changes["password_hash"] = self._hasher.hash(self._require_password(changes_in["password"]))

        with self._snapshot() as records:
            index, current = self._find(records, user_id)
            others = [r for r in records if r.id != current.id]
            if "username" in changes and any(r.username == changes["username"] for r in others):
                raise ConflictError(f"Username '{changes['username']}' is already in use")
            if "email" in changes and any(r.email == changes["email"] for r in others):
                raise ConflictError(f"Email '{changes['email']}' is already registered")

            updated = current.with_changes(**changes)
            records[index] = updated
            self._users.persist(records)

        logger.info("Updated user id=%s fields=%s", updated.id, ",".join(sorted(changes_in)))
        return safe_projection(updated)

    def delete(self, user_id: int) -> dict[str, Any]:
        with self._snapshot() as records:
            index, removed = self._find(records, user_id)
            del records[index]
            self._users.persist(records)

        logger.info("Deleted user id=%s username=%s", removed.id, removed.username)
        return safe_projection(removed)

    @staticmethod
    def _find(records: list[UserRecord], user_id: Any) -> tuple[int, UserRecord]:
        try:
            wanted = int(user_id)
        except (TypeError, ValueError):
            raise NotFoundError(f"User with ID {user_id} not found") from None
        for i, r in enumerate(records):
            if r.id == wanted:
                return i, r
        raise NotFoundError(f"User with ID {wanted} not found")
