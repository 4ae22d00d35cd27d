from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Optional

from ..common.hashing import EMPTY_CARD_MARKER
from ..core.enums import Role

# attribute -> key used in the snapshot and in every record view
RECORD_KEYS: dict[str, str] = {
    "id": "id",
    "username": "username",
    "email": "email",
    "password_hash": "passwordHash",
    "phone": "phone",
    "department": "department",
    "role": "role",
    "id_card_marker": "idCardMarker",
    "active": "active",
    "created_at": "createdAt",
    "name": "name",
}

# Fields never returned to an external caller.
SAFE_EXCLUDED_FIELDS = frozenset({"passwordHash"})


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


@dataclass(frozen=True)
class UserRecord:
    """Domain entity: one directory entry.

    Note: plain data object. ``password_hash`` and ``id_card_marker`` are
    always derived values, never the raw secrets.
    """

    id: int
    username: str
    email: str
    password_hash: str
    phone: str
    department: str
    role: Role = Role.USER
    id_card_marker: str = EMPTY_CARD_MARKER
    active: bool = True
    created_at: str = field(default_factory=utcnow_iso)
    name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.username or self.email

    def with_changes(self, **changes: Any) -> "UserRecord":
        changes.pop("id", None)
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Full view, as written to the snapshot."""
        data = asdict(self)
        data["role"] = self.role.value
        return {RECORD_KEYS[k]: v for k, v in data.items()}


def safe_projection(record: UserRecord) -> dict[str, Any]:
    """Record view with credential-bearing fields removed."""
    return {k: v for k, v in record.to_dict().items() if k not in SAFE_EXCLUDED_FIELDS}
