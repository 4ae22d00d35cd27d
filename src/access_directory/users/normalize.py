"""Field-name normalization at the store boundary.

Records and inputs may arrive under the legacy Spanish-language keys or the
camelCase keys used by older clients. Everything is folded into the
canonical snake_case names here and nowhere else.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from ..common.hashing import EMPTY_CARD_MARKER
from ..core.enums import Role
from ..core.exceptions import CorruptStoreError, ValidationError
from .model import UserRecord, utcnow_iso

# attribute -> accepted keys in priority order, first hit wins.
# Snapshot keys come first, then snake_case, then legacy names.
RECORD_SYNONYMS: dict[str, tuple[str, ...]] = {
    "username": ("username", "usuario", "user"),
    "email": ("email", "correo", "mail"),
    "password_hash": ("passwordHash", "password_hash", "contrasena"),
    "phone": ("phone", "telefono"),
    "department": ("department", "departamento"),
    "id_card_marker": ("idCardMarker", "id_card_marker", "idCardHash", "IDcard", "idCard"),
    "created_at": ("createdAt", "created_at", "fechaCreacion"),
    "name": ("name", "nombre"),
}

INPUT_SYNONYMS: dict[str, tuple[str, ...]] = {
    "username": ("username", "usuario", "user"),
    "email": ("email", "correo", "mail"),
    "password": ("password", "rawPassword", "raw_password", "contrasena"),
    "phone": ("phone", "telefono"),
    "department": ("department", "departamento"),
    "id_card": ("id_card", "idCard", "IDcard", "uid", "rawCardId", "raw_card_id"),
    "name": ("name", "nombre"),
    "role": ("role",),
    "active": ("active",),
    "id": ("id",),
}

LEGACY_ROLES = {
    "portero": Role.GATEKEEPER,
    "usuario": Role.USER,
    "user": Role.USER,
    "staff": Role.USER,
}


def merge_synonyms(data: Mapping[str, Any], synonyms: Mapping[str, tuple[str, ...]]) -> dict[str, Any]:
    """Fold synonym keys into canonical ones. Unknown keys are dropped."""
    out: dict[str, Any] = {}
    for canonical, keys in synonyms.items():
        for key in keys:
            if key in data:
                out[canonical] = data[key]
                break
    return out


def coerce_role(value: Any) -> Role:
    if isinstance(value, Role):
        return value
    text = str(value).strip().lower()
    if text in LEGACY_ROLES:
        return LEGACY_ROLES[text]
    try:
        return Role(text)
    except ValueError:
        raise ValidationError(f"Invalid role: {value!r}", fields=("role",)) from None


def coerce_created_at(value: Any) -> str:
    if value is None or value == "":
        return utcnow_iso()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # legacy epoch milliseconds
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc).isoformat(timespec="seconds")
    return str(value)


def normalize_input(data: Mapping[str, Any]) -> dict[str, Any]:
    """Canonical view of a create payload or update patch."""
    if not isinstance(data, Mapping):
        raise ValidationError("Request body must be an object")
    return merge_synonyms(data, INPUT_SYNONYMS)


def record_from_raw(raw: Any) -> UserRecord:
    """Build a UserRecord from one stored snapshot entry."""
    if not isinstance(raw, Mapping):
        raise CorruptStoreError(f"Snapshot entry is not an object: {raw!r}")

    data = merge_synonyms(raw, RECORD_SYNONYMS)
    try:
        record_id = int(raw["id"])
    except (KeyError, TypeError, ValueError):
        raise CorruptStoreError(f"Snapshot entry has no valid id: {raw.get('id')!r}") from None

    try:
        role = coerce_role(raw.get("role") or Role.USER)
    except ValidationError as exc:
        raise CorruptStoreError(f"User {record_id}: {exc.message}") from None

    active = raw.get("active")
    if active is None or active == "":
        active = True
    return UserRecord(
        id=record_id,
        username=str(data.get("username") or ""),
        email=str(data.get("email") or ""),
        password_hash=str(data.get("password_hash") or ""),
        phone=str(data.get("phone") or ""),
        department=str(data.get("department") or ""),
        role=role,
        id_card_marker=str(data.get("id_card_marker") or EMPTY_CARD_MARKER),
        active=active if isinstance(active, bool) else str(active).strip().lower() in {"1", "true", "yes"},
        created_at=coerce_created_at(data.get("created_at")),
        name=data.get("name"),
    )
