from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for authorization checks."""

    ADMIN = "admin"
    GATEKEEPER = "gatekeeper"
    USER = "standard-user"


class VerifyStatus(str, Enum):
    """Outcome of a card check at a reader."""

    OK = "OK"
    DENIED = "DENIED"
    ERROR = "ERROR"
