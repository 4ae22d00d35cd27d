"""Password and card-marker derivation.

Passwords go through werkzeug's salted slow hash; the method string carries
the cost factor. Card UIDs are reduced to a plain SHA-256 hex digest so a
reader's UID can be matched without storing it.
"""

from __future__ import annotations

import hashlib
import secrets

from werkzeug.security import check_password_hash, generate_password_hash

from ..core.constants import DEFAULT_PASSWORD_HASH_METHOD


class PasswordHasher:
    def __init__(self, method: str = DEFAULT_PASSWORD_HASH_METHOD):
        self.method = method
        self._dummy_hash: str | None = None

    @property
    def dummy_hash(self) -> str:
        """A hash of a random value, made with the same method.

        Checked against when no user matches, so a failed login costs the
        same whatever the reason.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self.hash(secrets.token_urlsafe(32))
        return self._dummy_hash

    def hash(self, raw_password: str) -> str:
        return generate_password_hash(raw_password, method=self.method)

    def verify(self, password_hash: str, raw_password: str) -> bool:
        if not password_hash:
            return False
        try:
            return check_password_hash(password_hash, raw_password)
        except ValueError:
            # legacy or placeholder hashes that werkzeug cannot parse
            return False


def card_marker(raw_card_id: str | None) -> str:
    return hashlib.sha256((raw_card_id or "").encode("utf-8")).hexdigest()


EMPTY_CARD_MARKER = card_marker("")
