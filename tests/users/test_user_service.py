from __future__ import annotations

import json

import pytest

from access_directory.common.hashing import EMPTY_CARD_MARKER, PasswordHasher, card_marker
from access_directory.core.constants import AUTH_FAILED_MESSAGE
from access_directory.core.enums import Role
from access_directory.core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from access_directory.users.model import SAFE_EXCLUDED_FIELDS
from access_directory.users.service import UserService


def _make(service, n: int, **extra):
    data = {
        "username": f"user{n}",
        "email": f"user{n}@x.com",
        "password": "password-1",
        "phone": "555",
        "department": "ops",
    }
    data.update(extra)
    return service.create(data)


def test_scenario_alice(service, alice_input):
    alice = service.create(alice_input)
    assert alice["id"] == 1
    assert "passwordHash" not in alice

    with pytest.raises(ConflictError):
        service.create({**alice_input, "email": "other@x.com"})

    result = service.login("alice", "s3cret!!")
    assert result.message == "Login successful"
    assert result.user["username"] == "alice"
    assert "passwordHash" not in result.user

    with pytest.raises(AuthenticationError):
        service.login("alice", "wrong")

    updated = service.update(1, {"department": "eng"})
    assert updated["department"] == "eng"
    assert updated["id"] == 1

    service.delete(1)
    with pytest.raises(NotFoundError):
        service.find_by_id(1)


def test_ids_are_strictly_increasing(service):
    ids = [_make(service, n)["id"] for n in range(1, 5)]
    assert ids == [1, 2, 3, 4]


def test_id_is_max_plus_one_after_delete(service):
    for n in range(1, 4):
        _make(service, n)
    service.delete(3)
    service.delete(1)

    assert _make(service, 9)["id"] == 3


def test_create_lists_every_missing_field(service):
    with pytest.raises(ValidationError) as exc_info:
        service.create({"username": "bob", "phone": "  "})

    assert set(exc_info.value.fields) == {"email", "password", "phone", "department"}


def test_duplicate_email_conflicts_and_store_keeps_one(service, alice_input):
    service.create(alice_input)
    with pytest.raises(ConflictError):
        service.create({**alice_input, "username": "alice2"})

    matches = [u for u in service.list_users() if u["email"] == "a@x.com"]
    assert len(matches) == 1


def test_username_conflict_checked_before_email(service, alice_input):
    service.create(alice_input)
    with pytest.raises(ConflictError, match="Username"):
        service.create(alice_input)


def test_uniqueness_includes_inactive_users(service, alice_input):
    service.create({**alice_input, "active": False})
    with pytest.raises(ConflictError):
        service.create({**alice_input, "email": "fresh@x.com"})


def test_create_rejects_short_password(service, alice_input):
    with pytest.raises(ValidationError):
        service.create({**alice_input, "password": "short"})


def test_create_rejects_unknown_role(service, alice_input):
    with pytest.raises(ValidationError):
        service.create({**alice_input, "role": "wizard"})


def test_create_defaults(service, alice_input):
    alice = service.create(alice_input)

    assert alice["role"] == Role.USER.value
    assert alice["active"] is True
    assert alice["idCardMarker"] == EMPTY_CARD_MARKER
    assert alice["createdAt"]


def test_create_accepts_legacy_keys_and_hashes_card(service):
    user = service.create(
        {
            "usuario": "pedro",
            "correo": "p@x.com",
            "contrasena": "password-1",
            "telefono": "999",
            "departamento": "seguridad",
            "IDcard": "04A32B19",
            "role": "portero",
        }
    )

    assert user["username"] == "pedro"
    assert user["role"] == Role.GATEKEEPER.value
    assert user["idCardMarker"] == card_marker("04A32B19")
    assert "04A32B19" not in json.dumps(user)


def test_password_never_stored_raw(service, users_file, alice_input):
    service.create(alice_input)
    service.update(1, {"password": "another-secret"})

    text = users_file.read_text(encoding="utf-8")
    assert "s3cret!!" not in text
    assert "another-secret" not in text


def test_login_failures_share_one_message(service, alice_input):
    service.create(alice_input)

    with pytest.raises(AuthenticationError) as wrong_password:
        service.login("alice", "wrong")
    with pytest.raises(AuthenticationError) as unknown_user:
        service.login("nobody", "s3cret!!")

    assert str(wrong_password.value) == str(unknown_user.value) == AUTH_FAILED_MESSAGE


def test_login_by_email(service, alice_input):
    service.create(alice_input)
    assert service.login("a@x.com", "s3cret!!").user["id"] == 1


def test_login_is_case_sensitive(service, alice_input):
    service.create(alice_input)
    with pytest.raises(AuthenticationError):
        service.login("ALICE", "s3cret!!")


def test_login_rejects_inactive_user(service, alice_input):
    service.create(alice_input)
    service.update(1, {"active": False})

    with pytest.raises(AuthenticationError, match=AUTH_FAILED_MESSAGE):
        service.login("alice", "s3cret!!")


def test_login_rejects_legacy_unverifiable_hash(service, repo, alice_input):
    service.create(alice_input)
    [record] = repo.load()
    repo.persist([record.with_changes(password_hash="9f86d081884c7d659a2feaa0c55ad015")])

    with pytest.raises(AuthenticationError):
        service.login("alice", "s3cret!!")


def test_safe_projections_never_carry_hash(service, alice_input):
    outputs = [service.create(alice_input)]
    outputs.append(service.login("alice", "s3cret!!").user)
    outputs.extend(service.list_users(safe=True))
    outputs.append(service.find_by_id(1))
    outputs.append(service.update(1, {"phone": "777"}))
    outputs.append(service.delete(1))

    for out in outputs:
        assert not SAFE_EXCLUDED_FIELDS & set(out)


def test_safe_excluded_field_set():
    assert SAFE_EXCLUDED_FIELDS == {"passwordHash"}


def test_unsafe_list_exposes_full_records(service, alice_input):
    service.create(alice_input)
    [record] = service.list_users(safe=False)

    assert record.password_hash.startswith("pbkdf2:sha256")


def test_list_returns_detached_copies(service, alice_input):
    service.create(alice_input)
    first = service.list_users()
    first[0]["username"] = "mallory"

    assert service.list_users()[0]["username"] == "alice"


def test_find_by_id_missing(service):
    with pytest.raises(NotFoundError):
        service.find_by_id(42)


def test_update_never_changes_id(service, alice_input):
    service.create(alice_input)
    updated = service.update(1, {"id": 99, "phone": "000"})

    assert updated["id"] == 1
    assert service.find_by_id(1)["phone"] == "000"
    with pytest.raises(NotFoundError):
        service.find_by_id(99)


def test_update_with_only_disallowed_fields(service, alice_input):
    service.create(alice_input)
    with pytest.raises(ValidationError, match="No valid fields provided"):
        service.update(1, {"id": 5, "createdAt": "yesterday", "passwordHash": "x", "password_hash": "x"})


def test_update_missing_user(service):
    with pytest.raises(NotFoundError):
        service.update(3, {"phone": "1"})


def test_update_rehashes_password(service, alice_input):
    service.create(alice_input)
    service.update(1, {"contrasena": "brand-new-pass"})

    with pytest.raises(AuthenticationError):
        service.login("alice", "s3cret!!")
    assert service.login("alice", "brand-new-pass").user["id"] == 1


def test_update_rehashes_card(service, alice_input):
    service.create(alice_input)
    updated = service.update(1, {"idCard": "CARD-1"})

    assert updated["idCardMarker"] == card_marker("CARD-1")


def test_update_rejects_taken_username(service, alice_input):
    service.create(alice_input)
    _make(service, 2)

    with pytest.raises(ConflictError):
        service.update(2, {"username": "alice"})


def test_update_keeps_own_username(service, alice_input):
    service.create(alice_input)
    assert service.update(1, {"username": "alice", "email": "a@x.com"})["username"] == "alice"


def test_update_role_and_active(service, alice_input):
    service.create(alice_input)
    updated = service.update(1, {"role": "admin", "active": "false"})

    assert updated["role"] == "admin"
    assert updated["active"] is False


def test_delete_returns_removed_user(service, alice_input):
    service.create(alice_input)
    removed = service.delete(1)

    assert removed["username"] == "alice"
    assert service.list_users() == []


def test_delete_missing_leaves_store_unchanged(service, users_file, alice_input):
    service.create(alice_input)
    before = users_file.read_text(encoding="utf-8")

    with pytest.raises(NotFoundError):
        service.delete(2)

    assert users_file.read_text(encoding="utf-8") == before


def test_operations_see_external_edits(service, repo, alice_input):
    service.create(alice_input)
    [record] = repo.load()
    repo.persist([record.with_changes(department="finance")])

    assert service.find_by_id(1)["department"] == "finance"


class CountingHasher(PasswordHasher):
    def __init__(self):
        super().__init__("pbkdf2:sha256:1000")
        self.verified: list[str] = []

    def verify(self, password_hash, raw_password):
        self.verified.append(password_hash)
        return super().verify(password_hash, raw_password)


def test_failed_logins_all_run_the_slow_check(repo, alice_input):
    hasher = CountingHasher()
    service = UserService(repo, hasher=hasher)
    service.create(alice_input)
    service.create({**alice_input, "username": "idle", "email": "idle@x.com", "active": False})

    for identifier in ("alice", "nobody", "idle"):
        with pytest.raises(AuthenticationError):
            service.login(identifier, "wrong-password")

    assert len(hasher.verified) == 3
    assert hasher.verified[1] == hasher.verified[2] == hasher.dummy_hash
    assert hasher.dummy_hash.startswith("pbkdf2:sha256:1000$")


def test_update_missing_user_reported_before_bad_patch(service):
    with pytest.raises(NotFoundError):
        service.update(999, {"bogus": 1})


def test_update_missing_user_reported_before_short_password(service):
    with pytest.raises(NotFoundError):
        service.update(999, {"password": "x"})
