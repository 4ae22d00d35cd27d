from __future__ import annotations

import pytest

from access_directory.access.service import AccessVerificationService
from access_directory.common.hashing import PasswordHasher
from access_directory.users.json_user_repository import JsonUserRepository
from access_directory.users.service import UserService

FAST_HASH = "pbkdf2:sha256:1000"


@pytest.fixture
def users_file(tmp_path):
    return tmp_path / "data" / "users.json"


@pytest.fixture
def repo(users_file):
    return JsonUserRepository(users_file)


@pytest.fixture
def service(repo):
    return UserService(repo, hasher=PasswordHasher(FAST_HASH), min_password_length=8)


@pytest.fixture
def gateway(service):
    return AccessVerificationService(service)


@pytest.fixture
def alice_input():
    return {
        "username": "alice",
        "email": "a@x.com",
        "rawPassword": "s3cret!!",
        "phone": "555",
        "department": "ops",
    }
