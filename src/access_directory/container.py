from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .access.service import AccessVerificationService
from .common.hashing import PasswordHasher
from .core.constants import DEFAULT_MIN_PASSWORD_LENGTH, DEFAULT_PASSWORD_HASH_METHOD
from .users.json_user_repository import JsonUserRepository
from .users.service import UserService


@dataclass(frozen=True)
class Container:
    users_repo: JsonUserRepository

    user_service: UserService
    access_service: AccessVerificationService


def build_container(
    *,
    users_file: str | Path,
    password_hash_method: str = DEFAULT_PASSWORD_HASH_METHOD,
    min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
) -> Container:
    users_repo = JsonUserRepository(users_file)
    # explicit ready step: bootstrap or validate the snapshot before serving
    users_repo.ready()

    user_service = UserService(
        users_repo,
        hasher=PasswordHasher(password_hash_method),
        min_password_length=min_password_length,
    )
    access_service = AccessVerificationService(user_service)

    return Container(
        users_repo=users_repo,
        user_service=user_service,
        access_service=access_service,
    )
