from __future__ import annotations

from _settings import settings

from access_directory.users.json_user_repository import JsonUserRepository


def main() -> None:
    cfg = settings()
    repo = JsonUserRepository(cfg["USERS_FILE"])
    users = repo.load()
    print(f"OK: user store ready -> {repo.path} (users={len(users)})")


if __name__ == "__main__":
    main()
