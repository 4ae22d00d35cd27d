from __future__ import annotations

from _settings import settings

from access_directory.container import build_container
from access_directory.database.bootstrap import ensure_admin_user


def main() -> None:
    cfg = settings()
    if not cfg.get("ADMIN_PASSWORD"):
        raise SystemExit("ADMIN_PASSWORD is not set")

    container = build_container(
        users_file=cfg["USERS_FILE"],
        password_hash_method=cfg["PASSWORD_HASH_METHOD"],
        min_password_length=int(cfg["MIN_PASSWORD_LENGTH"]),
    )
    created = ensure_admin_user(
        container.user_service,
        username=cfg["ADMIN_USERNAME"],
        email=cfg["ADMIN_EMAIL"],
        password=cfg["ADMIN_PASSWORD"],
    )
    if created:
        print(f"OK: created admin '{created['username']}' (id={created['id']})")
    else:
        print(f"OK: admin '{cfg['ADMIN_USERNAME']}' already exists")


if __name__ == "__main__":
    main()
