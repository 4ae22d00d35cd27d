"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; the rules live in the services.
"""

import tempfile
from pathlib import Path

from access_directory.container import build_container


def main():
    with tempfile.TemporaryDirectory() as tmp:
        container = build_container(users_file=Path(tmp) / "users.json")
        users = container.user_service

        alice = users.create(
            {
                "username": "alice",
                "email": "a@x.com",
                "password": "s3cret!!",
                "phone": "555",
                "department": "ops",
                "idCard": "04:A3:2B:19",
            }
        )
        print("created:", alice)
        print("login:", users.login("alice", "s3cret!!").message)
        print("reader:", container.access_service.verify_card("04:A3:2B:19").to_dict())
        print("reader:", container.access_service.verify_card("FF:FF:FF:FF").to_dict())


if __name__ == "__main__":
    main()
