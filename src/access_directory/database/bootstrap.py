from __future__ import annotations

import logging
from typing import Optional

from ..core.enums import Role
from ..users.service import UserService

logger = logging.getLogger(__name__)


def ensure_admin_user(
    users: UserService,
    *,
    username: str,
    email: str,
    password: str,
    phone: str = "-",
    department: str = "admin",
) -> Optional[dict]:
    """Create the configured admin account unless that username already exists.

    Returns the created user's safe view, or None when nothing was done.
    """
    if any(u["username"] == username for u in users.list_users(safe=True)):
        logger.debug("Admin user %s already present", username)
        return None

    created = users.create(
        {
            "username": username,
            "email": email,
            "password": password,
            "phone": phone,
            "department": department,
            "role": Role.ADMIN.value,
        }
    )
    logger.info("Seeded admin user id=%s", created["id"])
    return created
