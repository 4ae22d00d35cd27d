from __future__ import annotations

import importlib
import logging
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from flask import Flask

from .access.controller import register as register_access
from .common.http import register_error_handlers
from .config import get_settings_module
from .container import build_container
from .database.bootstrap import ensure_admin_user
from .users.controller import register as register_users

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    root = logging.getLogger("access_directory")
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)


def load_settings(overrides: Optional[Mapping[str, Any]] = None) -> dict[str, Any]:
    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    values = {name: getattr(settings, name) for name in dir(settings) if name.isupper()}
    values["SETTINGS_MODULE"] = settings_module
    values.update(overrides or {})
    return values


def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    load_dotenv(override=False)
    settings = load_settings(overrides)

    configure_logging(settings.get("LOG_LEVEL", "INFO"))
    log = logging.getLogger(__name__)

    app = Flask(__name__)
    app.secret_key = settings["SECRET_KEY"]
    app.config["DEBUG"] = bool(settings.get("DEBUG", False))
    app.config["TESTING"] = bool(settings.get("TESTING", False))

    container = build_container(
        users_file=settings["USERS_FILE"],
        password_hash_method=settings["PASSWORD_HASH_METHOD"],
        min_password_length=int(settings["MIN_PASSWORD_LENGTH"]),
    )
    app.extensions["access_directory"] = container
    log.info("settings=%s users_file=%s", settings["SETTINGS_MODULE"], container.users_repo.path)

    if settings.get("AUTO_SEED_ADMIN") and settings.get("ADMIN_PASSWORD"):
        ensure_admin_user(
            container.user_service,
            username=settings["ADMIN_USERNAME"],
            email=settings["ADMIN_EMAIL"],
            password=settings["ADMIN_PASSWORD"],
        )

    @app.route("/", endpoint="index")
    def index():
        return "API running. Access user routes at /api/users"

    register_error_handlers(app)
    register_users(app, container)
    register_access(app, container)

    return app
