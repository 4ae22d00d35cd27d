from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.http import admin_required, json_body, login_required
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container

SELF_LOCKED_FIELDS = ("role", "active")


def register(app: Flask, container: Container) -> None:
    users = container.user_service

    @app.route("/api/users/register", methods=["POST"], endpoint="register_user")
    def register_user():
        data = json_body()
        if session.get("role") != Role.ADMIN.value and any(k in data for k in SELF_LOCKED_FIELDS):
            raise AuthorizationError("Only an admin can set role or active status")

        user = users.create(data)
        return jsonify({"message": "User registered successfully", "user": user}), 201

    @app.route("/api/users/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        identifier = data.get("username") or data.get("email") or data.get("usuario")
        raw_password = data.get("password") or data.get("contrasena")
        if not identifier or not raw_password:
            raise ValidationError("Missing username/email or password fields.")

        result = users.login(str(identifier), str(raw_password))

        session.clear()
        session["user_id"] = result.user["id"]
        session["role"] = result.user["role"]
        return jsonify({"message": result.message, "user": result.user}), 200

    @app.route("/api/users/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"message": "Logged out"}), 200

    @app.route("/api/users/", methods=["GET"], endpoint="list_users")
    @login_required
    def list_users():
        return jsonify(users.list_users(safe=True)), 200

    @app.route("/api/users/<int:user_id>", methods=["GET"], endpoint="get_user")
    @login_required
    def get_user(user_id: int):
        return jsonify(users.find_by_id(user_id)), 200

    @app.route("/api/users/<int:user_id>", methods=["PUT"], endpoint="update_user")
    @login_required
    def update_user(user_id: int):
        patch = json_body()
        if session.get("role") != Role.ADMIN.value:
            if session.get("user_id") != user_id:
                raise AuthorizationError("You can only update your own account")
            if any(k in patch for k in SELF_LOCKED_FIELDS):
                raise AuthorizationError("Only an admin can change role or active status")

        user = users.update(user_id, patch)
        return jsonify({"message": f"User {user_id} updated successfully", "user": user}), 200

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="delete_user")
    @admin_required
    def delete_user(user_id: int):
        users.delete(user_id)
        return "", 204
