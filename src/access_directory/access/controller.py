from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.enums import VerifyStatus
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    gateway = container.access_service

    @app.route("/api/verify", methods=["POST"], endpoint="verify_card")
    def verify_card():
        """Called by the door reader with the UID it just read."""
        data = request.get_json(silent=True)
        uid = data.get("uid") if isinstance(data, dict) else None
        try:
            result = gateway.verify_card(uid)
        except ValidationError as e:
            return jsonify({"status": "ERROR", "message": e.message}), 400

        if result.status == VerifyStatus.ERROR:
            return jsonify({"status": "ERROR", "message": "internal"}), 500
        return jsonify(result.to_dict()), 200
