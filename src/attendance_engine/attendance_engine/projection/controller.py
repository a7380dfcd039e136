from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_user_id, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/projection/<mode>", methods=["POST"], endpoint="projection")
    @login_required
    def projection(mode: str):
        """mode: whole-day | per-subject | absence-plan"""

        result = container.projection_service.project(current_user_id(), mode, json_body())
        return jsonify({"success": True, "projection": result.to_dict()})
