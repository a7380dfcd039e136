from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_user_id, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/target", methods=["POST"], endpoint="target")
    @login_required
    def target():
        data = json_body()
        result = container.target_service.solve(
            current_user_id(),
            target_pct=data.get("target_pct", container.default_target_pct),
            end_date=data.get("end_date"),
            start_date=data.get("start_date"),
            subject_key=data.get("subject_key"),
        )
        return jsonify({"success": True, "target": result.to_dict()})
