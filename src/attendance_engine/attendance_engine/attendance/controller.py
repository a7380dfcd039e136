from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_user_id, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @login_required
    def attendance_stats():
        stats = container.attendance_service.get_stats(current_user_id(), as_of=request.args.get("as_of") or None)
        return jsonify({"success": True, "stats": stats.to_dict()})

    @app.route("/api/attendance/records", methods=["POST"], endpoint="attendance_record")
    @login_required
    def attendance_record():
        data = json_body()
        record_id = container.attendance_service.record(
            current_user_id(),
            subject_key=data.get("subject_key", ""),
            class_date=data.get("date"),
            status=data.get("status", ""),
            class_type=data.get("class_type"),
            schedule_slot_id=data.get("schedule_slot_id"),
        )
        return jsonify({"success": True, "record_id": record_id}), 201

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def attendance_today():
        done = container.attendance_service.is_today_fully_recorded(current_user_id())
        return jsonify({"success": True, "fully_recorded": done})
