from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_user_id, json_body, login_required
from ..container import Container
from ..core.enums import SchedulerState
from ..core.exceptions import ValidationError
from .scheduler import AutoMarkScheduler


def register(app: Flask, container: Container) -> None:
    def _scheduler() -> AutoMarkScheduler:
        return container.automark.get(current_user_id())

    def _status(scheduler: AutoMarkScheduler) -> dict:
        service = scheduler.service
        last_upload = service.last_upload
        return {
            "state": service.state.value,
            "last_upload": last_upload.isoformat() if last_upload else None,
            "pending": [p.to_dict() for p in service.snapshot()],
        }

    @app.route("/api/automark", methods=["GET"], endpoint="automark_status")
    @login_required
    def automark_status():
        return jsonify({"success": True, **_status(_scheduler())})

    @app.route("/api/automark/enable", methods=["POST"], endpoint="automark_enable")
    @login_required
    def automark_enable():
        scheduler = _scheduler()
        staged = scheduler.enable()
        return jsonify({"success": True, "staged": len(staged), **_status(scheduler)})

    @app.route("/api/automark/disable", methods=["POST"], endpoint="automark_disable")
    @login_required
    def automark_disable():
        scheduler = _scheduler()
        flushed = scheduler.disable()
        return jsonify(
            {"success": True, "flush": flushed.to_dict() if flushed else None, **_status(scheduler)}
        )

    @app.route("/api/automark/scan", methods=["POST"], endpoint="automark_scan")
    @login_required
    def automark_scan():
        scheduler = _scheduler()
        if scheduler.state != SchedulerState.ENABLED:
            raise ValidationError("Auto-mark is disabled")
        staged = scheduler.service.scan()
        return jsonify({"success": True, "staged": len(staged), **_status(scheduler)})

    @app.route("/api/automark/flush", methods=["POST"], endpoint="automark_flush")
    @login_required
    def automark_flush():
        result = _scheduler().service.flush()
        return jsonify({"success": True, "flush": result.to_dict()})

    @app.route("/api/automark/pending", methods=["PATCH"], endpoint="automark_update_pending")
    @login_required
    def automark_update_pending():
        data = json_body()
        entry = _scheduler().service.update_pending(
            subject_key=data.get("subject_key", ""),
            class_date=data.get("date"),
            schedule_slot_id=data.get("schedule_slot_id"),
            status=data.get("status", ""),
        )
        return jsonify({"success": True, "pending": entry.to_dict()})

    @app.route("/api/automark/pending", methods=["DELETE"], endpoint="automark_remove_pending")
    @login_required
    def automark_remove_pending():
        data = json_body()
        removed = _scheduler().service.remove_pending(
            subject_key=data.get("subject_key", ""),
            class_date=data.get("date"),
            schedule_slot_id=data.get("schedule_slot_id"),
        )
        return jsonify({"success": True, "removed": removed})
