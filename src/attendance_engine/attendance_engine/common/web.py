"""Shared helpers for the JSON controllers."""

from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request, session

from ..core.exceptions import (
    ComputationSkipped,
    DomainError,
    InconsistentScheduleError,
    UploadFailure,
    ValidationError,
)

logger = logging.getLogger(__name__)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Login required"}), 401
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ComputationSkipped)
    def _skipped(e: ComputationSkipped):
        return jsonify({"success": True, "skipped": True, "reason": e.reason}), 200

    @app.errorhandler(ValidationError)
    def _invalid(e: ValidationError):
        return jsonify({"success": False, "message": str(e)}), 400

    @app.errorhandler(InconsistentScheduleError)
    def _inconsistent(e: InconsistentScheduleError):
        return jsonify({"success": False, "message": str(e)}), 409

    @app.errorhandler(UploadFailure)
    def _upload_failed(e: UploadFailure):
        return jsonify({"success": False, "message": str(e), "pending_count": e.pending_count}), 503

    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        logger.warning("Unhandled domain error: %s", e)
        return jsonify({"success": False, "message": str(e)}), 400
