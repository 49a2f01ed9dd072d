from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, api_errors, current_role, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    store = container.settings_store

    @app.route("/api/attendance/settings", methods=["GET"], endpoint="api_attendance_settings")
    @login_required
    @api_errors
    def api_attendance_settings():
        return jsonify({"success": True, "data": store.snapshot().to_dict()})

    @app.route("/api/attendance/settings", methods=["PUT"], endpoint="api_attendance_settings_update")
    @admin_required
    @api_errors
    def api_attendance_settings_update():
        settings = store.update(current_role=current_role(), settings=request.get_json(silent=True) or {})
        return jsonify({"success": True, "data": settings.to_dict()})
