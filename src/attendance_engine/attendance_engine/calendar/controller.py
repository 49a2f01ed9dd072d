from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import admin_required, api_errors, current_role, login_required
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    calendar = container.calendar_service

    @app.route("/api/calendar", methods=["GET"], endpoint="api_calendar_list")
    @login_required
    @api_errors
    def api_calendar_list():
        start = parse_iso_date(request.args["start"]) if request.args.get("start") else None
        end = parse_iso_date(request.args["end"]) if request.args.get("end") else None
        entry_type = request.args.get("type")
        entries = calendar.list_entries(
            start=start,
            end=end,
            entry_type=entry_type if entry_type and entry_type != "all" else None,
        )
        return jsonify({"success": True, "data": [e.to_dict() for e in entries]})

    @app.route("/api/calendar", methods=["POST"], endpoint="api_calendar_create")
    @admin_required
    @api_errors
    def api_calendar_create():
        entry = calendar.create_entry(current_role=current_role(), data=request.get_json(silent=True) or {})
        return jsonify({"success": True, "data": entry.to_dict()}), 201

    @app.route("/api/calendar/<int:entry_id>", methods=["PUT"], endpoint="api_calendar_update")
    @admin_required
    @api_errors
    def api_calendar_update(entry_id: int):
        entry = calendar.update_entry(
            current_role=current_role(),
            entry_id=entry_id,
            data=request.get_json(silent=True) or {},
        )
        return jsonify({"success": True, "data": entry.to_dict()})

    @app.route("/api/calendar/<int:entry_id>", methods=["DELETE"], endpoint="api_calendar_delete")
    @admin_required
    @api_errors
    def api_calendar_delete(entry_id: int):
        calendar.delete_entry(current_role=current_role(), entry_id=entry_id)
        return jsonify({"success": True})

    @app.route("/api/calendar/settings", methods=["GET"], endpoint="api_calendar_settings")
    @login_required
    @api_errors
    def api_calendar_settings():
        return jsonify({"success": True, "data": {"workingDays": calendar.get_working_days()}})

    @app.route("/api/calendar/settings", methods=["PUT"], endpoint="api_calendar_settings_update")
    @admin_required
    @api_errors
    def api_calendar_settings_update():
        data = request.get_json(silent=True) or {}
        days = data.get("workingDays")
        if not isinstance(days, list):
            raise ValidationError("workingDays must be a list of weekday indices")
        saved = calendar.update_working_days(current_role=current_role(), days=days)
        return jsonify({"success": True, "data": {"workingDays": saved}})

    @app.route("/api/calendar/working-day/<day>", methods=["GET"], endpoint="api_calendar_working_day")
    @login_required
    @api_errors
    def api_calendar_working_day(day: str):
        work_date = parse_iso_date(day)
        entry = calendar.snapshot().deciding_entry(work_date)
        return jsonify(
            {
                "success": True,
                "data": {
                    "date": work_date.isoformat(),
                    "isWorkingDay": calendar.is_working_day(work_date),
                    "decidedBy": entry.to_dict() if entry else None,
                    "entries": [e.to_dict() for e in calendar.entries_on(work_date)],
                },
            }
        )

    @app.route("/api/calendar/working-days", methods=["GET"], endpoint="api_calendar_working_days")
    @login_required
    @api_errors
    def api_calendar_working_days():
        if not request.args.get("start") or not request.args.get("end"):
            raise ValidationError("start and end are required")
        days = calendar.working_days_between(parse_iso_date(request.args["start"]), parse_iso_date(request.args["end"]))
        return jsonify({"success": True, "data": [d.isoformat() for d in days], "count": len(days)})
