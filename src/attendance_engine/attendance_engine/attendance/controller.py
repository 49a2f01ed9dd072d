from __future__ import annotations

import csv
import io
from datetime import date

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import now_local, parse_iso_date, parse_iso_datetime, resolve_date_filter
from ..common.http import admin_required, api_errors, current_role, login_required
from ..common.validators import require_int
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import AttendanceStatus, Role, ShiftName
from ..core.exceptions import ValidationError
from ..container import Container
from .aggregator import HistoryQuery, paginate
from .model import AttendanceEvent


def register(app: Flask, container: Container) -> None:
    def _zone():
        return container.settings_store.snapshot().global_settings.zone

    def _today() -> date:
        return now_local(_zone()).date()

    def _client_ip() -> str | None:
        # forwarded headers are honoured only through ProxyFix in create_app
        return request.remote_addr

    def _history_query() -> HistoryQuery:
        args = request.args

        start = parse_iso_date(args["startDate"]) if args.get("startDate") else None
        end = parse_iso_date(args["endDate"]) if args.get("endDate") else None
        if start is None and end is None and args.get("dateFilter"):
            start, end = resolve_date_filter(args["dateFilter"], _today())

        status = args.get("status")
        shift = args.get("shift")
        try:
            status_enum = AttendanceStatus(status) if status and status != "all" else None
            shift_enum = ShiftName(shift) if shift and shift != "all" else None
        except ValueError as e:
            raise ValidationError(str(e)) from None

        return HistoryQuery(
            start_date=start,
            end_date=end,
            status=status_enum,
            shift=shift_enum,
            search=(args.get("search") or "").strip() or None,
            page=require_int(args.get("page", 1), "page"),
            page_size=require_int(args.get("limit", DEFAULT_PAGE_SIZE), "limit"),
        )

    def _event() -> AttendanceEvent:
        data = request.get_json(silent=True) or {}
        timestamp = None
        if current_role() in (Role.ADMIN, Role.KIOSK):
            timestamp = parse_iso_datetime(data.get("timestamp"))
        timestamp = timestamp or now_local(_zone())
        shift = data.get("shift")
        try:
            shift_enum = ShiftName(shift) if shift else None
        except ValueError:
            raise ValidationError(f"Unknown shift: {shift!r}") from None
        return AttendanceEvent(
            user_id=int(session["user_id"]),
            user_name=str(session.get("name") or ""),
            timestamp=timestamp,
            shift=shift_enum,
            client_ip=_client_ip(),
        )

    def _record_json(record) -> dict:
        resolved = container.attendance_service.resolve(record)
        body = record.to_dict()
        body["status"] = resolved.status.value if resolved.status else None
        body["tentativeStatus"] = resolved.tentative.value if resolved.tentative else None
        body["abnormal"] = resolved.abnormal
        return body

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="api_attendance_checkin")
    @login_required
    @api_errors
    def api_attendance_checkin():
        record = container.attendance_service.check_in(_event())
        return jsonify({"success": True, "data": _record_json(record)}), 201

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="api_attendance_checkout")
    @login_required
    @api_errors
    def api_attendance_checkout():
        record = container.attendance_service.check_out(_event())
        return jsonify({"success": True, "data": _record_json(record)}), 200

    @app.route("/api/attendance/history", methods=["GET"], endpoint="api_attendance_history")
    @admin_required
    @api_errors
    def api_attendance_history():
        page = container.aggregator.query(_history_query())
        body = page.to_dict()
        body["data"] = [_record_json(r) for r in page.records]
        return jsonify({"success": True, **body})

    @app.route("/api/attendance/history/export", methods=["GET"], endpoint="api_attendance_history_export")
    @admin_required
    @api_errors
    def api_attendance_history_export():
        q = _history_query()
        rows = container.aggregator.export_rows(q, tz=_zone())

        out = io.StringIO()
        writer = csv.DictWriter(
            out,
            fieldnames=["work_date", "user_id", "user_name", "shift", "check_in", "check_out", "status", "note"],
        )
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        start = q.start_date.strftime("%Y%m%d") if q.start_date else "all"
        end = q.end_date.strftime("%Y%m%d") if q.end_date else "all"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=attendance_{start}_{end}.csv"},
        )

    @app.route("/api/attendance/history/by-name/<name>", methods=["GET"], endpoint="api_attendance_by_name")
    @login_required
    @api_errors
    def api_attendance_by_name(name: str):
        records = container.attendance_service.history_by_name(name)
        return jsonify({"success": True, "data": [_record_json(r) for r in records]})

    @app.route("/api/attendance/status", methods=["GET"], endpoint="api_attendance_status")
    @admin_required
    @api_errors
    def api_attendance_status():
        work_date = parse_iso_date(request.args["date"]) if request.args.get("date") else _today()
        roster = container.attendance_repo.list_users()
        rows = container.attendance_service.day_board(work_date, roster)

        status = request.args.get("status")
        if status and status != "all":
            rows = [r for r in rows if r.status and r.status.value == status]

        q = HistoryQuery(
            page=require_int(request.args.get("page", 1), "page"),
            page_size=require_int(request.args.get("limit", DEFAULT_PAGE_SIZE), "limit"),
        )
        q.validate()
        page_rows, total_pages = paginate(rows, q.page, q.page_size)

        return jsonify(
            {
                "success": True,
                "date": work_date.isoformat(),
                "isWorkingDay": container.calendar_service.is_working_day(work_date),
                "data": [r.to_dict() for r in page_rows],
                "pagination": {"page": q.page, "limit": q.page_size, "total": len(rows), "totalPages": total_pages},
            }
        )

    @app.route("/api/attendance/update/<int:attendance_id>", methods=["PUT"], endpoint="api_attendance_update")
    @admin_required
    @api_errors
    def api_attendance_update(attendance_id: int):
        data = request.get_json(silent=True) or {}
        record = container.attendance_service.admin_update_record(
            current_role=current_role(),
            attendance_id=attendance_id,
            check_in_time=parse_iso_datetime(data.get("checkInTime")),
            check_out_time=parse_iso_datetime(data.get("checkOutTime")),
            note=data.get("note"),
        )
        return jsonify({"success": True, "data": _record_json(record)})

    @app.route("/api/attendance/delete/<int:attendance_id>", methods=["DELETE"], endpoint="api_attendance_delete")
    @admin_required
    @api_errors
    def api_attendance_delete(attendance_id: int):
        container.attendance_service.delete_record(current_role=current_role(), attendance_id=attendance_id)
        return jsonify({"success": True})
