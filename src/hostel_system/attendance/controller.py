from __future__ import annotations

from flask import Flask, request

from ..allottees.controller import allottee_to_json
from ..common.http import admin_email_from_request, fmt_dt, json_body, ok
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import ValidationError
from .model import AttendanceRecord, BatchItemResult


def record_to_json(r: AttendanceRecord) -> dict:
    return {
        "id": r.record_id,
        "alloteeId": r.allottee_id,
        "status": r.status.value,
        "date": fmt_dt(r.date),
        "markedBy": r.marked_by,
        "remarks": r.remarks,
    }


def _item_to_json(item: BatchItemResult) -> dict:
    out: dict = {"alloteeId": item.allottee_id, "success": item.success}
    if item.success and item.record:
        out["attendance"] = record_to_json(item.record)
    else:
        out["error"] = item.error
    return out


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["GET"], endpoint="get_attendance")
    def get_attendance():
        daily = container.attendance_service.get_for_day(request.args.get("date") or None)
        return ok(
            {
                "date": fmt_dt(daily.day),
                "attendanceRecords": [
                    {
                        "allotee": allottee_to_json(row.allottee),
                        "attendance": record_to_json(row.attendance) if row.attendance else None,
                    }
                    for row in daily.rows
                ],
            }
        )

    @app.route("/api/attendance", methods=["POST"], endpoint="record_attendance")
    def record_attendance():
        data = json_body()
        batch = container.attendance_service.record_batch(
            data.get("records"),
            actor_email=admin_email_from_request(),
            day=data.get("date") or None,
        )
        return ok(
            {
                "message": "Attendance processed",
                "date": fmt_dt(batch.day),
                "results": [_item_to_json(r) for r in batch.results],
            }
        )

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    def attendance_stats():
        s = container.attendance_service.stats(request.args.get("date") or None)
        return ok(
            {
                "total": s.total,
                "present": s.present,
                "absent": s.absent,
                "notMarked": s.not_marked,
                "attendanceRate": s.attendance_rate,
            }
        )

    @app.route("/api/attendance/allotees/<allottee_id>", methods=["GET"], endpoint="attendance_history")
    def attendance_history(allottee_id: str):
        try:
            limit = int(request.args.get("limit") or DEFAULT_HISTORY_LIMIT)
        except ValueError:
            raise ValidationError("limit must be an integer")
        records = container.attendance_service.history(allottee_id, limit=limit)
        return ok([record_to_json(r) for r in records])
