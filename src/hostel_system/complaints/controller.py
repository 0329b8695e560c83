from __future__ import annotations

from flask import Flask, request

from ..common.http import admin_required, fmt_dt, json_body, ok
from ..container import Container
from ..core.exceptions import ValidationError
from .model import ComplaintView


def complaint_to_json(view: ComplaintView) -> dict:
    c = view.complaint
    return {
        "id": c.complaint_id,
        "title": c.title,
        "description": c.description,
        "category": c.category,
        "status": c.status.value,
        "priority": c.priority.value,
        "studentId": c.student_id,
        "roomNumber": c.room_number,
        "hostelBlock": c.hostel_block,
        "resolution": c.resolution,
        "createdAt": fmt_dt(c.created_at),
        "updatedAt": fmt_dt(c.updated_at),
        "student": {"name": view.student.name, "email": view.student.email} if view.student else None,
    }


def register(app: Flask, container: Container) -> None:
    require_admin = admin_required(container)

    @app.route("/api/complaints", methods=["GET"], endpoint="list_complaints")
    def list_complaints():
        views = container.complaint_service.list_complaints(
            student_id=request.args.get("studentId") or None,
            status=request.args.get("status") or None,
        )
        return ok([complaint_to_json(v) for v in views])

    @app.route("/api/complaints", methods=["POST"], endpoint="create_complaint")
    def create_complaint():
        view = container.complaint_service.create(json_body())
        return ok(complaint_to_json(view), 201)

    @app.route("/api/complaints/<complaint_id>", methods=["GET"], endpoint="get_complaint")
    def get_complaint(complaint_id: str):
        return ok(complaint_to_json(container.complaint_service.get(complaint_id)))

    @app.route("/api/complaints/<complaint_id>", methods=["PATCH"], endpoint="update_complaint")
    @require_admin
    def update_complaint(complaint_id: str):
        data = json_body()
        status = data.get("status")
        if not status:
            raise ValidationError("Status is required")
        if status == "Resolved":
            view = container.complaint_service.resolve(complaint_id, data.get("resolution"))
        else:
            if data.get("resolution"):
                raise ValidationError("Resolution can only be set when resolving")
            view = container.complaint_service.update_status(complaint_id, status)
        return ok(complaint_to_json(view))

    @app.route("/api/complaints/<complaint_id>", methods=["DELETE"], endpoint="delete_complaint")
    @require_admin
    def delete_complaint(complaint_id: str):
        container.complaint_service.delete(complaint_id)
        return ok({"message": "Complaint deleted successfully"})
