from __future__ import annotations

from flask import Flask

from ..common.http import admin_email_from_request, admin_required, fmt_dt, json_body, ok
from ..common.validators import require_non_empty
from ..container import Container
from .model import Allottee


def allottee_to_json(a: Allottee) -> dict:
    return {
        "id": a.allottee_id,
        "name": a.name,
        "email": a.email,
        "roll": a.roll,
        "hostel": a.hostel,
        "room": a.room,
        "registeredBy": a.registered_by,
        "registeredAt": fmt_dt(a.registered_at),
    }


def register(app: Flask, container: Container) -> None:
    require_admin = admin_required(container)

    @app.route("/api/allotees/register", methods=["POST"], endpoint="register_allotee")
    def register_allotee():
        data = json_body()
        email = require_non_empty(data.get("email"), "Email")
        admin = container.admin_service.require_admin(admin_email_from_request())
        allottee = container.allottee_service.register(
            name=data.get("name"),
            email=email,
            roll=data.get("roll"),
            registered_by=admin.email,
        )
        return ok({"message": "Allotee registered successfully", "allotee": allottee_to_json(allottee)}, 201)

    @app.route("/api/allotees", methods=["GET"], endpoint="list_allotees")
    def list_allotees():
        return ok([allottee_to_json(a) for a in container.allottee_service.list_all()])

    @app.route("/api/allotees/unallocated", methods=["GET"], endpoint="unallocated_allotees")
    def unallocated_allotees():
        return ok([allottee_to_json(a) for a in container.allocation_service.list_unallocated()])

    @app.route("/api/allotees/<allottee_id>", methods=["GET"], endpoint="get_allotee")
    def get_allotee(allottee_id: str):
        return ok(allottee_to_json(container.allottee_service.get(allottee_id)))

    @app.route("/api/allotees/<allottee_id>", methods=["PUT"], endpoint="update_allotee")
    @require_admin
    def update_allotee(allottee_id: str):
        changes = {k: v for k, v in json_body().items() if k != "adminEmail"}
        allottee = container.allottee_service.update(allottee_id, changes)
        return ok({"message": "Allotee updated successfully", "allotee": allottee_to_json(allottee)})

    @app.route("/api/allotees/<allottee_id>", methods=["DELETE"], endpoint="delete_allotee")
    @require_admin
    def delete_allotee(allottee_id: str):
        container.allottee_service.delete(allottee_id)
        return ok({"message": "Allotee deleted successfully"})
