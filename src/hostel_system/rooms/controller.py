from __future__ import annotations

from flask import Flask, g, request

from ..allottees.controller import allottee_to_json
from ..common.http import admin_required, json_body, ok
from ..container import Container
from ..core.exceptions import ValidationError
from .model import RoomDetail


def room_to_json(detail: RoomDetail) -> dict:
    room = detail.room
    return {
        "id": room.room_id,
        "number": room.number,
        "block": room.block,
        "floor": room.floor,
        "capacity": room.capacity,
        "occupancy": room.occupancy,
        "allotees": [allottee_to_json(a) for a in detail.occupants],
    }


def register(app: Flask, container: Container) -> None:
    require_admin = admin_required(container)

    def _allottee_id_from_body() -> str:
        allottee_id = json_body().get("alloteeId")
        if not allottee_id:
            raise ValidationError("Allotee ID is required")
        return allottee_id

    @app.route("/api/rooms", methods=["GET"], endpoint="list_rooms")
    def list_rooms():
        rooms = container.room_service.list_rooms(
            block=request.args.get("block") or None,
            floor=request.args.get("floor") or None,
        )
        return ok([room_to_json(r) for r in rooms])

    @app.route("/api/rooms", methods=["POST"], endpoint="create_room")
    @require_admin
    def create_room():
        data = json_body()
        detail = container.room_service.create(
            number=data.get("number"),
            block=data.get("block"),
            floor=data.get("floor"),
            capacity=data.get("capacity"),
        )
        return ok({"message": "Room created successfully", "room": room_to_json(detail)}, 201)

    @app.route("/api/rooms/<room_id>", methods=["GET"], endpoint="get_room")
    def get_room(room_id: str):
        return ok(room_to_json(container.room_service.get(room_id)))

    @app.route("/api/rooms/<room_id>", methods=["PUT"], endpoint="update_room")
    @require_admin
    def update_room(room_id: str):
        changes = {k: v for k, v in json_body().items() if k != "adminEmail"}
        return ok(room_to_json(container.room_service.update(room_id, changes)))

    @app.route("/api/rooms/<room_id>", methods=["DELETE"], endpoint="delete_room")
    @require_admin
    def delete_room(room_id: str):
        container.room_service.delete(room_id)
        return ok({"message": "Room deleted successfully"})

    @app.route("/api/rooms/<room_id>/allot", methods=["PUT"], endpoint="allot_room")
    @require_admin
    def allot_room(room_id: str):
        detail = container.allocation_service.allot(room_id, _allottee_id_from_body(), actor=g.admin.email)
        return ok({"message": "Allotee allotted to room successfully", "room": room_to_json(detail)})

    @app.route("/api/rooms/<room_id>/allot", methods=["DELETE"], endpoint="deallocate_room")
    @require_admin
    def deallocate_room(room_id: str):
        detail = container.allocation_service.deallocate(room_id, _allottee_id_from_body(), actor=g.admin.email)
        return ok({"message": "Allotee removed from room successfully", "room": room_to_json(detail)})
