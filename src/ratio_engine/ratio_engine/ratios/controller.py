from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response, json_body, system_error_response
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    occupancy = container.occupancy_service
    ratios = container.ratio_service

    @app.route("/api/ratio/staff-assignments", methods=["POST"], endpoint="assign_staff")
    def assign_staff():
        data = json_body()
        try:
            assignment_id = occupancy.assign_staff(data.get("staff_id"), data.get("classroom_id"))
            return jsonify({"success": True, "id": assignment_id}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return system_error_response("assign staff")

    @app.route(
        "/api/ratio/staff-assignments/<int:assignment_id>",
        methods=["DELETE"],
        endpoint="remove_staff_assignment",
    )
    def remove_staff_assignment(assignment_id: int):
        try:
            occupancy.remove_staff_assignment(assignment_id)
            return jsonify({"success": True}), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return system_error_response("remove staff assignment")

    @app.route("/api/ratio/staff/<int:staff_id>/assignments", methods=["GET"], endpoint="staff_assignments")
    def staff_assignments(staff_id: int):
        try:
            return jsonify(occupancy.list_staff_assignments(staff_id)), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return system_error_response("list staff assignments")

    @app.route("/api/ratio/classroom/<int:classroom_id>", methods=["GET"], endpoint="classroom_ratio")
    def classroom_ratio(classroom_id: int):
        try:
            snapshot = ratios.get_classroom_ratio_snapshot(classroom_id)
            return jsonify(snapshot.to_dict()), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return system_error_response("compute classroom ratio")

    @app.route("/api/ratio/overview", methods=["GET"], endpoint="ratio_overview")
    def ratio_overview():
        try:
            return jsonify(ratios.get_dashboard_snapshot().to_dict()), 200
        except Exception:
            return system_error_response("compute ratio overview")
