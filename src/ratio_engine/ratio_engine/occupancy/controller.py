from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import error_response, json_body, system_error_response
from ..common.validators import optional_date
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    occupancy = container.occupancy_service

    def _history_range():
        return (
            optional_date(request.args.get("start"), "start"),
            optional_date(request.args.get("end"), "end"),
        )

    # ---------------------------------------------------------------- assignment
    @app.route("/api/classrooms/<int:classroom_id>/assign-child", methods=["POST"], endpoint="assign_child")
    def assign_child(classroom_id: int):
        try:
            assignment_id = occupancy.assign_child(json_body().get("child_id"), classroom_id)
            return jsonify({"success": True, "id": assignment_id}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return system_error_response("assign child")

    @app.route("/api/classrooms/remove-child", methods=["POST"], endpoint="remove_child")
    def remove_child():
        try:
            occupancy.remove_child(json_body().get("child_id"))
            return jsonify({"success": True}), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return system_error_response("remove child")

    # ------------------------------------------------------------------ check-in
    @app.route("/api/classrooms/<int:classroom_id>/check-in", methods=["POST"], endpoint="check_in")
    def check_in(classroom_id: int):
        data = json_body()
        try:
            check_in_id = occupancy.check_in(data.get("child_id"), classroom_id, notes=data.get("notes"))
            return jsonify({"success": True, "id": check_in_id}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return system_error_response("check in")

    @app.route("/api/children/<int:child_id>/check-out", methods=["POST"], endpoint="check_out")
    def check_out(child_id: int):
        try:
            result = occupancy.check_out(child_id)
            return jsonify({"success": True, "id": result.check_in_id, "total_hours": result.total_hours}), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return system_error_response("check out")

    @app.route("/api/classrooms/<int:classroom_id>/checked-in", methods=["GET"], endpoint="checked_in")
    def checked_in(classroom_id: int):
        try:
            return jsonify(occupancy.list_checked_in(classroom_id)), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return system_error_response("list checked-in children")

    @app.route("/api/children/<int:child_id>/attendance", methods=["GET"], endpoint="child_attendance")
    def child_attendance(child_id: int):
        try:
            start, end = _history_range()
            return jsonify(occupancy.child_attendance_history(child_id, start_date=start, end_date=end)), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return system_error_response("load child attendance")

    # ------------------------------------------------------------ staff presence
    @app.route("/api/staff/<int:staff_id>/sign-in", methods=["POST"], endpoint="staff_sign_in")
    def staff_sign_in(staff_id: int):
        try:
            attendance_id = occupancy.staff_sign_in(staff_id, notes=json_body().get("notes"))
            return jsonify({"success": True, "id": attendance_id}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return system_error_response("sign in")

    @app.route("/api/staff/<int:staff_id>/sign-out", methods=["POST"], endpoint="staff_sign_out")
    def staff_sign_out(staff_id: int):
        try:
            result = occupancy.staff_sign_out(staff_id)
            return jsonify({"success": True, "id": result.attendance_id, "total_hours": result.total_hours}), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return system_error_response("sign out")

    @app.route("/api/staff/<int:staff_id>/attendance", methods=["GET"], endpoint="staff_attendance")
    def staff_attendance(staff_id: int):
        try:
            start, end = _history_range()
            return jsonify(occupancy.staff_attendance_history(staff_id, start_date=start, end_date=end)), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            return system_error_response("load staff attendance")

    @app.route("/api/staff/currently-signed-in", methods=["GET"], endpoint="staff_currently_signed_in")
    def staff_currently_signed_in():
        try:
            return jsonify(occupancy.currently_signed_in()), 200
        except Exception:
            return system_error_response("list signed-in staff")
