from __future__ import annotations

from datetime import datetime
from types import SimpleNamespace

import pytest
from flask import Flask

from src.ratio_engine.ratio_engine.occupancy import controller as occupancy_controller
from src.ratio_engine.ratio_engine.occupancy import service as occupancy_module
from src.ratio_engine.ratio_engine.ratios import controller as ratio_controller
from src.ratio_engine.ratio_engine.ratios import service as ratio_module

NOW = datetime(2026, 2, 2, 8, 0, 0)


@pytest.fixture
def client(occupancy_service, ratio_service_factory, monkeypatch):
    monkeypatch.setattr(occupancy_module, "now_local", lambda: NOW)
    monkeypatch.setattr(ratio_module, "now_local", lambda: NOW)

    app = Flask(__name__)
    app.config["TESTING"] = True
    container = SimpleNamespace(
        occupancy_service=occupancy_service,
        ratio_service=ratio_service_factory(),
    )
    occupancy_controller.register(app, container)
    ratio_controller.register(app, container)
    return app.test_client()


def test_check_in_and_duplicate_conflict(client):
    resp = client.post("/api/classrooms/1/check-in", json={"child_id": 1})
    assert resp.status_code == 201
    assert resp.get_json()["success"] is True

    resp = client.post("/api/classrooms/2/check-in", json={"child_id": 1})
    assert resp.status_code == 409
    body = resp.get_json()
    assert body["success"] is False
    assert body["code"] == "ALREADY_CHECKED_IN"


def test_check_out_without_check_in_is_bad_request(client):
    resp = client.post("/api/children/2/check-out")

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "NOT_CHECKED_IN"


def test_missing_child_id_is_validation_error(client):
    resp = client.post("/api/classrooms/1/check-in", data="not json")

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "VALIDATION_ERROR"


def test_unknown_classroom_is_not_found(client):
    resp = client.get("/api/ratio/classroom/3")

    assert resp.status_code == 404
    assert resp.get_json()["code"] == "NOT_FOUND"


def test_ratio_reflects_check_in(client):
    client.post("/api/staff/1/sign-in", json={})
    client.post("/api/classrooms/2/check-in", json={"child_id": 3})

    data = client.get("/api/ratio/classroom/2").get_json()

    assert data["children_count"] == 1
    assert data["staff_count"] == 1
    assert data["effective_ratio"] == 6
    assert data["status"] == "good"


def test_overview_shape(client):
    data = client.get("/api/ratio/overview").get_json()

    assert set(data) == {"summary", "classrooms"}
    assert data["summary"]["total_classrooms"] == 2


def test_staff_sign_in_twice_conflicts(client):
    assert client.post("/api/staff/2/sign-in", json={"notes": "early"}).status_code == 201

    resp = client.post("/api/staff/2/sign-in", json={})
    assert resp.status_code == 409

    signed_in = client.get("/api/staff/currently-signed-in").get_json()
    assert [r["staff_id"] for r in signed_in] == [2]

    resp = client.post("/api/staff/2/sign-out")
    assert resp.status_code == 200
    assert "total_hours" in resp.get_json()


def test_staff_assignment_routes(client):
    resp = client.post("/api/ratio/staff-assignments", json={"staff_id": 1, "classroom_id": 1})
    assert resp.status_code == 201
    assignment_id = resp.get_json()["id"]

    resp = client.post("/api/ratio/staff-assignments", json={"staff_id": 1, "classroom_id": 1})
    assert resp.status_code == 409

    listing = client.get("/api/ratio/staff/1/assignments").get_json()
    assert [a["assignment_id"] for a in listing["assignments"]] == [assignment_id]

    assert client.delete(f"/api/ratio/staff-assignments/{assignment_id}").status_code == 200
    assert client.delete(f"/api/ratio/staff-assignments/{assignment_id}").status_code == 404


def test_assign_and_remove_child_routes(client):
    assert client.post("/api/classrooms/1/assign-child", json={"child_id": 4}).status_code == 201
    assert client.post("/api/classrooms/remove-child", json={"child_id": 4}).status_code == 200

    resp = client.post("/api/classrooms/remove-child", json={"child_id": 4})
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "NOT_ASSIGNED"


def test_attendance_history_rejects_bad_dates(client):
    resp = client.get("/api/children/1/attendance?start=2026-13-01")
    assert resp.status_code == 400

    resp = client.get("/api/children/1/attendance?start=2026-02-05&end=2026-02-01")
    assert resp.status_code == 400

    resp = client.get("/api/staff/1/attendance")
    assert resp.status_code == 200
    assert resp.get_json() == []


def test_checked_in_list(client):
    client.post("/api/classrooms/1/check-in", json={"child_id": 1, "notes": "bottle at 10"})

    rows = client.get("/api/classrooms/1/checked-in").get_json()

    assert [r["name"] for r in rows] == ["Ava N"]
