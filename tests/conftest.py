from __future__ import annotations

import copy
import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import date
from typing import Optional

import pytest

from src.ratio_engine.ratio_engine.children.model import Child
from src.ratio_engine.ratio_engine.classrooms.model import Classroom
from src.ratio_engine.ratio_engine.occupancy.model import (
    CheckInRecord,
    ClassroomAssignment,
    StaffAttendance,
    StaffClassroomAssignment,
)
from src.ratio_engine.ratio_engine.occupancy.service import OccupancyService
from src.ratio_engine.ratio_engine.ratios.service import RatioService
from src.ratio_engine.ratio_engine.staff.model import StaffMember


class InMemoryClassrooms:
    def __init__(self, classrooms=()):
        self.by_id: dict[int, Classroom] = {c.classroom_id: c for c in classrooms}

    def get_by_id(self, classroom_id: int) -> Optional[Classroom]:
        return self.by_id.get(classroom_id)

    def list_active(self):
        return [c for c in self.by_id.values() if c.is_active]


class InMemoryChildren:
    def __init__(self, children=()):
        self.by_id: dict[int, Child] = {c.child_id: c for c in children}

    def get_by_id(self, child_id: int) -> Optional[Child]:
        return self.by_id.get(child_id)

    def get_many(self, child_ids):
        return {i: self.by_id[i] for i in child_ids if i in self.by_id}


class InMemoryStaff:
    def __init__(self, members=()):
        self.by_id: dict[int, StaffMember] = {m.staff_id: m for m in members}

    def get_by_id(self, staff_id: int) -> Optional[StaffMember]:
        return self.by_id.get(staff_id)

    def get_many(self, staff_ids):
        return {i: self.by_id[i] for i in staff_ids if i in self.by_id}


class _State:
    def __init__(self):
        self.next_id = 0
        self.assignments: dict[int, ClassroomAssignment] = {}
        self.check_ins: dict[int, CheckInRecord] = {}
        self.attendance: dict[int, StaffAttendance] = {}
        self.staff_assignments: dict[int, StaffClassroomAssignment] = {}

    def new_id(self) -> int:
        self.next_id += 1
        return self.next_id


class InMemoryUnitOfWork:
    def __init__(self, state: _State, children: InMemoryChildren, staff: InMemoryStaff):
        self._s = state
        self._children = children
        self._staff = staff

    def lock_child(self, child_id: int) -> bool:
        return child_id in self._children.by_id

    def lock_staff(self, staff_id: int) -> bool:
        member = self._staff.by_id.get(staff_id)
        return bool(member and member.is_active)

    def get_active_assignment(self, child_id: int):
        return next((a for a in self._s.assignments.values() if a.child_id == child_id and a.is_active), None)

    def create_assignment(self, *, child_id, classroom_id, assigned_at) -> int:
        aid = self._s.new_id()
        self._s.assignments[aid] = ClassroomAssignment(aid, child_id, classroom_id, assigned_at)
        return aid

    def close_assignment(self, *, assignment_id, removed_at) -> bool:
        self._s.assignments[assignment_id] = replace(self._s.assignments[assignment_id], removed_at=removed_at)
        return True

    def get_open_check_in(self, child_id: int):
        return next((r for r in self._s.check_ins.values() if r.child_id == child_id and r.is_open), None)

    def create_check_in(self, *, child_id, classroom_id, check_in_time, notes=None) -> int:
        cid = self._s.new_id()
        self._s.check_ins[cid] = CheckInRecord(
            check_in_id=cid,
            child_id=child_id,
            classroom_id=classroom_id,
            check_in_date=check_in_time.date(),
            check_in_time=check_in_time,
            notes=notes,
        )
        return cid

    def close_check_in(self, *, check_in_id, check_out_time, total_hours) -> bool:
        self._s.check_ins[check_in_id] = replace(
            self._s.check_ins[check_in_id], check_out_time=check_out_time, total_hours=total_hours
        )
        return True

    def get_open_staff_attendance(self, staff_id: int, work_date: date):
        return next(
            (
                a
                for a in self._s.attendance.values()
                if a.staff_id == staff_id and a.work_date == work_date and a.is_open
            ),
            None,
        )

    def create_staff_attendance(self, *, staff_id, work_date, sign_in_time, notes=None) -> int:
        aid = self._s.new_id()
        self._s.attendance[aid] = StaffAttendance(aid, staff_id, work_date, sign_in_time, notes=notes)
        return aid

    def close_staff_attendance(self, *, attendance_id, sign_out_time, total_hours) -> bool:
        self._s.attendance[attendance_id] = replace(
            self._s.attendance[attendance_id], sign_out_time=sign_out_time, total_hours=total_hours
        )
        return True

    def get_staff_assignment(self, assignment_id: int):
        return self._s.staff_assignments.get(assignment_id)

    def get_active_staff_assignment(self, staff_id: int, classroom_id: int):
        return next(
            (
                a
                for a in self._s.staff_assignments.values()
                if a.staff_id == staff_id and a.classroom_id == classroom_id and a.is_active
            ),
            None,
        )

    def create_staff_assignment(self, *, staff_id, classroom_id, assigned_at) -> int:
        aid = self._s.new_id()
        self._s.staff_assignments[aid] = StaffClassroomAssignment(aid, staff_id, classroom_id, assigned_at)
        return aid

    def close_staff_assignment(self, *, assignment_id, removed_at) -> bool:
        self._s.staff_assignments[assignment_id] = replace(
            self._s.staff_assignments[assignment_id], removed_at=removed_at
        )
        return True


class InMemoryOccupancy:
    """Serializes transactions with one lock and restores state on error."""

    def __init__(self, children: InMemoryChildren, staff: InMemoryStaff):
        self.state = _State()
        self._children = children
        self._staff = staff
        self._lock = threading.Lock()
        self.commits = 0

    @contextmanager
    def transaction(self):
        with self._lock:
            before = copy.deepcopy(self.state)
            try:
                yield InMemoryUnitOfWork(self.state, self._children, self._staff)
            except Exception:
                self.state = before
                raise
            self.commits += 1

    def list_open_check_ins(self, *, classroom_id=None):
        return [
            r
            for r in self.state.check_ins.values()
            if r.is_open and (classroom_id is None or r.classroom_id == classroom_id)
        ]

    def list_signed_in_staff(self, *, work_date):
        return [a for a in self.state.attendance.values() if a.is_open and a.work_date == work_date]

    def list_active_staff_assignments(self, *, classroom_id=None, staff_id=None):
        return [
            a
            for a in self.state.staff_assignments.values()
            if a.is_active
            and (classroom_id is None or a.classroom_id == classroom_id)
            and (staff_id is None or a.staff_id == staff_id)
        ]

    def list_check_in_history(self, *, child_id, start_date=None, end_date=None):
        rows = [
            r
            for r in self.state.check_ins.values()
            if r.child_id == child_id
            and (start_date is None or r.check_in_date >= start_date)
            and (end_date is None or r.check_in_date <= end_date)
        ]
        return sorted(rows, key=lambda r: r.check_in_time, reverse=True)

    def list_staff_attendance_history(self, *, staff_id, start_date=None, end_date=None):
        rows = [
            a
            for a in self.state.attendance.values()
            if a.staff_id == staff_id
            and (start_date is None or a.work_date >= start_date)
            and (end_date is None or a.work_date <= end_date)
        ]
        return sorted(rows, key=lambda a: a.sign_in_time, reverse=True)


def make_center():
    classrooms = InMemoryClassrooms(
        [
            Classroom(classroom_id=1, name="Sunflowers", capacity=8, age_group="infant"),
            Classroom(classroom_id=2, name="Bumblebees", capacity=12, age_group="toddler"),
            Classroom(classroom_id=3, name="Closed room", capacity=10, is_active=False),
        ]
    )
    children = InMemoryChildren(
        [
            # 14 months old on 2026-02-02
            Child(child_id=1, first_name="Ava", last_name="N", date_of_birth=date(2024, 12, 1)),
            Child(child_id=2, first_name="Liam", last_name="T", date_of_birth=date(2024, 11, 20)),
            # 26 to 28 months old on 2026-02-02
            Child(child_id=3, first_name="Mia", last_name="P", date_of_birth=date(2023, 12, 1)),
            Child(child_id=4, first_name="Noah", last_name="L", date_of_birth=date(2023, 11, 5)),
            Child(child_id=5, first_name="Emma", last_name="H", date_of_birth=date(2023, 10, 1)),
            # kindergarten-enrolled infant-aged child still counts as 1:15
            Child(child_id=6, first_name="Olivia", last_name="D", date_of_birth=date(2025, 1, 1), is_kindergarten_enrolled=True),
        ]
    )
    staff = InMemoryStaff(
        [
            StaffMember(staff_id=1, full_name="Grace Lee"),
            StaffMember(staff_id=2, full_name="Omar Diaz"),
            StaffMember(staff_id=9, full_name="Ruth Park", is_active=False),
        ]
    )
    occupancy = InMemoryOccupancy(children, staff)
    return classrooms, children, staff, occupancy


@pytest.fixture
def center():
    return make_center()


@pytest.fixture
def occupancy_service(center):
    classrooms, children, staff, occupancy = center
    return OccupancyService(occupancy, classrooms, children, staff)


@pytest.fixture
def occupancy_repo(center):
    return center[3]


@pytest.fixture
def ratio_service_factory(center):
    classrooms, children, _, occupancy = center

    def build(staff_scope="center"):
        return RatioService(classrooms, children, occupancy, staff_scope=staff_scope)

    return build
