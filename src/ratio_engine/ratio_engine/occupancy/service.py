from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..children.repository import ChildRepository
from ..classrooms.model import Classroom
from ..classrooms.repository import ClassroomRepository
from ..common.datetime_utils import hours_between, now_local
from ..common.validators import optional_note, require_positive_id
from ..core.exceptions import (
    AlreadyCheckedInError,
    AlreadySignedInError,
    NotAssignedError,
    NotCheckedInError,
    NotFoundError,
    NotSignedInError,
    StaffAlreadyAssignedError,
    ValidationError,
)
from ..staff.repository import StaffRepository
from .model import CheckOutResult, SignOutResult
from .repository import OccupancyRepository

logger = logging.getLogger(__name__)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class OccupancyService:
    """Opens and closes the active assignment, check-in and sign-in rows.

    Each public mutation is a single transaction: lock the subject, read its
    active row, then close/insert. A raised error leaves storage untouched.
    """

    def __init__(
        self,
        occupancy: OccupancyRepository,
        classrooms: ClassroomRepository,
        children: ChildRepository,
        staff: StaffRepository,
    ):
        self._occupancy = occupancy
        self._classrooms = classrooms
        self._children = children
        self._staff = staff

    def _require_active_classroom(self, classroom_id: int) -> Classroom:
        classroom = self._classrooms.get_by_id(classroom_id)
        if not classroom or not classroom.is_active:
            raise NotFoundError(f"Classroom {classroom_id} not found")
        return classroom

    # ---------------------------------------------------------------- assignment
    def assign_child(self, child_id: int, classroom_id: int, *, now: datetime | None = None) -> int:
        child_id = require_positive_id(child_id, "child_id")
        classroom_id = require_positive_id(classroom_id, "classroom_id")
        now = now or now_local()
        self._require_active_classroom(classroom_id)

        with self._occupancy.transaction() as uow:
            if not uow.lock_child(child_id):
                raise NotFoundError(f"Child {child_id} not found")

            current = uow.get_active_assignment(child_id)
            if current and current.classroom_id == classroom_id:
                return current.assignment_id
            if current:
                uow.close_assignment(assignment_id=current.assignment_id, removed_at=now)

            assignment_id = uow.create_assignment(child_id=child_id, classroom_id=classroom_id, assigned_at=now)

        logger.info(
            "child %s assigned to classroom %s (previous=%s)",
            child_id,
            classroom_id,
            current.classroom_id if current else None,
        )
        return assignment_id

    def remove_child(self, child_id: int, *, now: datetime | None = None) -> None:
        child_id = require_positive_id(child_id, "child_id")
        now = now or now_local()

        with self._occupancy.transaction() as uow:
            if not uow.lock_child(child_id):
                raise NotFoundError(f"Child {child_id} not found")

            current = uow.get_active_assignment(child_id)
            if not current:
                raise NotAssignedError("Child is not assigned to a classroom")
            uow.close_assignment(assignment_id=current.assignment_id, removed_at=now)

        logger.info("child %s removed from classroom %s", child_id, current.classroom_id)

    # ------------------------------------------------------------------ check-in
    def check_in(
        self,
        child_id: int,
        classroom_id: int,
        *,
        notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> int:
        child_id = require_positive_id(child_id, "child_id")
        classroom_id = require_positive_id(classroom_id, "classroom_id")
        now = now or now_local()
        self._require_active_classroom(classroom_id)

        with self._occupancy.transaction() as uow:
            if not uow.lock_child(child_id):
                raise NotFoundError(f"Child {child_id} not found")

            existing = uow.get_open_check_in(child_id)
            if existing:
                raise AlreadyCheckedInError(
                    f"Child is already checked in to classroom {existing.classroom_id}"
                )

            check_in_id = uow.create_check_in(
                child_id=child_id,
                classroom_id=classroom_id,
                check_in_time=now,
                notes=optional_note(notes),
            )

        logger.info("child %s checked in to classroom %s", child_id, classroom_id)
        return check_in_id

    def check_out(self, child_id: int, *, now: datetime | None = None) -> CheckOutResult:
        child_id = require_positive_id(child_id, "child_id")
        now = now or now_local()

        with self._occupancy.transaction() as uow:
            if not uow.lock_child(child_id):
                raise NotFoundError(f"Child {child_id} not found")

            record = uow.get_open_check_in(child_id)
            if not record:
                raise NotCheckedInError("Child is not checked in")

            total_hours = hours_between(record.check_in_time, now)
            uow.close_check_in(check_in_id=record.check_in_id, check_out_time=now, total_hours=total_hours)

        logger.info("child %s checked out after %.2f hours", child_id, total_hours)
        return CheckOutResult(check_in_id=record.check_in_id, total_hours=total_hours)

    # ------------------------------------------------------------ staff presence
    def staff_sign_in(self, staff_id: int, *, notes: Optional[str] = None, now: datetime | None = None) -> int:
        staff_id = require_positive_id(staff_id, "staff_id")
        now = now or now_local()
        today = now.date()

        with self._occupancy.transaction() as uow:
            if not uow.lock_staff(staff_id):
                raise NotFoundError(f"Staff member {staff_id} not found")

            if uow.get_open_staff_attendance(staff_id, today):
                raise AlreadySignedInError("Staff member is already signed in today")

            attendance_id = uow.create_staff_attendance(
                staff_id=staff_id,
                work_date=today,
                sign_in_time=now,
                notes=optional_note(notes),
            )

        logger.info("staff %s signed in", staff_id)
        return attendance_id

    def staff_sign_out(self, staff_id: int, *, now: datetime | None = None) -> SignOutResult:
        staff_id = require_positive_id(staff_id, "staff_id")
        now = now or now_local()

        with self._occupancy.transaction() as uow:
            if not uow.lock_staff(staff_id):
                raise NotFoundError(f"Staff member {staff_id} not found")

            record = uow.get_open_staff_attendance(staff_id, now.date())
            if not record:
                raise NotSignedInError("Staff member is not signed in today")

            total_hours = hours_between(record.sign_in_time, now)
            uow.close_staff_attendance(
                attendance_id=record.attendance_id,
                sign_out_time=now,
                total_hours=total_hours,
            )

        logger.info("staff %s signed out after %.2f hours", staff_id, total_hours)
        return SignOutResult(attendance_id=record.attendance_id, total_hours=total_hours)

    # --------------------------------------------------- staff classroom roster
    def assign_staff(self, staff_id: int, classroom_id: int, *, now: datetime | None = None) -> int:
        staff_id = require_positive_id(staff_id, "staff_id")
        classroom_id = require_positive_id(classroom_id, "classroom_id")
        now = now or now_local()
        self._require_active_classroom(classroom_id)

        with self._occupancy.transaction() as uow:
            if not uow.lock_staff(staff_id):
                raise NotFoundError(f"Staff member {staff_id} not found")

            if uow.get_active_staff_assignment(staff_id, classroom_id):
                raise StaffAlreadyAssignedError("Staff member already assigned to this classroom")

            assignment_id = uow.create_staff_assignment(staff_id=staff_id, classroom_id=classroom_id, assigned_at=now)

        logger.info("staff %s assigned to classroom %s", staff_id, classroom_id)
        return assignment_id

    def remove_staff_assignment(self, assignment_id: int, *, now: datetime | None = None) -> None:
        assignment_id = require_positive_id(assignment_id, "assignment_id")
        now = now or now_local()

        with self._occupancy.transaction() as uow:
            assignment = uow.get_staff_assignment(assignment_id)
            if not assignment or not assignment.is_active:
                raise NotFoundError("Assignment not found")
            uow.close_staff_assignment(assignment_id=assignment_id, removed_at=now)

        logger.info("staff %s removed from classroom %s", assignment.staff_id, assignment.classroom_id)

    def list_staff_assignments(self, staff_id: int) -> dict:
        staff_id = require_positive_id(staff_id, "staff_id")
        member = self._staff.get_by_id(staff_id)
        if not member:
            raise NotFoundError(f"Staff member {staff_id} not found")

        rows = []
        for a in self._occupancy.list_active_staff_assignments(staff_id=staff_id):
            classroom = self._classrooms.get_by_id(a.classroom_id)
            rows.append(
                {
                    "assignment_id": a.assignment_id,
                    "classroom_id": a.classroom_id,
                    "classroom_name": classroom.name if classroom else "Unknown",
                    "assigned_at": _iso(a.assigned_at),
                }
            )
        return {"staff_id": member.staff_id, "staff_name": member.full_name, "assignments": rows}

    # ---------------------------------------------------------------- read models
    def list_checked_in(self, classroom_id: int) -> list[dict]:
        classroom_id = require_positive_id(classroom_id, "classroom_id")
        records = self._occupancy.list_open_check_ins(classroom_id=classroom_id)
        children = self._children.get_many(r.child_id for r in records)

        rows = []
        for r in records:
            child = children.get(r.child_id)
            rows.append(
                {
                    "child_id": r.child_id,
                    "name": child.full_name if child else "Unknown",
                    "check_in_time": _iso(r.check_in_time),
                }
            )
        return rows

    def child_attendance_history(
        self,
        child_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[dict]:
        child_id = require_positive_id(child_id, "child_id")
        if start_date and end_date and start_date > end_date:
            raise ValidationError("start date must not be after end date")

        records = self._occupancy.list_check_in_history(child_id=child_id, start_date=start_date, end_date=end_date)
        return [
            {
                "check_in_id": r.check_in_id,
                "classroom_id": r.classroom_id,
                "date": r.check_in_date.isoformat(),
                "check_in_time": _iso(r.check_in_time),
                "check_out_time": _iso(r.check_out_time),
                "total_hours": r.total_hours,
            }
            for r in records
        ]

    def staff_attendance_history(
        self,
        staff_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[dict]:
        staff_id = require_positive_id(staff_id, "staff_id")
        if start_date and end_date and start_date > end_date:
            raise ValidationError("start date must not be after end date")

        records = self._occupancy.list_staff_attendance_history(
            staff_id=staff_id, start_date=start_date, end_date=end_date
        )
        return [
            {
                "attendance_id": r.attendance_id,
                "date": r.work_date.isoformat(),
                "sign_in_time": _iso(r.sign_in_time),
                "sign_out_time": _iso(r.sign_out_time),
                "total_hours": r.total_hours,
            }
            for r in records
        ]

    def currently_signed_in(self, *, now: datetime | None = None) -> list[dict]:
        now = now or now_local()
        records = self._occupancy.list_signed_in_staff(work_date=now.date())
        members = self._staff.get_many(r.staff_id for r in records)
        return [
            {
                "staff_id": r.staff_id,
                "name": members[r.staff_id].full_name if r.staff_id in members else "Unknown",
                "sign_in_time": _iso(r.sign_in_time),
            }
            for r in records
        ]
