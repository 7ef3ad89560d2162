from __future__ import annotations

from datetime import date, datetime
from typing import ContextManager, Optional, Protocol, Sequence

from .model import CheckInRecord, ClassroomAssignment, StaffAttendance, StaffClassroomAssignment


class OccupancyUnitOfWork(Protocol):
    """Reads and writes that share one transaction.

    Every mutation first locks its subject (lock_child / lock_staff), then
    reads the subject's active rows, then closes/opens rows. Nothing is visible
    to other requests until the surrounding transaction commits.
    """

    def lock_child(self, child_id: int) -> bool:
        """Lock the child row; False if the child does not exist."""

        raise NotImplementedError

    def lock_staff(self, staff_id: int) -> bool:
        raise NotImplementedError

    # -- classroom assignments
    def get_active_assignment(self, child_id: int) -> Optional[ClassroomAssignment]:
        raise NotImplementedError

    def create_assignment(self, *, child_id: int, classroom_id: int, assigned_at: datetime) -> int:
        raise NotImplementedError

    def close_assignment(self, *, assignment_id: int, removed_at: datetime) -> bool:
        raise NotImplementedError

    # -- child check-ins
    def get_open_check_in(self, child_id: int) -> Optional[CheckInRecord]:
        raise NotImplementedError

    def create_check_in(
        self,
        *,
        child_id: int,
        classroom_id: int,
        check_in_time: datetime,
        notes: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def close_check_in(self, *, check_in_id: int, check_out_time: datetime, total_hours: float) -> bool:
        raise NotImplementedError

    # -- staff attendance
    def get_open_staff_attendance(self, staff_id: int, work_date: date) -> Optional[StaffAttendance]:
        raise NotImplementedError

    def create_staff_attendance(
        self,
        *,
        staff_id: int,
        work_date: date,
        sign_in_time: datetime,
        notes: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def close_staff_attendance(self, *, attendance_id: int, sign_out_time: datetime, total_hours: float) -> bool:
        raise NotImplementedError

    # -- staff classroom assignments
    def get_staff_assignment(self, assignment_id: int) -> Optional[StaffClassroomAssignment]:
        raise NotImplementedError

    def get_active_staff_assignment(self, staff_id: int, classroom_id: int) -> Optional[StaffClassroomAssignment]:
        raise NotImplementedError

    def create_staff_assignment(self, *, staff_id: int, classroom_id: int, assigned_at: datetime) -> int:
        raise NotImplementedError

    def close_staff_assignment(self, *, assignment_id: int, removed_at: datetime) -> bool:
        raise NotImplementedError


class OccupancyRepository(Protocol):
    def transaction(self) -> ContextManager[OccupancyUnitOfWork]:
        raise NotImplementedError

    # Read path: point-in-time, non-locking.
    def list_open_check_ins(self, *, classroom_id: Optional[int] = None) -> Sequence[CheckInRecord]:
        raise NotImplementedError

    def list_signed_in_staff(self, *, work_date: date) -> Sequence[StaffAttendance]:
        raise NotImplementedError

    def list_active_staff_assignments(
        self,
        *,
        classroom_id: Optional[int] = None,
        staff_id: Optional[int] = None,
    ) -> Sequence[StaffClassroomAssignment]:
        raise NotImplementedError

    def list_check_in_history(
        self,
        *,
        child_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[CheckInRecord]:
        raise NotImplementedError

    def list_staff_attendance_history(
        self,
        *,
        staff_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[StaffAttendance]:
        raise NotImplementedError
