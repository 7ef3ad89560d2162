from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class ClassroomAssignment:
    """Domain entity: a child's place on a classroom roster.

    Active while removed_at is None; at most one active row per child.
    """

    assignment_id: int
    child_id: int
    classroom_id: int
    assigned_at: datetime
    removed_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.removed_at is None


@dataclass(frozen=True)
class CheckInRecord:
    """Domain entity: one child check-in, open until check_out_time is set."""

    check_in_id: int
    child_id: int
    classroom_id: int
    check_in_date: date
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    total_hours: Optional[float] = None
    notes: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.check_out_time is None


@dataclass(frozen=True)
class StaffAttendance:
    """Domain entity: a staff sign-in for one calendar day."""

    attendance_id: int
    staff_id: int
    work_date: date
    sign_in_time: datetime
    sign_out_time: Optional[datetime] = None
    total_hours: Optional[float] = None
    notes: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.sign_out_time is None


@dataclass(frozen=True)
class StaffClassroomAssignment:
    assignment_id: int
    staff_id: int
    classroom_id: int
    assigned_at: datetime
    removed_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.removed_at is None


@dataclass(frozen=True)
class CheckOutResult:
    check_in_id: int
    total_hours: float


@dataclass(frozen=True)
class SignOutResult:
    attendance_id: int
    total_hours: float
