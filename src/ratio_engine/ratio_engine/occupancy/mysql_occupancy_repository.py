from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime
from typing import Iterator, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, db_transaction, fetchall, fetchone, to_float
from .model import CheckInRecord, ClassroomAssignment, StaffAttendance, StaffClassroomAssignment
from .repository import OccupancyRepository, OccupancyUnitOfWork

_ASSIGNMENT_COLS = "assignment_id, child_id, classroom_id, assigned_at, removed_at"
_CHECK_IN_COLS = (
    "check_in_id, child_id, classroom_id, check_in_date, check_in_time, check_out_time, total_hours, notes"
)
_ATTENDANCE_COLS = "attendance_id, staff_id, work_date, sign_in_time, sign_out_time, total_hours, notes"
_STAFF_ASSIGNMENT_COLS = "assignment_id, staff_id, classroom_id, assigned_at, removed_at"


def _to_assignment(r) -> ClassroomAssignment:
    return ClassroomAssignment(
        assignment_id=int(r["assignment_id"]),
        child_id=int(r["child_id"]),
        classroom_id=int(r["classroom_id"]),
        assigned_at=r["assigned_at"],
        removed_at=r.get("removed_at"),
    )


def _to_check_in(r) -> CheckInRecord:
    return CheckInRecord(
        check_in_id=int(r["check_in_id"]),
        child_id=int(r["child_id"]),
        classroom_id=int(r["classroom_id"]),
        check_in_date=r["check_in_date"],
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        total_hours=to_float(r.get("total_hours")),
        notes=r.get("notes"),
    )


def _to_attendance(r) -> StaffAttendance:
    return StaffAttendance(
        attendance_id=int(r["attendance_id"]),
        staff_id=int(r["staff_id"]),
        work_date=r["work_date"],
        sign_in_time=r["sign_in_time"],
        sign_out_time=r.get("sign_out_time"),
        total_hours=to_float(r.get("total_hours")),
        notes=r.get("notes"),
    )


def _to_staff_assignment(r) -> StaffClassroomAssignment:
    return StaffClassroomAssignment(
        assignment_id=int(r["assignment_id"]),
        staff_id=int(r["staff_id"]),
        classroom_id=int(r["classroom_id"]),
        assigned_at=r["assigned_at"],
        removed_at=r.get("removed_at"),
    )


def _date_range_clauses(column: str, start_date: Optional[date], end_date: Optional[date]):
    clauses: list[str] = []
    params: list[object] = []
    if start_date is not None:
        clauses.append(f"{column} >= %s")
        params.append(start_date)
    if end_date is not None:
        clauses.append(f"{column} <= %s")
        params.append(end_date)
    return clauses, params


class MySQLOccupancyUnitOfWork(OccupancyUnitOfWork):
    """Runs every statement on the cursor of one open transaction.

    Reads of active rows use FOR UPDATE so they see (and hold) the latest
    committed state rather than a snapshot.
    """

    def __init__(self, cur):
        self._cur = cur

    def lock_child(self, child_id: int) -> bool:
        self._cur.execute("SELECT child_id FROM children WHERE child_id=%s FOR UPDATE", (int(child_id),))
        return fetchone(self._cur) is not None

    def lock_staff(self, staff_id: int) -> bool:
        self._cur.execute(
            "SELECT staff_id FROM staff WHERE staff_id=%s AND is_active=1 FOR UPDATE",
            (int(staff_id),),
        )
        return fetchone(self._cur) is not None

    def get_active_assignment(self, child_id: int) -> Optional[ClassroomAssignment]:
        self._cur.execute(
            f"""
            SELECT {_ASSIGNMENT_COLS}
            FROM classroom_assignments
            WHERE child_id=%s AND removed_at IS NULL
            ORDER BY assigned_at DESC
            LIMIT 1
            FOR UPDATE
            """,
            (int(child_id),),
        )
        r = fetchone(self._cur)
        return _to_assignment(r) if r else None

    def create_assignment(self, *, child_id: int, classroom_id: int, assigned_at: datetime) -> int:
        self._cur.execute(
            """
            INSERT INTO classroom_assignments(child_id, classroom_id, assigned_at)
            VALUES(%s,%s,%s)
            """,
            (int(child_id), int(classroom_id), assigned_at),
        )
        return int(self._cur.lastrowid)

    def close_assignment(self, *, assignment_id: int, removed_at: datetime) -> bool:
        self._cur.execute(
            """
            UPDATE classroom_assignments
            SET removed_at=%s
            WHERE assignment_id=%s AND removed_at IS NULL
            """,
            (removed_at, int(assignment_id)),
        )
        return self._cur.rowcount > 0

    def get_open_check_in(self, child_id: int) -> Optional[CheckInRecord]:
        self._cur.execute(
            f"""
            SELECT {_CHECK_IN_COLS}
            FROM child_check_ins
            WHERE child_id=%s AND check_out_time IS NULL
            ORDER BY check_in_time DESC
            LIMIT 1
            FOR UPDATE
            """,
            (int(child_id),),
        )
        r = fetchone(self._cur)
        return _to_check_in(r) if r else None

    def create_check_in(
        self,
        *,
        child_id: int,
        classroom_id: int,
        check_in_time: datetime,
        notes: Optional[str] = None,
    ) -> int:
        self._cur.execute(
            """
            INSERT INTO child_check_ins(child_id, classroom_id, check_in_date, check_in_time, notes)
            VALUES(%s,%s,%s,%s,%s)
            """,
            (int(child_id), int(classroom_id), check_in_time.date(), check_in_time, notes),
        )
        return int(self._cur.lastrowid)

    def close_check_in(self, *, check_in_id: int, check_out_time: datetime, total_hours: float) -> bool:
        self._cur.execute(
            """
            UPDATE child_check_ins
            SET check_out_time=%s, total_hours=%s
            WHERE check_in_id=%s AND check_out_time IS NULL
            """,
            (check_out_time, total_hours, int(check_in_id)),
        )
        return self._cur.rowcount > 0

    def get_open_staff_attendance(self, staff_id: int, work_date: date) -> Optional[StaffAttendance]:
        self._cur.execute(
            f"""
            SELECT {_ATTENDANCE_COLS}
            FROM staff_attendance
            WHERE staff_id=%s AND work_date=%s AND sign_out_time IS NULL
            LIMIT 1
            FOR UPDATE
            """,
            (int(staff_id), work_date),
        )
        r = fetchone(self._cur)
        return _to_attendance(r) if r else None

    def create_staff_attendance(
        self,
        *,
        staff_id: int,
        work_date: date,
        sign_in_time: datetime,
        notes: Optional[str] = None,
    ) -> int:
        self._cur.execute(
            """
            INSERT INTO staff_attendance(staff_id, work_date, sign_in_time, notes)
            VALUES(%s,%s,%s,%s)
            """,
            (int(staff_id), work_date, sign_in_time, notes),
        )
        return int(self._cur.lastrowid)

    def close_staff_attendance(self, *, attendance_id: int, sign_out_time: datetime, total_hours: float) -> bool:
        self._cur.execute(
            """
            UPDATE staff_attendance
            SET sign_out_time=%s, total_hours=%s
            WHERE attendance_id=%s AND sign_out_time IS NULL
            """,
            (sign_out_time, total_hours, int(attendance_id)),
        )
        return self._cur.rowcount > 0

    def get_staff_assignment(self, assignment_id: int) -> Optional[StaffClassroomAssignment]:
        self._cur.execute(
            f"""
            SELECT {_STAFF_ASSIGNMENT_COLS}
            FROM staff_classroom_assignments
            WHERE assignment_id=%s
            FOR UPDATE
            """,
            (int(assignment_id),),
        )
        r = fetchone(self._cur)
        return _to_staff_assignment(r) if r else None

    def get_active_staff_assignment(self, staff_id: int, classroom_id: int) -> Optional[StaffClassroomAssignment]:
        self._cur.execute(
            f"""
            SELECT {_STAFF_ASSIGNMENT_COLS}
            FROM staff_classroom_assignments
            WHERE staff_id=%s AND classroom_id=%s AND removed_at IS NULL
            LIMIT 1
            FOR UPDATE
            """,
            (int(staff_id), int(classroom_id)),
        )
        r = fetchone(self._cur)
        return _to_staff_assignment(r) if r else None

    def create_staff_assignment(self, *, staff_id: int, classroom_id: int, assigned_at: datetime) -> int:
        self._cur.execute(
            """
            INSERT INTO staff_classroom_assignments(staff_id, classroom_id, assigned_at)
            VALUES(%s,%s,%s)
            """,
            (int(staff_id), int(classroom_id), assigned_at),
        )
        return int(self._cur.lastrowid)

    def close_staff_assignment(self, *, assignment_id: int, removed_at: datetime) -> bool:
        self._cur.execute(
            """
            UPDATE staff_classroom_assignments
            SET removed_at=%s
            WHERE assignment_id=%s AND removed_at IS NULL
            """,
            (removed_at, int(assignment_id)),
        )
        return self._cur.rowcount > 0


class MySQLOccupancyRepository(OccupancyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def transaction(self) -> Iterator[MySQLOccupancyUnitOfWork]:
        with db_transaction(self._conn_factory) as (_, cur):
            yield MySQLOccupancyUnitOfWork(cur)

    def list_open_check_ins(self, *, classroom_id: Optional[int] = None) -> Sequence[CheckInRecord]:
        clauses = ["ci.check_out_time IS NULL"]
        params: list[object] = []
        if classroom_id is not None:
            clauses.append("ci.classroom_id=%s")
            params.append(int(classroom_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT ci.check_in_id, ci.child_id, ci.classroom_id, ci.check_in_date, ci.check_in_time,
                       ci.check_out_time, ci.total_hours, ci.notes
                FROM child_check_ins ci
                WHERE {where}
                ORDER BY ci.check_in_time ASC
                """,
                tuple(params),
            )
            return [_to_check_in(r) for r in fetchall(cur)]

    def list_signed_in_staff(self, *, work_date: date) -> Sequence[StaffAttendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ATTENDANCE_COLS}
                FROM staff_attendance
                WHERE work_date=%s AND sign_out_time IS NULL
                ORDER BY sign_in_time ASC
                """,
                (work_date,),
            )
            return [_to_attendance(r) for r in fetchall(cur)]

    def list_active_staff_assignments(
        self,
        *,
        classroom_id: Optional[int] = None,
        staff_id: Optional[int] = None,
    ) -> Sequence[StaffClassroomAssignment]:
        clauses = ["removed_at IS NULL"]
        params: list[object] = []
        if classroom_id is not None:
            clauses.append("classroom_id=%s")
            params.append(int(classroom_id))
        if staff_id is not None:
            clauses.append("staff_id=%s")
            params.append(int(staff_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_STAFF_ASSIGNMENT_COLS}
                FROM staff_classroom_assignments
                WHERE {where}
                ORDER BY assigned_at ASC
                """,
                tuple(params),
            )
            return [_to_staff_assignment(r) for r in fetchall(cur)]

    def list_check_in_history(
        self,
        *,
        child_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[CheckInRecord]:
        clauses, params = _date_range_clauses("check_in_date", start_date, end_date)
        where = " AND ".join(["child_id=%s", *clauses])
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_CHECK_IN_COLS}
                FROM child_check_ins
                WHERE {where}
                ORDER BY check_in_time DESC
                """,
                (int(child_id), *params),
            )
            return [_to_check_in(r) for r in fetchall(cur)]

    def list_staff_attendance_history(
        self,
        *,
        staff_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[StaffAttendance]:
        clauses, params = _date_range_clauses("work_date", start_date, end_date)
        where = " AND ".join(["staff_id=%s", *clauses])
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ATTENDANCE_COLS}
                FROM staff_attendance
                WHERE {where}
                ORDER BY sign_in_time DESC
                """,
                (int(staff_id), *params),
            )
            return [_to_attendance(r) for r in fetchall(cur)]
