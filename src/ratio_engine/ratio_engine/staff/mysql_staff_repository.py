from __future__ import annotations

from typing import Dict, Iterable, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import StaffMember
from .repository import StaffRepository


def _row_to_staff(r) -> StaffMember:
    return StaffMember(
        staff_id=int(r["staff_id"]),
        full_name=r["full_name"],
        is_active=bool(r["is_active"]),
    )


class MySQLStaffRepository(StaffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, staff_id: int) -> Optional[StaffMember]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT staff_id, full_name, is_active FROM staff WHERE staff_id=%s",
                (int(staff_id),),
            )
            r = fetchone(cur)
            return _row_to_staff(r) if r else None

    def get_many(self, staff_ids: Iterable[int]) -> Dict[int, StaffMember]:
        ids = sorted({int(i) for i in staff_ids})
        if not ids:
            return {}

        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT staff_id, full_name, is_active FROM staff WHERE staff_id IN ({placeholders})",
                tuple(ids),
            )
            return {s.staff_id: s for s in (_row_to_staff(r) for r in fetchall(cur))}
