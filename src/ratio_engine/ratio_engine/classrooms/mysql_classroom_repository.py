from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Classroom
from .repository import ClassroomRepository


def _row_to_classroom(r) -> Classroom:
    return Classroom(
        classroom_id=int(r["classroom_id"]),
        name=r["name"],
        capacity=int(r["capacity"]),
        age_group=r.get("age_group"),
        is_active=bool(r["is_active"]),
    )


class MySQLClassroomRepository(ClassroomRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, classroom_id: int) -> Optional[Classroom]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT classroom_id, name, capacity, age_group, is_active
                FROM classrooms
                WHERE classroom_id=%s
                """,
                (int(classroom_id),),
            )
            r = fetchone(cur)
            return _row_to_classroom(r) if r else None

    def list_active(self) -> Sequence[Classroom]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT classroom_id, name, capacity, age_group, is_active
                FROM classrooms
                WHERE is_active=1
                ORDER BY name ASC
                """
            )
            return [_row_to_classroom(r) for r in fetchall(cur)]
