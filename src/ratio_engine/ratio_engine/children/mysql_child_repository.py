from __future__ import annotations

from typing import Dict, Iterable, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Child
from .repository import ChildRepository


def _row_to_child(r) -> Child:
    return Child(
        child_id=int(r["child_id"]),
        first_name=r["first_name"],
        last_name=r["last_name"],
        date_of_birth=r["date_of_birth"],
        is_kindergarten_enrolled=bool(r.get("is_kindergarten_enrolled") or 0),
    )


class MySQLChildRepository(ChildRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, child_id: int) -> Optional[Child]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT child_id, first_name, last_name, date_of_birth, is_kindergarten_enrolled
                FROM children
                WHERE child_id=%s
                """,
                (int(child_id),),
            )
            r = fetchone(cur)
            return _row_to_child(r) if r else None

    def get_many(self, child_ids: Iterable[int]) -> Dict[int, Child]:
        ids = sorted({int(i) for i in child_ids})
        if not ids:
            return {}

        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT child_id, first_name, last_name, date_of_birth, is_kindergarten_enrolled
                FROM children
                WHERE child_id IN ({placeholders})
                """,
                tuple(ids),
            )
            return {c.child_id: c for c in (_row_to_child(r) for r in fetchall(cur))}
