from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Sequence, Tuple

from ..children.model import Child
from ..children.repository import ChildRepository
from ..classrooms.model import Classroom
from ..classrooms.repository import ClassroomRepository
from ..common.datetime_utils import now_local
from ..common.validators import require_positive_id
from ..core.enums import RatioStatus, StaffScope
from ..core.exceptions import NotFoundError
from ..occupancy.model import CheckInRecord, StaffAttendance
from ..occupancy.repository import OccupancyRepository
from .evaluator import RatioSnapshot, build_classroom_snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardSnapshot:
    classrooms: Tuple[RatioSnapshot, ...]
    total_classrooms: int
    total_children_checked_in: int
    total_staff_signed_in: int
    classrooms_over_ratio: int
    classrooms_at_ratio: int

    def to_dict(self) -> dict:
        return {
            "summary": {
                "total_classrooms": self.total_classrooms,
                "total_children_checked_in": self.total_children_checked_in,
                "total_staff_signed_in": self.total_staff_signed_in,
                "classrooms_over_ratio": self.classrooms_over_ratio,
                "classrooms_at_ratio": self.classrooms_at_ratio,
            },
            "classrooms": [s.to_dict() for s in self.classrooms],
        }


class RatioService:
    """Read path: recompute ratio status from current committed state.

    Nothing here writes or caches; two calls with no mutation in between
    produce equal snapshots.
    """

    def __init__(
        self,
        classrooms: ClassroomRepository,
        children: ChildRepository,
        occupancy: OccupancyRepository,
        *,
        staff_scope: StaffScope | str = StaffScope.CENTER,
    ):
        self._classrooms = classrooms
        self._children = children
        self._occupancy = occupancy
        self._staff_scope = StaffScope(staff_scope)

    @property
    def staff_scope(self) -> StaffScope:
        return self._staff_scope

    def _staff_count(self, classroom_id: int, signed_in: Sequence[StaffAttendance]) -> int:
        if self._staff_scope == StaffScope.CENTER:
            return len({a.staff_id for a in signed_in})

        assigned = {a.staff_id for a in self._occupancy.list_active_staff_assignments(classroom_id=classroom_id)}
        return len({a.staff_id for a in signed_in if a.staff_id in assigned})

    def _roster(self, records: Sequence[CheckInRecord], children: Dict[int, Child]) -> List[Child]:
        roster = []
        for r in records:
            child = children.get(r.child_id)
            if child is None:
                logger.warning("check-in %s references unknown child %s", r.check_in_id, r.child_id)
                continue
            roster.append(child)
        return roster

    def _snapshot(
        self,
        classroom: Classroom,
        records: Sequence[CheckInRecord],
        children: Dict[int, Child],
        signed_in: Sequence[StaffAttendance],
        today: date,
    ) -> RatioSnapshot:
        return build_classroom_snapshot(
            classroom=classroom,
            children=self._roster(records, children),
            staff_count=self._staff_count(classroom.classroom_id, signed_in),
            today=today,
        )

    def get_classroom_ratio_snapshot(self, classroom_id: int, *, now: datetime | None = None) -> RatioSnapshot:
        classroom_id = require_positive_id(classroom_id, "classroom_id")
        today = (now or now_local()).date()

        classroom = self._classrooms.get_by_id(classroom_id)
        if not classroom or not classroom.is_active:
            raise NotFoundError(f"Classroom {classroom_id} not found")

        records = self._occupancy.list_open_check_ins(classroom_id=classroom_id)
        children = dict(self._children.get_many(r.child_id for r in records))
        signed_in = self._occupancy.list_signed_in_staff(work_date=today)

        return self._snapshot(classroom, records, children, signed_in, today)

    def get_dashboard_snapshot(self, *, now: datetime | None = None) -> DashboardSnapshot:
        today = (now or now_local()).date()

        classrooms = sorted(self._classrooms.list_active(), key=lambda c: (c.name, c.classroom_id))
        records = self._occupancy.list_open_check_ins()
        children = dict(self._children.get_many(r.child_id for r in records))
        signed_in = self._occupancy.list_signed_in_staff(work_date=today)

        by_room: Dict[int, List[CheckInRecord]] = defaultdict(list)
        for r in records:
            by_room[r.classroom_id].append(r)

        snapshots = tuple(
            self._snapshot(c, by_room.get(c.classroom_id, []), children, signed_in, today) for c in classrooms
        )

        active_ids = {c.classroom_id for c in classrooms}
        return DashboardSnapshot(
            classrooms=snapshots,
            total_classrooms=len(snapshots),
            total_children_checked_in=sum(1 for r in records if r.classroom_id in active_ids),
            total_staff_signed_in=len({a.staff_id for a in signed_in}),
            classrooms_over_ratio=sum(1 for s in snapshots if s.status == RatioStatus.CRITICAL),
            classrooms_at_ratio=sum(1 for s in snapshots if s.status == RatioStatus.WARNING),
        )
