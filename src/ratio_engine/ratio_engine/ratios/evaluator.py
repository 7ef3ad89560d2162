"""Live compliance verdict for one classroom.

Everything here is a pure function of its arguments: callers gather the staff
count and the checked-in roster, this module turns them into a snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence, Tuple

from ..children.model import Child
from ..classrooms.model import Classroom
from ..common.datetime_utils import round_half_up
from ..core.constants import RATIO_DECIMALS
from ..core.enums import RatioStatus
from .bands import RatioBand, classify_child
from .resolver import RatioGroup, resolve_effective_ratio, summarize_ratio_groups


@dataclass(frozen=True)
class RatioSnapshot:
    classroom_id: int
    classroom_name: str
    capacity: int
    staff_count: int
    children_count: int
    effective_ratio: int
    ratio_groups: Tuple[RatioGroup, ...]
    max_allowed_children: int
    actual_ratio: float
    is_over_ratio: bool
    is_over_capacity: bool
    status: RatioStatus

    def to_dict(self) -> dict:
        return {
            "classroom_id": self.classroom_id,
            "classroom_name": self.classroom_name,
            "capacity": self.capacity,
            "staff_count": self.staff_count,
            "children_count": self.children_count,
            "effective_ratio": self.effective_ratio,
            "ratio_groups": [
                {"band": g.band.value, "required_ratio": g.required_ratio, "count": g.count, "label": g.label}
                for g in self.ratio_groups
            ],
            "max_allowed_children": self.max_allowed_children,
            "actual_ratio": self.actual_ratio,
            "is_over_ratio": self.is_over_ratio,
            "is_over_capacity": self.is_over_capacity,
            "status": self.status.value,
        }


def ratio_status(children_count: int, max_allowed_children: int) -> RatioStatus:
    if children_count > max_allowed_children:
        return RatioStatus.CRITICAL
    if children_count > 0 and children_count == max_allowed_children:
        return RatioStatus.WARNING
    return RatioStatus.GOOD


def evaluate_ratio(*, classroom: Classroom, staff_count: int, bands: Sequence[RatioBand]) -> RatioSnapshot:
    staff_count = max(0, int(staff_count))
    children_count = len(bands)

    effective_ratio = resolve_effective_ratio(bands)
    max_allowed = staff_count * effective_ratio
    actual = round_half_up(children_count / staff_count, RATIO_DECIMALS) if staff_count else 0.0

    return RatioSnapshot(
        classroom_id=classroom.classroom_id,
        classroom_name=classroom.name,
        capacity=classroom.capacity,
        staff_count=staff_count,
        children_count=children_count,
        effective_ratio=effective_ratio,
        ratio_groups=tuple(summarize_ratio_groups(bands)),
        max_allowed_children=max_allowed,
        actual_ratio=actual,
        is_over_ratio=children_count > max_allowed,
        is_over_capacity=children_count > classroom.capacity,
        status=ratio_status(children_count, max_allowed),
    )


def build_classroom_snapshot(
    *,
    classroom: Classroom,
    children: Iterable[Child],
    staff_count: int,
    today: date,
) -> RatioSnapshot:
    """Classify the checked-in roster as of ``today`` and evaluate it."""
    bands = [classify_child(c.date_of_birth, c.is_kindergarten_enrolled, today) for c in children]
    return evaluate_ratio(classroom=classroom, staff_count=staff_count, bands=bands)
