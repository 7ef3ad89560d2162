from __future__ import annotations

from enum import Enum


class AgeBand(str, Enum):
    """Regulatory age bracket a child falls into."""

    INFANT = "infant"
    TODDLER = "toddler"
    PRESCHOOL = "preschool"
    PRE_K = "pre-k"
    KINDERGARTEN_PLUS = "kindergarten-plus"


class RatioStatus(str, Enum):
    """Compliance verdict for one classroom."""

    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"


class StaffScope(str, Enum):
    """Which signed-in staff count toward a classroom's ratio."""

    CENTER = "center"
    CLASSROOM = "classroom"
