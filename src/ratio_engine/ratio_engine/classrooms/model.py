from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Classroom:
    """Domain entity: a classroom as supplied by the roster service."""

    classroom_id: int
    name: str
    capacity: int
    age_group: Optional[str] = None
    is_active: bool = True
