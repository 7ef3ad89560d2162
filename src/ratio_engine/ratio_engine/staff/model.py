from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StaffMember:
    """Domain entity: a staff identity as supplied by the identity service."""

    staff_id: int
    full_name: str
    is_active: bool = True
