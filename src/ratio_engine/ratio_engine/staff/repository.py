from __future__ import annotations

from typing import Iterable, Mapping, Optional, Protocol

from .model import StaffMember


class StaffRepository(Protocol):
    def get_by_id(self, staff_id: int) -> Optional[StaffMember]:
        raise NotImplementedError

    def get_many(self, staff_ids: Iterable[int]) -> Mapping[int, StaffMember]:
        raise NotImplementedError
