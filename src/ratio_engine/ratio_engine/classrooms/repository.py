from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Classroom


class ClassroomRepository(Protocol):
    def get_by_id(self, classroom_id: int) -> Optional[Classroom]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Classroom]:
        raise NotImplementedError
