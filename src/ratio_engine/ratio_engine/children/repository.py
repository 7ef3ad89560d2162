from __future__ import annotations

from typing import Iterable, Mapping, Optional, Protocol

from .model import Child


class ChildRepository(Protocol):
    def get_by_id(self, child_id: int) -> Optional[Child]:
        raise NotImplementedError

    def get_many(self, child_ids: Iterable[int]) -> Mapping[int, Child]:
        """Children keyed by id; unknown ids are simply absent."""

        raise NotImplementedError
