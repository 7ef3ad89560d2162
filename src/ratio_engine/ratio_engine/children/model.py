from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Child:
    """Domain entity: the child-profile fields the ratio engine reads.

    Age is deliberately absent; it is derived from date_of_birth on every read.
    """

    child_id: int
    first_name: str
    last_name: str
    date_of_birth: date
    is_kindergarten_enrolled: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
