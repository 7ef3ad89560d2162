"""Regulatory age bands and the child classifier.

Age is always derived from the date of birth at evaluation time. Nothing here
touches storage, so a child's band moves as they age without any write.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Tuple

from ..core.enums import AgeBand


@dataclass(frozen=True)
class RatioBand:
    band: AgeBand
    min_months: int
    max_months: int
    required_ratio: int  # children per staff member
    label: str

    def contains(self, age_months: float) -> bool:
        return self.min_months <= age_months <= self.max_months


RATIO_BANDS: Tuple[RatioBand, ...] = (
    RatioBand(AgeBand.INFANT, 0, 18, 4, "Infant, up to 18 months (1:4)"),
    RatioBand(AgeBand.TODDLER, 19, 35, 6, "Toddler, 19 months to 2 years (1:6)"),
    RatioBand(AgeBand.PRESCHOOL, 36, 47, 8, "Preschool, 3 years (1:8)"),
    RatioBand(AgeBand.PRE_K, 48, 59, 10, "Pre-K, 4 years (1:10)"),
    RatioBand(AgeBand.KINDERGARTEN_PLUS, 60, 150, 15, "Kindergarten and school age (1:15)"),
)

_BY_NAME = {b.band: b for b in RATIO_BANDS}

# Used for any age no window covers.
STRICTEST_BAND = min(RATIO_BANDS, key=lambda b: b.required_ratio)
MOST_LENIENT_BAND = max(RATIO_BANDS, key=lambda b: b.required_ratio)


def band_for(name: AgeBand) -> RatioBand:
    return _BY_NAME[AgeBand(name)]


def calculate_age_in_months(date_of_birth: date, today: date) -> int:
    """Whole calendar months elapsed between date_of_birth and today.

    One month is taken off while today's day-of-month has not reached the birth
    day-of-month, so 2022-06-15 -> 2024-06-14 is 23 months, not 24.
    """
    months = (today.year - date_of_birth.year) * 12 + (today.month - date_of_birth.month)
    if today.day < date_of_birth.day:
        months -= 1
    return months


def classify(age_months: float, is_kindergarten_enrolled: bool = False) -> RatioBand:
    if is_kindergarten_enrolled:
        return _BY_NAME[AgeBand.KINDERGARTEN_PLUS]

    for band in sorted(RATIO_BANDS, key=lambda b: b.min_months):
        if band.contains(age_months):
            return band
    return STRICTEST_BAND


def classify_child(date_of_birth: date, is_kindergarten_enrolled: bool, today: date) -> RatioBand:
    return classify(calculate_age_in_months(date_of_birth, today), bool(is_kindergarten_enrolled))
