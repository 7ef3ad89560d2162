from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List

from ..core.constants import EMPTY_ROOM_RATIO
from ..core.enums import AgeBand
from .bands import RATIO_BANDS, RatioBand, band_for


@dataclass(frozen=True)
class RatioGroup:
    """How many children of one band are in the room (diagnostic only)."""

    band: AgeBand
    required_ratio: int
    count: int
    label: str


def _as_band(item) -> RatioBand:
    return item if isinstance(item, RatioBand) else band_for(item)


def summarize_ratio_groups(bands: Iterable) -> List[RatioGroup]:
    counts = Counter(_as_band(b).band for b in bands)
    return [
        RatioGroup(band=b.band, required_ratio=b.required_ratio, count=counts[b.band], label=b.label)
        for b in sorted(RATIO_BANDS, key=lambda b: b.required_ratio)
        if counts[b.band] > 0
    ]


def resolve_effective_ratio(bands: Iterable) -> int:
    """Single ratio for a mixed-age room.

    The band holding the most children governs; a tie goes to the stricter
    (lower ratio) band. An empty room gets the most lenient ratio.
    """
    groups = summarize_ratio_groups(bands)
    if not groups:
        return EMPTY_ROOM_RATIO

    # groups are ordered strictest first, so max() keeps the strictest on ties
    winner = max(groups, key=lambda g: g.count)
    return winner.required_ratio
