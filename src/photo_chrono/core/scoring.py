"""排序驗證與計分。"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from ..models import Photo


def check_order(photos: Sequence[Photo]) -> bool:
    """相鄰兩張皆滿足後者不早於前者即為正確；相同時間視為正確。"""
    return all(
        later.capture_date >= earlier.capture_date
        for earlier, later in zip(photos, photos[1:])
    )


def time_bonus(time_remaining: float, multiplier: float = 2) -> int:
    return int(math.floor(time_remaining * multiplier))


@dataclass(frozen=True)
class RoundScore:
    base_points: int
    time_bonus: int

    @property
    def total(self) -> int:
        return self.base_points + self.time_bonus


def score_round(base_points: int, time_remaining: float, multiplier: float = 2) -> RoundScore:
    return RoundScore(base_points=base_points, time_bonus=time_bonus(time_remaining, multiplier))
