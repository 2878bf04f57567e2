"""預設示範資料集：不需要玩家提供照片即可試玩。"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PresetPhoto:
    title: str
    url: str
    capture_date: datetime


# 刻意不依季節順序排列。
DEFAULT_PRESET: tuple[PresetPhoto, ...] = (
    PresetPhoto(
        title="Autumn leaves",
        url="https://picsum.photos/id/1047/1200/800",
        capture_date=datetime(2023, 10, 15, 16, 30, 0),
    ),
    PresetPhoto(
        title="Spring blossoms",
        url="https://picsum.photos/id/1039/1200/800",
        capture_date=datetime(2023, 4, 10, 9, 0, 0),
    ),
    PresetPhoto(
        title="Summer beach",
        url="https://picsum.photos/id/1043/1200/800",
        capture_date=datetime(2023, 7, 20, 13, 15, 0),
    ),
    PresetPhoto(
        title="Winter snow",
        url="https://picsum.photos/id/1036/1200/800",
        capture_date=datetime(2024, 1, 5, 8, 45, 0),
    ),
)
