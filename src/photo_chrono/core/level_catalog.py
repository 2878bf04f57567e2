"""關卡目錄。"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional, Sequence

from ..config import ConfigManager
from ..models import Level
from .errors import LevelOutOfRangeError


class LevelCatalog:
    def __init__(self, levels: Iterable[Level]) -> None:
        self._levels: tuple[Level, ...] = tuple(levels)
        if not self._levels:
            raise ValueError("level catalog must not be empty")

    @classmethod
    def from_config(cls, config: Optional[ConfigManager] = None) -> "LevelCatalog":
        config = config or ConfigManager()
        raw_levels: Sequence[dict] = config.get("levels", [])
        return cls(Level.from_dict(item) for item in raw_levels)

    @property
    def level_count(self) -> int:
        return len(self._levels)

    def level_at(self, index: int) -> Level:
        if not 0 <= index < len(self._levels):
            raise LevelOutOfRangeError(
                f"level index {index} out of range [0, {len(self._levels)})"
            )
        return self._levels[index]

    def is_last(self, index: int) -> bool:
        return index == len(self._levels) - 1

    def __len__(self) -> int:
        return len(self._levels)

    def __iter__(self) -> Iterator[Level]:
        return iter(self._levels)
