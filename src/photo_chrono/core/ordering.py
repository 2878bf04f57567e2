"""排序區：目前這一回合的方塊順序。"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Sequence, Union

from ..models import Photo
from .errors import ContractViolationError


class OrderingStore:
    def __init__(self) -> None:
        self._photos: List[Photo] = []

    def initialize(self, photos: Iterable[Photo]) -> None:
        items = list(photos)
        ids = [item.id for item in items]
        if len(set(ids)) != len(ids):
            raise ContractViolationError("duplicate photo id in initial order")
        self._photos = items

    def clear(self) -> List[Photo]:
        """清空並回傳被移除的照片，讓呼叫端釋放預覽圖。"""
        removed = self._photos
        self._photos = []
        return removed

    @property
    def photos(self) -> List[Photo]:
        return list(self._photos)

    @property
    def ids(self) -> List[str]:
        return [item.id for item in self._photos]

    def __len__(self) -> int:
        return len(self._photos)

    def swap_adjacent(self, i: int, j: int) -> bool:
        """交換相鄰兩格；在頭尾邊界往外移動時不做事。"""
        if abs(i - j) != 1:
            raise ContractViolationError(f"indices {i} and {j} are not adjacent")
        size = len(self._photos)
        low, high = min(i, j), max(i, j)
        if low == -1 and 0 <= high < size:
            return False
        if high == size and 0 <= low < size:
            return False
        if not (0 <= low and high < size):
            raise ContractViolationError(f"indices {i}, {j} out of range for {size} tiles")
        self._photos[low], self._photos[high] = self._photos[high], self._photos[low]
        return True

    def move_left(self, index: int) -> bool:
        return self.swap_adjacent(index, index - 1)

    def move_right(self, index: int) -> bool:
        return self.swap_adjacent(index, index + 1)

    def replace_order(self, new_order: Sequence[Union[str, Photo]]) -> None:
        ids = [item.id if isinstance(item, Photo) else str(item) for item in new_order]
        if Counter(ids) != Counter(self.ids):
            raise ContractViolationError("new order is not a permutation of the current tiles")
        by_id = {item.id: item for item in self._photos}
        self._photos = [by_id[photo_id] for photo_id in ids]
