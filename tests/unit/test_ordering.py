from datetime import datetime

import pytest

from photo_chrono.core import ContractViolationError, OrderingStore
from photo_chrono.models import Photo


def _make_photos(count: int) -> list[Photo]:
    return [
        Photo(
            id=f"p{index}",
            source_name=f"{index}.jpg",
            display_url=f"preview://{index}",
            capture_date=datetime(2024, 1, index + 1),
            date_source="exif",
        )
        for index in range(count)
    ]


def _store(count: int = 4) -> OrderingStore:
    store = OrderingStore()
    store.initialize(_make_photos(count))
    return store


def test_initialize_keeps_arrival_order() -> None:
    store = _store()
    assert store.ids == ["p0", "p1", "p2", "p3"]
    assert len(store) == 4


def test_initialize_rejects_duplicate_ids() -> None:
    photos = _make_photos(2)
    with pytest.raises(ContractViolationError):
        OrderingStore().initialize([photos[0], photos[0]])


def test_swap_adjacent() -> None:
    store = _store()
    assert store.swap_adjacent(1, 2) is True
    assert store.ids == ["p0", "p2", "p1", "p3"]


def test_boundary_moves_are_noops() -> None:
    store = _store()
    assert store.move_left(0) is False
    assert store.move_right(3) is False
    assert store.swap_adjacent(0, -1) is False
    assert store.swap_adjacent(3, 4) is False
    assert store.ids == ["p0", "p1", "p2", "p3"]


def test_swap_rejects_non_adjacent_or_out_of_range() -> None:
    store = _store()
    with pytest.raises(ContractViolationError):
        store.swap_adjacent(0, 2)
    with pytest.raises(ContractViolationError):
        store.swap_adjacent(7, 8)
    assert store.ids == ["p0", "p1", "p2", "p3"]


def test_replace_order_accepts_permutation() -> None:
    store = _store()
    store.replace_order(["p3", "p1", "p0", "p2"])
    assert store.ids == ["p3", "p1", "p0", "p2"]

    photos = store.photos
    store.replace_order(list(reversed(photos)))
    assert store.ids == ["p2", "p0", "p1", "p3"]


@pytest.mark.parametrize(
    "new_order",
    [
        ["p0", "p1", "p2"],
        ["p0", "p1", "p2", "p2"],
        ["p0", "p1", "p2", "p3", "p3"],
        ["p0", "p1", "p2", "x9"],
    ],
)
def test_replace_order_rejects_non_permutation(new_order) -> None:
    store = _store()
    with pytest.raises(ContractViolationError):
        store.replace_order(new_order)
    assert store.ids == ["p0", "p1", "p2", "p3"]


def test_clear_returns_removed_photos() -> None:
    store = _store(3)
    removed = store.clear()
    assert [item.id for item in removed] == ["p0", "p1", "p2"]
    assert len(store) == 0
