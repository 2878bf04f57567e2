import io
import threading
import time
from datetime import datetime

import pytest
from PIL import Image

from photo_chrono.config import ConfigManager
from photo_chrono.core import (
    IngestionResult,
    InvalidPhaseError,
    LevelCatalog,
    ManualScheduler,
    PhotoIngestionPipeline,
    PreviewStore,
    SessionController,
)
from photo_chrono.models import GameEventType, ImageSource, Level, Photo, RoundPhase


def _jpeg_source(name: str) -> ImageSource:
    buffer = io.BytesIO()
    Image.new("RGB", (64, 48), color=(200, 120, 40)).save(buffer, "jpeg")
    return ImageSource(name=name, data=buffer.getvalue())


def _controller(config: ConfigManager | None = None, **kwargs) -> tuple[SessionController, ManualScheduler]:
    scheduler = ManualScheduler()
    controller = SessionController(config or ConfigManager(), scheduler=scheduler, **kwargs)
    return controller, scheduler


def test_new_session_starts_idle() -> None:
    controller, _ = _controller()
    assert controller.phase == RoundPhase.IDLE
    assert controller.state.current_level_index == 0
    assert controller.state.cumulative_score == 0
    assert controller.tutorial_visible is True


def test_preset_round_starts_playing_with_timer() -> None:
    controller, scheduler = _controller()
    controller.start_preset_round()

    assert controller.phase == RoundPhase.PLAYING
    assert len(controller.tiles) == 4
    assert controller.state.time_remaining_seconds == 60
    assert scheduler.active_count == 1

    scheduler.advance(5)
    assert controller.state.time_remaining_seconds == 55


def test_duplicate_ready_does_not_start_second_timer() -> None:
    controller, scheduler = _controller()
    round_id = controller.start_preset_round()
    timer = controller.timer

    duplicate = controller.pipeline.build_preset(controller.preset)
    assert controller.deliver_ingestion_result(round_id, duplicate) is False

    assert controller.timer is timer
    assert scheduler.active_count == 1
    assert len(controller.tiles) == 4


def test_reorder_rejected_outside_playing() -> None:
    controller, _ = _controller()
    with pytest.raises(InvalidPhaseError):
        controller.move_right(0)
    with pytest.raises(InvalidPhaseError):
        controller.request_check()


def test_cannot_start_round_while_playing() -> None:
    controller, _ = _controller()
    controller.start_preset_round()
    with pytest.raises(InvalidPhaseError):
        controller.start_preset_round()


def test_timeout_loses_round_exactly_once() -> None:
    events = []
    controller, scheduler = _controller(listener=events.append)
    controller.start_preset_round()

    scheduler.advance(60)
    assert controller.phase == RoundPhase.ROUND_LOST
    assert controller.notice is not None
    assert controller.notice.code == "I-303"
    assert len(controller.ordering) == 0

    scheduler.advance(30)
    notices = [event for event in events if event.event_type == GameEventType.NOTICE]
    assert len(notices) == 1
    assert scheduler.active_count == 0


def test_acknowledge_notice_returns_to_idle() -> None:
    controller, _ = _controller()
    controller.start_preset_round()
    controller.request_check()
    assert controller.phase == RoundPhase.ROUND_LOST

    controller.acknowledge_notice()
    assert controller.phase == RoundPhase.IDLE
    assert controller.notice is None


def test_toggle_dates_and_tutorial() -> None:
    controller, _ = _controller()
    controller.start_preset_round()

    assert "capture_date" not in controller.snapshot()["tiles"][0]
    assert controller.toggle_date_display() is True
    assert controller.snapshot()["tiles"][0]["capture_date"] == "2023-10-15 16:30:00"

    controller.dismiss_tutorial()
    assert controller.snapshot()["tutorial_visible"] is False


def test_snapshot_reports_level_and_band() -> None:
    controller, scheduler = _controller()
    controller.start_preset_round()
    scheduler.advance(45)

    snapshot = controller.snapshot()
    assert snapshot["level_number"] == 1
    assert snapshot["level_count"] == 5
    assert snapshot["time_remaining_seconds"] == 15
    assert snapshot["time_band"] == "low"
    assert [tile["position"] for tile in snapshot["tiles"]] == [1, 2, 3, 4]


def test_campaign_completion_resets_score() -> None:
    catalog = LevelCatalog([Level(4, 60, 300, "Only level")])
    controller, scheduler = _controller(catalog=catalog)
    controller.start_preset_round()
    controller.replace_order(sorted(controller.tiles, key=lambda photo: photo.capture_date))
    scheduler.advance(40)

    assert controller.request_check() is True
    assert controller.state.cumulative_score == 340

    assert controller.advance_to_next_level() is None
    assert controller.phase == RoundPhase.IDLE
    assert controller.state.current_level_index == 0
    assert controller.state.cumulative_score == 0


def test_campaign_completion_can_keep_score() -> None:
    config = ConfigManager()
    config.set("session.reset_score_on_completion", False)
    catalog = LevelCatalog([Level(4, 60, 300, "Only level")])
    controller, _ = _controller(config, catalog=catalog)
    controller.start_preset_round()
    controller.replace_order(sorted(controller.tiles, key=lambda photo: photo.capture_date))
    controller.request_check()

    controller.advance_to_next_level()
    assert controller.state.current_level_index == 0
    assert controller.state.cumulative_score == 420


def test_preset_advance_starts_next_level() -> None:
    controller, scheduler = _controller()
    controller.start_preset_round()
    controller.replace_order(sorted(controller.tiles, key=lambda photo: photo.capture_date))
    controller.request_check()

    controller.advance_to_next_level()
    assert controller.phase == RoundPhase.PLAYING
    assert controller.state.current_level_index == 1
    assert controller.state.time_remaining_seconds == controller.level.time_limit_seconds
    assert scheduler.active_count == 1


def test_advance_requires_won_round() -> None:
    controller, _ = _controller()
    with pytest.raises(InvalidPhaseError):
        controller.advance_to_next_level()


class _GatedPipeline(PhotoIngestionPipeline):
    """等待 gate 之後才處理；忽略取消旗標，讓過期結果真的帶著預覽回來。"""

    def __init__(self, *args, gate: threading.Event, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.gate = gate
        self.results: list[IngestionResult] = []

    def run(self, *args, **kwargs):
        self.gate.wait(5)
        kwargs.pop("cancel_token", None)
        result = super().run(*args, **kwargs)
        self.results.append(result)
        return result


def test_late_ingestion_result_is_discarded_after_reset() -> None:
    config = ConfigManager()
    store = PreviewStore()
    gate = threading.Event()
    pipeline = _GatedPipeline(config, store, gate=gate)
    controller, scheduler = _controller(config, pipeline=pipeline, preview_store=store)
    assert controller.preview_store is store
    sources = [_jpeg_source(f"{index}.jpg") for index in range(3)]

    controller.start_custom_round(sources, wait=False)
    assert controller.phase == RoundPhase.INGESTING

    controller.reset()
    gate.set()
    controller.wait_for_ingestion(5)

    assert len(pipeline.results) == 1
    assert len(pipeline.results[0].photos) == 3
    assert controller.phase == RoundPhase.IDLE
    assert len(controller.ordering) == 0
    assert len(store) == 0
    assert scheduler.active_count == 0


def test_stale_result_previews_are_released() -> None:
    store = PreviewStore()
    controller, _ = _controller(preview_store=store)

    url = store.put(b"late", "image/jpeg")
    late = IngestionResult(
        photos=[
            Photo(
                id="late",
                source_name="late.jpg",
                display_url=url,
                capture_date=datetime(2020, 1, 1),
                date_source="exif",
                owns_preview=True,
            )
        ],
        required_count=1,
    )
    assert controller.deliver_ingestion_result(controller.round_id + 5, late) is False
    assert len(store) == 0
    assert controller.phase == RoundPhase.IDLE


def test_injected_empty_preview_store_is_used() -> None:
    config = ConfigManager()
    store = PreviewStore()
    pipeline = PhotoIngestionPipeline(config, store)
    controller, _ = _controller(config, pipeline=pipeline, preview_store=store)
    assert controller.preview_store is store

    controller.start_custom_round([_jpeg_source(f"{index}.jpg") for index in range(3)])
    assert controller.phase == RoundPhase.PLAYING
    assert len(store) == 3

    controller.reset()
    assert len(store) == 0


def test_check_after_expiry_loses_even_if_timeout_is_pending() -> None:
    controller, scheduler = _controller()
    controller.start_preset_round()
    controller.replace_order(sorted(controller.tiles, key=lambda photo: photo.capture_date))
    scheduler.advance(59)
    timer = controller.timer

    # 持有鎖，讓最後一次 tick 卡在回呼前
    with controller._lock:
        ticker = threading.Thread(target=lambda: scheduler.advance(1), daemon=True)
        ticker.start()
        deadline = time.monotonic() + 5
        while not timer.expired and time.monotonic() < deadline:
            time.sleep(0.01)
        assert timer.expired

        assert controller.request_check() is False
    ticker.join(5)

    assert controller.phase == RoundPhase.ROUND_LOST
    assert controller.notice is not None
    assert controller.notice.code == "I-303"
    assert controller.state.cumulative_score == 0
    assert controller.state.time_remaining_seconds == 0


def test_snapshot_band_after_win_follows_remaining_time() -> None:
    controller, scheduler = _controller()
    controller.start_preset_round()
    controller.replace_order(sorted(controller.tiles, key=lambda photo: photo.capture_date))
    scheduler.advance(50)

    assert controller.request_check() is True
    snapshot = controller.snapshot()
    assert snapshot["time_remaining_seconds"] == 10
    assert snapshot["time_band"] == "low"
