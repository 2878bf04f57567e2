"""回合狀態機：串起擷取、排序、計時與計分。"""

from __future__ import annotations

import random
import threading
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence, Union

from ..config import ConfigManager
from ..models import (
    ErrorLevel,
    GameEvent,
    GameEventType,
    ImageSource,
    Level,
    Photo,
    ProcessError,
    RoundPhase,
    SessionState,
)
from ..utils import time_utils
from ..utils.cancel import CancellationToken
from ..utils.error_handler import ErrorHandler
from ..utils.logger import get_logger
from .errors import InvalidPhaseError
from .ingestion import IngestionResult, PhotoIngestionPipeline
from .level_catalog import LevelCatalog
from .ordering import OrderingStore
from .preset import DEFAULT_PRESET, PresetPhoto
from .preview_store import PreviewStore
from .scoring import check_order, score_round
from .timer import CountdownTimer, Scheduler, ThreadingScheduler, time_band

CODE_NOT_ENOUGH_PHOTOS = "W-301"
CODE_WRONG_ORDER = "W-302"
CODE_TIME_UP = "I-303"
CODE_INGESTION_FAILED = "E-304"

MODE_CUSTOM = "custom"
MODE_PRESET = "preset"

_STARTABLE_PHASES = (RoundPhase.IDLE, RoundPhase.ROUND_LOST)


class SessionController:
    """單一玩家的遊戲進程。

    這個物件獨佔 `SessionState` 與 `OrderingStore`；所有狀態變更都在
    `_lock` 之內進行，背景擷取與計時器回呼以 round id 判斷結果是否過期。
    """

    def __init__(
        self,
        config: Optional[ConfigManager] = None,
        *,
        catalog: Optional[LevelCatalog] = None,
        scheduler: Optional[Scheduler] = None,
        pipeline: Optional[PhotoIngestionPipeline] = None,
        preview_store: Optional[PreviewStore] = None,
        preset: Sequence[PresetPhoto] = DEFAULT_PRESET,
        layout: Optional[str] = None,
        listener: Optional[Callable[[GameEvent], None]] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = datetime.now,
        logger=None,
    ) -> None:
        self.config = config if config is not None else ConfigManager()
        self.logger = logger if logger is not None else get_logger(self.__class__.__name__)
        self.catalog = catalog if catalog is not None else LevelCatalog.from_config(self.config)
        self.scheduler: Scheduler = scheduler if scheduler is not None else ThreadingScheduler()
        self.preview_store = preview_store if preview_store is not None else PreviewStore()
        self.pipeline = pipeline if pipeline is not None else PhotoIngestionPipeline(
            self.config,
            self.preview_store,
            self.logger,
            clock=clock,
            rng=rng,
        )
        self.preset = tuple(preset)
        self.layout = layout or str(self.config.get("preview.layout", "desktop"))
        self.listener = listener
        self.reset_score_on_completion = bool(
            self.config.get("session.reset_score_on_completion", True)
        )
        self.time_bonus_multiplier = self.config.get("scoring.time_bonus_multiplier", 2)
        self.tick_interval_sec = float(self.config.get("timer.tick_interval_sec", 1.0))
        self.caution_ratio = float(self.config.get("timer.caution_ratio", 0.66))
        self.low_ratio = float(self.config.get("timer.low_ratio", 0.33))

        self.state = SessionState()
        self.ordering = OrderingStore()
        self.notice: Optional[ProcessError] = None
        self.show_dates = False
        self.tutorial_visible = True
        self.last_ingestion: Optional[IngestionResult] = None

        self._lock = threading.RLock()
        self._timer: Optional[CountdownTimer] = None
        self._round_id = 0
        self._timer_round_id: Optional[int] = None
        self._mode: Optional[str] = None
        self._sources: List[ImageSource] = []
        self._selected: List[ImageSource] = []
        self._ingest_cancel: Optional[CancellationToken] = None
        self._ingest_thread: Optional[threading.Thread] = None

    # -- 唯讀狀態 ---------------------------------------------------------

    @property
    def phase(self) -> RoundPhase:
        return self.state.round_phase

    @property
    def round_id(self) -> int:
        return self._round_id

    @property
    def mode(self) -> Optional[str]:
        return self._mode

    @property
    def level(self) -> Level:
        return self.catalog.level_at(self.state.current_level_index)

    @property
    def tiles(self) -> List[Photo]:
        return self.ordering.photos

    @property
    def timer(self) -> Optional[CountdownTimer]:
        return self._timer

    def snapshot(self) -> dict[str, object]:
        with self._lock:
            level = self.level
            tiles = []
            for position, photo in enumerate(self.ordering.photos, start=1):
                tile: dict[str, object] = {
                    "position": position,
                    "id": photo.id,
                    "display_url": photo.display_url,
                }
                if self.show_dates:
                    tile["capture_date"] = time_utils.format_capture_date(photo.capture_date)
                tiles.append(tile)
            return {
                "phase": self.phase.value,
                "level_name": level.display_name,
                "level_description": level.description,
                "level_number": self.state.current_level_index + 1,
                "level_count": self.catalog.level_count,
                "cumulative_score": self.state.cumulative_score,
                "last_round_bonus": self.state.last_round_bonus,
                "time_remaining_seconds": self.state.time_remaining_seconds,
                "time_limit_seconds": level.time_limit_seconds,
                "time_band": time_band(
                    self.state.time_remaining_seconds,
                    level.time_limit_seconds,
                    self.caution_ratio,
                    self.low_ratio,
                ),
                "show_dates": self.show_dates,
                "tutorial_visible": self.tutorial_visible,
                "notice": self.notice.to_dict() if self.notice else None,
                "tiles": tiles,
            }

    # -- 開始回合 ---------------------------------------------------------

    def start_custom_round(self, sources: Iterable[ImageSource], *, wait: bool = True) -> int:
        with self._lock:
            self._require_phase(*_STARTABLE_PHASES)
            self._sources = list(sources)
            self._selected = self.pipeline.select_sources(self._sources, self.level)
            self._mode = MODE_CUSTOM
            round_id, token = self._begin_ingestion()
            selected = list(self._selected)
            required = self.level.required_photo_count
        return self._launch_ingestion(round_id, token, selected, required, wait)

    def start_preset_round(self) -> int:
        with self._lock:
            self._require_phase(*_STARTABLE_PHASES)
            self._mode = MODE_PRESET
            return self._start_preset()

    def retry_ingestion(self, *, wait: bool = True) -> int:
        """以同一份來源選擇重新擷取。"""
        with self._lock:
            self._require_phase(*_STARTABLE_PHASES)
            if self._mode is None:
                raise InvalidPhaseError("no previous round to retry")
            if self._mode == MODE_PRESET:
                return self._start_preset()
            round_id, token = self._begin_ingestion()
            selected = list(self._selected)
            required = self.level.required_photo_count
        return self._launch_ingestion(round_id, token, selected, required, wait)

    def deliver_ingestion_result(self, round_id: int, result: IngestionResult) -> bool:
        """擷取完成的回報點；過期或重複的結果會被丟棄。"""
        with self._lock:
            if round_id != self._round_id or self.phase != RoundPhase.INGESTING:
                active_ids = set(self.ordering.ids) if round_id == self._round_id else set()
                self._release_photos(p for p in result.photos if p.id not in active_ids)
                self.logger.info(f"丟棄過期的擷取結果: round {round_id}")
                self._emit(GameEventType.STALE_RESULT_DISCARDED, round_id=round_id)
                return False

            self.last_ingestion = result
            if not result.ready:
                self._release_photos(result.photos)
                self._ingest_cancel = None
                self._set_phase(RoundPhase.IDLE)
                self._raise_notice(
                    CODE_NOT_ENOUGH_PHOTOS,
                    ErrorLevel.RECOVERABLE,
                    f"Not enough valid photos: {len(result.photos)} of {result.required_count}",
                )
                return False

            self.ordering.initialize(result.photos)
            self._ingest_cancel = None
            self._start_playing(round_id)
            return True

    def wait_for_ingestion(self, timeout: Optional[float] = None) -> None:
        thread = self._ingest_thread
        if thread is not None:
            thread.join(timeout)

    # -- 重排 -------------------------------------------------------------

    def move_left(self, index: int) -> bool:
        return self._reorder(lambda: self.ordering.move_left(index))

    def move_right(self, index: int) -> bool:
        return self._reorder(lambda: self.ordering.move_right(index))

    def swap_adjacent(self, i: int, j: int) -> bool:
        return self._reorder(lambda: self.ordering.swap_adjacent(i, j))

    def replace_order(self, new_order: Sequence[Union[str, Photo]]) -> bool:
        def apply() -> bool:
            self.ordering.replace_order(new_order)
            return True

        return self._reorder(apply)

    # -- 顯示相關 ---------------------------------------------------------

    def toggle_date_display(self) -> bool:
        with self._lock:
            self.show_dates = not self.show_dates
            return self.show_dates

    def dismiss_tutorial(self) -> None:
        with self._lock:
            self.tutorial_visible = False

    def acknowledge_notice(self) -> None:
        with self._lock:
            self.notice = None
            if self.phase == RoundPhase.ROUND_LOST:
                self._set_phase(RoundPhase.IDLE)

    # -- 驗證與進度 -------------------------------------------------------

    def request_check(self) -> bool:
        with self._lock:
            self._require_phase(RoundPhase.PLAYING)
            if self._timer is not None and self._timer.expired:
                # 逾時回呼尚未取得鎖
                self.state.time_remaining_seconds = 0
                self.logger.info(f"時間到: {self.level.display_name}")
                self._lose_round(CODE_TIME_UP, ErrorLevel.INFO, "Time's up!")
                return False
            self._set_phase(RoundPhase.CHECKING)
            remaining = self._timer.remaining_seconds if self._timer else 0
            self._replace_timer(None)
            self.state.time_remaining_seconds = remaining

            if not check_order(self.ordering.photos):
                self._lose_round(CODE_WRONG_ORDER, ErrorLevel.RECOVERABLE, "Not in chronological order")
                return False

            level = self.level
            result = score_round(level.base_points, remaining, self.time_bonus_multiplier)
            self.state.last_round_bonus = result.time_bonus
            self.state.cumulative_score += result.total
            self.logger.info(
                f"回合成功: {level.display_name} +{result.total} "
                f"(bonus {result.time_bonus}), 總分 {self.state.cumulative_score}"
            )
            self._set_phase(RoundPhase.ROUND_WON)
            return True

    def advance_to_next_level(
        self,
        sources: Optional[Iterable[ImageSource]] = None,
        *,
        wait: bool = True,
    ) -> Optional[int]:
        """進入下一關；完成最後一關時回到 Idle 並依設定重置戰績。"""
        with self._lock:
            self._require_phase(RoundPhase.ROUND_WON)
            self._discard_round()

            if self.catalog.is_last(self.state.current_level_index):
                if self.reset_score_on_completion:
                    self.state.reset_campaign()
                else:
                    self.state.current_level_index = 0
                    self.state.reset_round()
                self.logger.info("已完成所有關卡")
                self._set_phase(RoundPhase.IDLE)
                return None

            self.state.current_level_index += 1
            if self._mode == MODE_PRESET:
                return self._start_preset()
            if sources is not None:
                self._sources = list(sources)
            self._selected = self.pipeline.select_sources(self._sources, self.level)
            round_id, token = self._begin_ingestion()
            selected = list(self._selected)
            required = self.level.required_photo_count
        return self._launch_ingestion(round_id, token, selected, required, wait)

    def reset(self) -> None:
        """放棄目前回合，保留關卡與分數。"""
        with self._lock:
            if self._ingest_cancel is not None:
                self._ingest_cancel.set()
                self._ingest_cancel = None
            self._round_id += 1
            self._discard_round()
            self.notice = None
            self.state.reset_round()
            self._set_phase(RoundPhase.IDLE)

    def close(self) -> None:
        with self._lock:
            self.reset()
            self.preview_store.release_all()

    # -- 內部 -------------------------------------------------------------

    def _require_phase(self, *phases: RoundPhase) -> None:
        if self.phase not in phases:
            allowed = ", ".join(phase.value for phase in phases)
            raise InvalidPhaseError(f"phase is {self.phase.value}, expected one of: {allowed}")

    def _begin_ingestion(self) -> tuple[int, CancellationToken]:
        self._discard_round()
        self.notice = None
        self._round_id += 1
        self.state.reset_round()
        token = CancellationToken()
        self._ingest_cancel = token
        self._set_phase(RoundPhase.INGESTING)
        return self._round_id, token

    def _start_preset(self) -> int:
        round_id, _token = self._begin_ingestion()
        self.deliver_ingestion_result(round_id, self.pipeline.build_preset(self.preset))
        return round_id

    def _launch_ingestion(
        self,
        round_id: int,
        token: CancellationToken,
        selected: List[ImageSource],
        required: int,
        wait: bool,
    ) -> int:
        if wait:
            self._run_ingestion(round_id, token, selected, required)
            return round_id

        thread = threading.Thread(
            target=self._run_ingestion,
            args=(round_id, token, selected, required),
            name=f"photo-chrono-ingest-{round_id}",
            daemon=True,
        )
        self._ingest_thread = thread
        thread.start()
        return round_id

    def _run_ingestion(
        self,
        round_id: int,
        token: CancellationToken,
        selected: List[ImageSource],
        required: int,
    ) -> None:
        try:
            result = self.pipeline.run(
                selected,
                required,
                layout=self.layout,
                cancel_token=token,
            )
        except Exception as exc:
            self.logger.exception(f"擷取流程失敗: {exc}")
            errors = ErrorHandler()
            errors.add_fatal(CODE_INGESTION_FAILED, str(exc))
            result = IngestionResult(photos=[], required_count=required, errors=errors)
        self.deliver_ingestion_result(round_id, result)

    def _start_playing(self, round_id: int) -> None:
        if self._timer_round_id == round_id:
            return
        self._timer_round_id = round_id
        level = self.level
        timer = CountdownTimer(
            level.time_limit_seconds,
            self.scheduler,
            on_tick=lambda remaining: self._on_tick(round_id, remaining),
            on_timeout=lambda: self._on_timeout(round_id),
            interval=self.tick_interval_sec,
            caution_ratio=self.caution_ratio,
            low_ratio=self.low_ratio,
            logger=self.logger,
        )
        self.state.time_remaining_seconds = level.time_limit_seconds
        self._set_phase(RoundPhase.PLAYING)
        self._replace_timer(timer)

    def _replace_timer(self, timer: Optional[CountdownTimer]) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = timer
        if timer is not None:
            timer.start()

    def _on_tick(self, round_id: int, remaining: int) -> None:
        with self._lock:
            if round_id != self._round_id or self.phase != RoundPhase.PLAYING:
                return
            self.state.time_remaining_seconds = remaining
            self._emit(GameEventType.TICK, time_remaining_seconds=remaining)

    def _on_timeout(self, round_id: int) -> None:
        with self._lock:
            if round_id != self._round_id or self.phase != RoundPhase.PLAYING:
                return
            self.logger.info(f"時間到: {self.level.display_name}")
            self._lose_round(CODE_TIME_UP, ErrorLevel.INFO, "Time's up!")

    def _lose_round(self, code: str, level: ErrorLevel, message: str) -> None:
        self._discard_round()
        self._set_phase(RoundPhase.ROUND_LOST)
        self._raise_notice(code, level, message)

    def _discard_round(self) -> None:
        self._replace_timer(None)
        self._release_photos(self.ordering.clear())

    def _release_photos(self, photos: Iterable[Photo]) -> None:
        for photo in photos:
            if photo.owns_preview:
                self.preview_store.release(photo.display_url)

    def _reorder(self, operation: Callable[[], bool]) -> bool:
        with self._lock:
            self._require_phase(RoundPhase.PLAYING)
            changed = operation()
            if changed:
                self._emit(GameEventType.ORDER_CHANGED)
            return changed

    def _raise_notice(self, code: str, level: ErrorLevel, message: str) -> None:
        self.notice = ProcessError(code=code, level=level, message=message)
        self.logger.warning(f"{code}: {message}")
        self._emit(GameEventType.NOTICE, code=code, message=message)

    def _set_phase(self, phase: RoundPhase) -> None:
        if self.state.round_phase == phase:
            return
        self.state.round_phase = phase
        self._emit(GameEventType.PHASE_CHANGED, phase=phase.value)

    def _emit(self, event_type: GameEventType, **fields) -> None:
        if self.listener is None:
            return
        fields.setdefault("round_id", self._round_id)
        fields.setdefault("level_index", self.state.current_level_index)
        self.listener(GameEvent(event_type=event_type, **fields))
