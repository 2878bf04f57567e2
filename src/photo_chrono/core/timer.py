"""倒數計時器與可取消的重複排程。"""

from __future__ import annotations

import threading
from typing import Callable, List, Optional, Protocol, runtime_checkable

from ..utils.cancel import CancellationToken
from ..utils.logger import get_logger


class ScheduledTask:
    """重複排程的控制把手；`cancel()` 之後不會再觸發。"""

    def __init__(self, token: Optional[CancellationToken] = None) -> None:
        self._token = token or CancellationToken()

    def cancel(self) -> None:
        self._token.set()

    @property
    def cancelled(self) -> bool:
        return self._token.is_cancelled()


def time_band(remaining: int, limit: int, caution_ratio: float = 0.66, low_ratio: float = 0.33) -> str:
    """依剩餘比例回傳 ok / caution / low。"""
    progress = max(0.0, min(1.0, remaining / float(limit))) if limit > 0 else 0.0
    if progress <= low_ratio:
        return "low"
    if progress <= caution_ratio:
        return "caution"
    return "ok"


@runtime_checkable
class Scheduler(Protocol):
    """CountdownTimer 需要的排程介面。"""

    def schedule_repeating(self, interval: float, callback: Callable[[], None]) -> ScheduledTask:
        ...


class ThreadingScheduler:
    """每個排程一條背景執行緒，以 Event.wait 控制間隔。"""

    def schedule_repeating(self, interval: float, callback: Callable[[], None]) -> ScheduledTask:
        token = CancellationToken()
        task = ScheduledTask(token)

        def _loop() -> None:
            while not token.wait(interval):
                callback()

        thread = threading.Thread(target=_loop, name="photo-chrono-timer", daemon=True)
        thread.start()
        return task


class ManualScheduler:
    """由呼叫端推進時間的排程器，用於無介面執行與測試。"""

    def __init__(self) -> None:
        self.now = 0.0
        self._entries: List[list] = []

    def schedule_repeating(self, interval: float, callback: Callable[[], None]) -> ScheduledTask:
        task = ScheduledTask()
        self._entries.append([task, interval, self.now + interval, callback])
        return task

    @property
    def active_count(self) -> int:
        return sum(1 for entry in self._entries if not entry[0].cancelled)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            self._entries = [entry for entry in self._entries if not entry[0].cancelled]
            due = [entry for entry in self._entries if entry[2] <= target]
            if not due:
                break
            entry = min(due, key=lambda item: item[2])
            self.now = entry[2]
            entry[2] += entry[1]
            entry[3]()
        self.now = target


class CountdownTimer:
    """從 limit_seconds 倒數到 0，歸零時只觸發一次 on_timeout。"""

    def __init__(
        self,
        limit_seconds: int,
        scheduler: Scheduler,
        *,
        on_tick: Optional[Callable[[int], None]] = None,
        on_timeout: Optional[Callable[[], None]] = None,
        interval: float = 1.0,
        caution_ratio: float = 0.66,
        low_ratio: float = 0.33,
        logger=None,
    ) -> None:
        if limit_seconds <= 0:
            raise ValueError("limit_seconds must be positive")
        self.logger = logger or get_logger(self.__class__.__name__)
        self.limit_seconds = limit_seconds
        self.scheduler = scheduler
        self.on_tick = on_tick
        self.on_timeout = on_timeout
        self.interval = interval
        self.caution_ratio = caution_ratio
        self.low_ratio = low_ratio
        self._remaining = limit_seconds
        self._expired = False
        self._task: Optional[ScheduledTask] = None
        self._lock = threading.Lock()

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def expired(self) -> bool:
        return self._expired

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.cancelled and not self._expired

    @property
    def progress(self) -> float:
        return max(0.0, min(1.0, self._remaining / float(self.limit_seconds)))

    @property
    def band(self) -> str:
        return time_band(self._remaining, self.limit_seconds, self.caution_ratio, self.low_ratio)

    def start(self) -> None:
        if self._task is not None:
            raise RuntimeError("timer already started")
        self._task = self.scheduler.schedule_repeating(self.interval, self.tick)

    def cancel(self) -> None:
        if self._task is not None:
            self._task.cancel()

    def tick(self) -> None:
        with self._lock:
            if self._expired or (self._task is not None and self._task.cancelled):
                return
            self._remaining = max(0, self._remaining - 1)
            remaining = self._remaining
            fired_timeout = remaining == 0
            if fired_timeout:
                self._expired = True
                if self._task is not None:
                    self._task.cancel()

        if self.on_tick is not None:
            self.on_tick(remaining)
        if fired_timeout:
            self.logger.info("倒數結束")
            if self.on_timeout is not None:
                self.on_timeout()
