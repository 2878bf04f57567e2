"""可協作取消工具。"""

from __future__ import annotations

import threading
from typing import Optional


class CancellationToken:
    def __init__(self) -> None:
        self._event = threading.Event()

    def set(self) -> None:
        self._event.set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """等待取消或逾時；已取消時回傳 True。"""
        return self._event.wait(timeout)
