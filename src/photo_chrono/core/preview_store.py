"""預覽圖資源的持有與釋放。"""

from __future__ import annotations

import threading
import uuid
from typing import Optional, Tuple

PREVIEW_URL_PREFIX = "preview://"


class PreviewStore:
    """以 `preview://<id>` 網址保存預覽圖位元組。

    照片離開排序區時必須呼叫 `release`，否則資源會隨回合累積。
    """

    def __init__(self) -> None:
        self._items: dict[str, Tuple[bytes, str]] = {}
        self._lock = threading.Lock()

    def put(self, data: bytes, media_type: str) -> str:
        url = f"{PREVIEW_URL_PREFIX}{uuid.uuid4().hex}"
        with self._lock:
            self._items[url] = (data, media_type)
        return url

    def get(self, url: str) -> Optional[Tuple[bytes, str]]:
        with self._lock:
            return self._items.get(url)

    def release(self, url: str) -> bool:
        with self._lock:
            return self._items.pop(url, None) is not None

    def release_all(self) -> int:
        with self._lock:
            count = len(self._items)
            self._items.clear()
        return count

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
