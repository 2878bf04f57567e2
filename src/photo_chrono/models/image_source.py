"""玩家提供的原始影像來源。"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional


@dataclass
class ImageSource:
    """單一影像來源：只保證有一個 handle 與可讀取的位元組。

    `data` 與 `path` 至少要有一個；`read_bytes()` 會延遲讀檔。
    """

    name: str
    data: Optional[bytes] = None
    path: Optional[Path] = None
    media_type: Optional[str] = None

    @classmethod
    def from_path(cls, path: Path, name: Optional[str] = None) -> "ImageSource":
        return cls(name=name or path.name, path=path)

    @property
    def ext(self) -> str:
        return Path(self.name).suffix.lower()

    def is_image(self, image_exts: Iterable[str]) -> bool:
        if self.media_type:
            return self.media_type.lower().startswith("image/")
        return self.ext in {str(item).lower() for item in image_exts}

    def read_bytes(self) -> bytes:
        if self.data is not None:
            return self.data
        if self.path is None:
            raise ValueError(f"來源沒有可讀取的內容: {self.name}")
        return self.path.read_bytes()
