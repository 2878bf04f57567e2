"""拼圖方塊對應的照片模型。"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Photo:
    id: str
    source_name: Optional[str]
    display_url: str
    capture_date: datetime
    date_source: str
    owns_preview: bool = False

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "source_name": self.source_name,
            "display_url": self.display_url,
            "capture_date": self.capture_date.isoformat(sep=" "),
            "date_source": self.date_source,
        }
