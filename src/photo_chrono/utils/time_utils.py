"""拍攝時間處理工具。"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"


def parse_exif_time(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.strptime(value.strip().rstrip("\x00"), EXIF_DATETIME_FORMAT)
    except ValueError:
        return None


def format_capture_date(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S")
