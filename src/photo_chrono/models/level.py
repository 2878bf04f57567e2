"""關卡定義。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Level:
    required_photo_count: int
    time_limit_seconds: int
    base_points: int
    display_name: str
    description: str = ""

    def __post_init__(self) -> None:
        if self.required_photo_count <= 0:
            raise ValueError("required_photo_count must be positive")
        if self.time_limit_seconds <= 0:
            raise ValueError("time_limit_seconds must be positive")
        if self.base_points < 0:
            raise ValueError("base_points must not be negative")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Level":
        return cls(
            required_photo_count=int(data["required_photo_count"]),
            time_limit_seconds=int(data["time_limit_seconds"]),
            base_points=int(data["base_points"]),
            display_name=str(data["display_name"]),
            description=str(data.get("description", "")),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "required_photo_count": self.required_photo_count,
            "time_limit_seconds": self.time_limit_seconds,
            "base_points": self.base_points,
            "display_name": self.display_name,
            "description": self.description,
        }
