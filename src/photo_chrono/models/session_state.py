"""遊戲進程狀態。"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RoundPhase(str, Enum):
    IDLE = "IDLE"
    INGESTING = "INGESTING"
    PLAYING = "PLAYING"
    CHECKING = "CHECKING"
    ROUND_WON = "ROUND_WON"
    ROUND_LOST = "ROUND_LOST"


@dataclass
class SessionState:
    current_level_index: int = 0
    cumulative_score: int = 0
    time_remaining_seconds: int = 0
    round_phase: RoundPhase = RoundPhase.IDLE
    last_round_bonus: int = 0

    def reset_round(self) -> None:
        self.time_remaining_seconds = 0
        self.last_round_bonus = 0

    def reset_campaign(self) -> None:
        self.current_level_index = 0
        self.cumulative_score = 0
        self.reset_round()

    def to_dict(self) -> dict[str, object]:
        return {
            "current_level_index": self.current_level_index,
            "cumulative_score": self.cumulative_score,
            "time_remaining_seconds": self.time_remaining_seconds,
            "round_phase": self.round_phase.value,
            "last_round_bonus": self.last_round_bonus,
        }
