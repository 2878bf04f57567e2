"""遊戲進程事件模型。"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class GameEventType(str, Enum):
    PHASE_CHANGED = "PHASE_CHANGED"
    TICK = "TICK"
    NOTICE = "NOTICE"
    ORDER_CHANGED = "ORDER_CHANGED"
    STALE_RESULT_DISCARDED = "STALE_RESULT_DISCARDED"


@dataclass
class GameEvent:
    event_type: GameEventType
    timestamp: datetime = field(default_factory=datetime.now)
    round_id: Optional[int] = None
    phase: Optional[str] = None
    level_index: Optional[int] = None
    time_remaining_seconds: Optional[int] = None
    code: Optional[str] = None
    message: Optional[str] = None
