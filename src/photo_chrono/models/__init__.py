"""資料模型模組。"""

from .error_record import ErrorLevel, ProcessError
from .game_event import GameEvent, GameEventType
from .image_source import ImageSource
from .level import Level
from .photo import Photo
from .session_state import RoundPhase, SessionState

__all__ = [
    "ErrorLevel",
    "ProcessError",
    "GameEvent",
    "GameEventType",
    "ImageSource",
    "Level",
    "Photo",
    "RoundPhase",
    "SessionState",
]
