"""核心流程模組。"""

from .errors import ContractViolationError, InvalidPhaseError, LevelOutOfRangeError
from .ingestion import IngestionResult, PhotoIngestionPipeline
from .level_catalog import LevelCatalog
from .ordering import OrderingStore
from .preset import DEFAULT_PRESET, PresetPhoto
from .preview_store import PreviewStore
from .scoring import RoundScore, check_order, score_round, time_bonus
from .session import SessionController
from .source_scanner import SourceScanner
from .timer import CountdownTimer, ManualScheduler, ScheduledTask, Scheduler, ThreadingScheduler, time_band

__all__ = [
    "ContractViolationError",
    "InvalidPhaseError",
    "LevelOutOfRangeError",
    "IngestionResult",
    "PhotoIngestionPipeline",
    "LevelCatalog",
    "OrderingStore",
    "DEFAULT_PRESET",
    "PresetPhoto",
    "PreviewStore",
    "RoundScore",
    "check_order",
    "score_round",
    "time_bonus",
    "SessionController",
    "SourceScanner",
    "CountdownTimer",
    "ManualScheduler",
    "ScheduledTask",
    "Scheduler",
    "ThreadingScheduler",
    "time_band",
]
