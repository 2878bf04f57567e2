"""呼叫端誤用時拋出的例外。"""

from __future__ import annotations


class LevelOutOfRangeError(IndexError):
    """關卡索引不在目錄範圍內。"""


class ContractViolationError(ValueError):
    """重排操作與目前內容不符。"""


class InvalidPhaseError(RuntimeError):
    """目前回合階段不允許此操作。"""
