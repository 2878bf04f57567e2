"""資料夾掃描：取得自訂模式的影像來源。"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from ..config import ConfigManager
from ..models import ImageSource
from ..utils import path_utils
from ..utils.logger import get_logger


class SourceScanner:
    def __init__(self, config: Optional[ConfigManager] = None, logger=None) -> None:
        self.config = config or ConfigManager()
        self.logger = logger or get_logger(self.__class__.__name__)

    def scan(self, root: Path) -> list[ImageSource]:
        """回傳 root 下所有檔案，依相對路徑排序；影像過濾交給擷取流程。"""
        results: list[ImageSource] = []
        if not root.is_dir():
            self.logger.warning(f"來源資料夾不存在: {root}")
            return results

        for dirpath, dirnames, filenames in os.walk(root):
            current_dir = Path(dirpath)
            dirnames[:] = [
                name
                for name in dirnames
                if not path_utils.should_exclude_path(current_dir / name, root, self.logger)
            ]
            for name in filenames:
                file_path = current_dir / name
                if path_utils.should_exclude_path(file_path, root, self.logger):
                    continue
                if not file_path.is_file():
                    continue
                relative = file_path.relative_to(root).as_posix()
                results.append(ImageSource.from_path(file_path, name=relative))

        results.sort(key=lambda item: item.name)
        return results
