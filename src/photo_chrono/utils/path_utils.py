"""路徑處理工具。"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional


def is_hidden(path: Path, root: Optional[Path] = None) -> bool:
    relative = path.relative_to(root) if root is not None else path
    return any(part.startswith(".") for part in relative.parts if part not in {".", ".."})


def should_exclude_path(path: Path, root: Optional[Path] = None, logger=None) -> bool:
    if is_hidden(path, root):
        return True

    try:
        if path.is_symlink() or os.path.islink(path):
            if logger is not None:
                logger.info(f"SKIPPED_SYMLINK: {path}")
            return True
    except OSError:
        if logger is not None:
            logger.info(f"SKIPPED_SYMLINK: {path}")
        return True

    return False
