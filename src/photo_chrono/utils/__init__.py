"""工具模組。"""

from . import image_utils, path_utils, time_utils
from .cancel import CancellationToken

__all__ = ["image_utils", "path_utils", "time_utils", "CancellationToken"]
