"""photo_chrono：照片時間排序小遊戲引擎。"""

__version__ = "0.1.0"
