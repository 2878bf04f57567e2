"""預設設定值。"""

DEFAULT_CONFIG = {
    "levels": [
        {
            "required_photo_count": 3,
            "time_limit_seconds": 60,
            "base_points": 100,
            "display_name": "Level 1: Warm-up",
            "description": "Sort 3 photos from oldest to newest.",
        },
        {
            "required_photo_count": 4,
            "time_limit_seconds": 55,
            "base_points": 200,
            "display_name": "Level 2: Getting Started",
            "description": "Sort 4 photos before the clock runs out.",
        },
        {
            "required_photo_count": 5,
            "time_limit_seconds": 50,
            "base_points": 300,
            "display_name": "Level 3: Time Traveler",
            "description": "5 photos, a little less time.",
        },
        {
            "required_photo_count": 6,
            "time_limit_seconds": 40,
            "base_points": 400,
            "display_name": "Level 4: Historian",
            "description": "6 photos. Think fast.",
        },
        {
            "required_photo_count": 7,
            "time_limit_seconds": 35,
            "base_points": 500,
            "display_name": "Level 5: Chronomaster",
            "description": "7 photos in 35 seconds.",
        },
    ],
    "ingest": {
        "batch_size": 3,
        "parallel_workers": 3,
        "selection": "prefix",
    },
    "preview": {
        "max_dimension_desktop": 1200,
        "max_dimension_mobile": 600,
        "jpeg_quality": 85,
        "layout": "desktop",
    },
    "file_extensions": {
        "image": [".jpg", ".jpeg", ".png", ".heic", ".heif", ".tif", ".tiff", ".bmp", ".gif", ".webp"],
    },
    "timer": {
        "tick_interval_sec": 1.0,
        "caution_ratio": 0.66,
        "low_ratio": 0.33,
    },
    "scoring": {
        "time_bonus_multiplier": 2,
    },
    "session": {
        "reset_score_on_completion": True,
    },
    "logging": {
        "file": None,
    },
}
